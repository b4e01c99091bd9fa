"""Tests for mapping HTTP responses to exceptions."""

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from ghrest.errors import (
    AbuseRateLimitError,
    AcceptedError,
    ErrorDetail,
    ErrorResponse,
    RateLimitError,
    TwoFactorAuthError,
    check_response,
    sanitize_url,
)


def _response(status: int, **kwargs) -> httpx.Response:
    return httpx.Response(
        status, request=httpx.Request("GET", "https://api.github.test/user"), **kwargs
    )


class TestCheckResponse:
    @pytest.mark.parametrize("status", [200, 201, 204, 299])
    def test_success(self, status: int) -> None:
        check_response(_response(status))

    def test_accepted_keeps_body(self) -> None:
        with pytest.raises(AcceptedError) as exc_info:
            check_response(_response(202, content=b'{"id": "47"}'))
        assert exc_info.value.raw == b'{"id": "47"}'
        assert exc_info.value.json() == {"id": "47"}

    def test_empty_error_body(self) -> None:
        with pytest.raises(ErrorResponse) as exc_info:
            check_response(_response(500))
        assert exc_info.value.message == ""
        assert exc_info.value.errors == []

    def test_non_json_error_body(self) -> None:
        with pytest.raises(ErrorResponse) as exc_info:
            check_response(_response(502, content=b"<html>bad gateway</html>"))
        assert exc_info.value.status_code == 502

    def test_plain_string_errors(self) -> None:
        with pytest.raises(ErrorResponse) as exc_info:
            check_response(
                _response(422, json={"message": "Validation Failed", "errors": ["name is taken"]})
            )
        assert str(exc_info.value.errors[0]) == "name is taken"

    def test_block(self) -> None:
        with pytest.raises(ErrorResponse) as exc_info:
            check_response(
                _response(
                    451,
                    json={
                        "message": "Repository access blocked",
                        "block": {"reason": "dmca", "html_url": "https://example.test/dmca"},
                    },
                )
            )
        assert exc_info.value.block is not None
        assert exc_info.value.block.reason == "dmca"

    def test_two_factor(self) -> None:
        with pytest.raises(TwoFactorAuthError):
            check_response(
                _response(401, json={"message": "OTP"}, headers={"X-GitHub-OTP": "required; sms"})
            )

    def test_plain_unauthorized(self) -> None:
        with pytest.raises(ErrorResponse) as exc_info:
            check_response(_response(401, json={"message": "Bad credentials"}))
        assert type(exc_info.value) is ErrorResponse

    @pytest.mark.parametrize("status", [403, 429])
    def test_primary_rate_limit(self, status: int) -> None:
        with pytest.raises(RateLimitError) as exc_info:
            check_response(
                _response(
                    status,
                    json={"message": "API rate limit exceeded"},
                    headers={
                        "X-RateLimit-Limit": "60",
                        "X-RateLimit-Remaining": "0",
                        "X-RateLimit-Reset": "1700000000",
                    },
                )
            )
        rate = exc_info.value.rate
        assert rate.limit == 60
        assert rate.reset == datetime.fromtimestamp(1700000000, tz=timezone.utc)
        assert "rate reset at" in str(exc_info.value)

    def test_secondary_rate_limit_by_message(self) -> None:
        with pytest.raises(AbuseRateLimitError) as exc_info:
            check_response(
                _response(
                    403,
                    json={"message": "You have exceeded a secondary rate limit"},
                    headers={"Retry-After": "30"},
                )
            )
        assert exc_info.value.retry_after == timedelta(seconds=30)

    def test_secondary_rate_limit_legacy_doc_url(self) -> None:
        with pytest.raises(AbuseRateLimitError) as exc_info:
            check_response(
                _response(
                    403,
                    json={
                        "message": "Slow down",
                        "documentation_url": "https://docs.github.com/rest#abuse-rate-limits",
                    },
                )
            )
        assert exc_info.value.retry_after is None

    def test_secondary_rate_limit_retry_from_reset(self) -> None:
        reset = datetime.now(timezone.utc) + timedelta(minutes=5)
        with pytest.raises(AbuseRateLimitError) as exc_info:
            check_response(
                _response(
                    429,
                    json={"message": "secondary rate limit"},
                    headers={
                        "X-RateLimit-Limit": "5000",
                        "X-RateLimit-Remaining": "1",
                        "X-RateLimit-Reset": str(int(reset.timestamp())),
                    },
                )
            )
        # Remaining is not zero, so the reset header is not used.
        assert exc_info.value.retry_after is None


class TestFormatting:
    def test_error_detail(self) -> None:
        detail = ErrorDetail(resource="Label", field="name", code="already_exists")
        assert str(detail) == "already_exists error caused by name field on Label resource"

    def test_sanitize_url(self) -> None:
        url = httpx.URL("https://api.github.test/x?client_id=id&client_secret=s3cr3t")
        assert sanitize_url(url) == "https://api.github.test/x?client_id=id&client_secret=REDACTED"

    def test_error_response_without_request(self) -> None:
        err = ErrorResponse(httpx.Response(404), message="Not Found")
        assert str(err) == "404 Not Found"
