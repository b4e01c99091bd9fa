"""Tests for request construction, sending and rate limit bookkeeping."""

import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest
import respx

from ghrest import GitHubClient
from ghrest.errors import (
    AbuseRateLimitError,
    AcceptedError,
    ErrorResponse,
    RateLimitError,
    RedirectionError,
    TwoFactorAuthError,
)
from ghrest.models import RequestBody
from ghrest.rate_limit import Rate, RateLimitCategory

from .conftest import BASE_URL, HOST, RATE_HEADERS, TEST_TOKEN


class _Body(RequestBody):
    title: str | None = None
    draft: bool | None = None


class TestNewRequest:
    """Tests for GitHubClient.new_request."""

    def test_relative_url_resolved_against_base(self, client: GitHubClient) -> None:
        request = client.new_request("GET", "repos/o/r")
        assert str(request.url) == "https://api.github.test/repos/o/r"

    def test_default_headers(self, client: GitHubClient) -> None:
        request = client.new_request("GET", "user")
        assert request.headers["Accept"] == "application/vnd.github+json"
        assert request.headers["User-Agent"].startswith("ghrest/")
        assert request.headers["X-GitHub-Api-Version"] == "2022-11-28"
        assert request.headers["Authorization"] == f"Bearer {TEST_TOKEN}"

    def test_no_authorization_without_token(self) -> None:
        client = GitHubClient(base_url=BASE_URL)
        request = client.new_request("GET", "user")
        assert "Authorization" not in request.headers

    def test_base_url_requires_trailing_slash(self) -> None:
        client = GitHubClient(base_url="https://api.github.test/api/v3")
        with pytest.raises(ValueError, match="trailing slash"):
            client.new_request("GET", "user")

    def test_body_drops_unset_fields_and_keeps_false(self, client: GitHubClient) -> None:
        request = client.new_request("POST", "things", body=_Body(draft=False))
        assert json.loads(request.content) == {"draft": False}
        assert request.headers["Content-Type"] == "application/json"

    def test_no_body_no_content_type(self, client: GitHubClient) -> None:
        request = client.new_request("DELETE", "things/1")
        assert "Content-Type" not in request.headers
        assert request.content == b""

    def test_header_override(self, client: GitHubClient) -> None:
        request = client.new_request("GET", "user", headers={"Accept": "text/plain"})
        assert request.headers["Accept"] == "text/plain"

    def test_body_keeps_caller_content_type(self, client: GitHubClient) -> None:
        request = client.new_request(
            "PATCH",
            "things/1",
            body={"name": "x"},
            headers={"Content-Type": "application/merge-patch+json"},
        )
        assert request.headers["Content-Type"] == "application/merge-patch+json"
        assert json.loads(request.content) == {"name": "x"}


class TestCopies:
    """Tests for with_auth_token and with_enterprise_urls."""

    def test_with_auth_token(self, client: GitHubClient) -> None:
        other = client.with_auth_token("ghp_other")
        assert other.token == "ghp_other"
        assert client.token == TEST_TOKEN
        assert other.base_url == client.base_url

    @pytest.mark.parametrize(
        ("given", "expected"),
        [
            ("https://ghe.example.com", "https://ghe.example.com/api/v3/"),
            ("https://ghe.example.com/", "https://ghe.example.com/api/v3/"),
            ("https://ghe.example.com/api/v3/", "https://ghe.example.com/api/v3/"),
            ("https://api.ghe.example.com/", "https://api.ghe.example.com/"),
        ],
    )
    def test_with_enterprise_urls(self, client: GitHubClient, given: str, expected: str) -> None:
        assert client.with_enterprise_urls(given).base_url == expected


class TestDo:
    """Tests for sending requests and classifying responses."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_records_rate_limit(self, client: GitHubClient) -> None:
        respx.get(host=HOST, path="/user").mock(
            return_value=httpx.Response(200, json={"login": "octocat"}, headers=RATE_HEADERS)
        )

        response = await client.do(client.new_request("GET", "user"))

        assert response.json() == {"login": "octocat"}
        assert response.rate is not None
        assert response.rate.limit == 5000
        assert response.rate.remaining == 4999
        assert client.rate_limits[RateLimitCategory.CORE].remaining == 4999

    @pytest.mark.asyncio
    @respx.mock
    async def test_search_requests_tracked_separately(self, client: GitHubClient) -> None:
        respx.get(host=HOST, path="/search/issues").mock(
            return_value=httpx.Response(
                200, json={}, headers={**RATE_HEADERS, "x-ratelimit-limit": "30"}
            )
        )

        await client.do(client.new_request("GET", "search/issues"))

        assert client.rate_limits[RateLimitCategory.SEARCH].limit == 30
        assert RateLimitCategory.CORE not in client.rate_limits

    @pytest.mark.asyncio
    @respx.mock
    async def test_error_response(self, client: GitHubClient) -> None:
        respx.post(host=HOST, path="/repos/o/r/issues").mock(
            return_value=httpx.Response(
                422,
                json={
                    "message": "Validation Failed",
                    "errors": [{"resource": "Issue", "field": "title", "code": "missing_field"}],
                    "documentation_url": "https://docs.github.com/rest",
                },
            )
        )

        with pytest.raises(ErrorResponse) as exc_info:
            await client.do(client.new_request("POST", "repos/o/r/issues", body={}))

        err = exc_info.value
        assert err.status_code == 422
        assert err.message == "Validation Failed"
        assert err.errors[0].code == "missing_field"
        assert "POST https://api.github.test/repos/o/r/issues: 422 Validation Failed" in str(err)
        assert "missing_field error caused by title field on Issue resource" in str(err)

    @pytest.mark.asyncio
    @respx.mock
    async def test_accepted(self, client: GitHubClient) -> None:
        respx.post(host=HOST, path="/repos/o/r/forks").mock(
            return_value=httpx.Response(202, json={"id": 1})
        )

        with pytest.raises(AcceptedError) as exc_info:
            await client.do(client.new_request("POST", "repos/o/r/forks"))

        assert exc_info.value.json() == {"id": 1}

    @pytest.mark.asyncio
    @respx.mock
    async def test_two_factor_required(self, client: GitHubClient) -> None:
        respx.get(host=HOST, path="/user").mock(
            return_value=httpx.Response(
                401,
                json={"message": "Must specify two-factor authentication OTP code."},
                headers={"X-GitHub-OTP": "required; app"},
            )
        )

        with pytest.raises(TwoFactorAuthError):
            await client.do(client.new_request("GET", "user"))

    @pytest.mark.asyncio
    @respx.mock
    async def test_primary_rate_limit_then_local_block(self, client: GitHubClient) -> None:
        reset = int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp())
        route = respx.get(host=HOST, path="/user").mock(
            return_value=httpx.Response(
                403,
                json={"message": "API rate limit exceeded"},
                headers={
                    **RATE_HEADERS,
                    "x-ratelimit-remaining": "0",
                    "x-ratelimit-reset": str(reset),
                },
            )
        )

        with pytest.raises(RateLimitError) as exc_info:
            await client.do(client.new_request("GET", "user"))
        assert exc_info.value.rate.remaining == 0
        assert route.call_count == 1

        # Known to be exhausted: the second call never reaches the network.
        with pytest.raises(RateLimitError) as exc_info:
            await client.do(client.new_request("GET", "user"))
        assert exc_info.value.response is None
        assert "not making remote request" in str(exc_info.value)
        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_rate_limit_endpoint_bypasses_local_block(self, client: GitHubClient) -> None:
        client.rate_limits[RateLimitCategory.CORE] = Rate(
            limit=60, remaining=0, reset=datetime.now(timezone.utc) + timedelta(hours=1)
        )
        respx.get(host=HOST, path="/rate_limit").mock(
            return_value=httpx.Response(200, json={"resources": {}})
        )

        response = await client.do(client.new_request("GET", "rate_limit"))

        assert response.status_code == 200

    @pytest.mark.asyncio
    @respx.mock
    async def test_expired_rate_limit_does_not_block(self, client: GitHubClient) -> None:
        client.rate_limits[RateLimitCategory.CORE] = Rate(
            limit=60, remaining=0, reset=datetime.now(timezone.utc) - timedelta(minutes=1)
        )
        route = respx.get(host=HOST, path="/user").mock(
            return_value=httpx.Response(200, json={"login": "octocat"})
        )

        await client.do(client.new_request("GET", "user"))

        assert route.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_exhausted_rate_without_reset_does_not_block(
        self, client: GitHubClient
    ) -> None:
        client.rate_limits[RateLimitCategory.CORE] = Rate(limit=60, remaining=0, reset=None)
        route = respx.get(host=HOST, path="/users/octocat").mock(
            return_value=httpx.Response(200, json={"login": "octocat"})
        )

        response = await client.do(client.new_request("GET", "users/octocat"))

        assert response.status_code == 200
        assert route.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_sleep_on_rate_limit(self, monkeypatch: pytest.MonkeyPatch) -> None:
        client = GitHubClient(TEST_TOKEN, base_url=BASE_URL, sleep_on_rate_limit=True)
        client.rate_limits[RateLimitCategory.CORE] = Rate(
            limit=60, remaining=0, reset=datetime.now(timezone.utc) + timedelta(seconds=30)
        )
        slept: list[float] = []

        async def fake_sleep(delay: float) -> None:
            slept.append(delay)

        monkeypatch.setattr("ghrest.client.asyncio.sleep", fake_sleep)
        respx.get(host=HOST, path="/user").mock(
            return_value=httpx.Response(200, json={"login": "octocat"})
        )

        await client.do(client.new_request("GET", "user"))

        assert len(slept) == 1
        assert 0 < slept[0] <= 30

    @pytest.mark.asyncio
    @respx.mock
    async def test_secondary_rate_limit(self, client: GitHubClient) -> None:
        route = respx.get(host=HOST, path="/user").mock(
            return_value=httpx.Response(
                403,
                json={
                    "message": "You have exceeded a secondary rate limit.",
                    "documentation_url": "https://docs.github.com/rest/overview/"
                    "rate-limits-for-the-rest-api#about-secondary-rate-limits",
                },
                headers={"Retry-After": "120"},
            )
        )

        with pytest.raises(AbuseRateLimitError) as exc_info:
            await client.do(client.new_request("GET", "user"))
        assert exc_info.value.retry_after == timedelta(seconds=120)

        with pytest.raises(AbuseRateLimitError) as exc_info:
            await client.do(client.new_request("GET", "user"))
        assert exc_info.value.response is None
        assert route.call_count == 1


class TestCheck:
    """Tests for boolean status endpoints."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_no_content_is_true(self, client: GitHubClient) -> None:
        respx.get(host=HOST, path="/user/starred/o/r").mock(return_value=httpx.Response(204))
        assert await client.check(client.new_request("GET", "user/starred/o/r")) is True

    @pytest.mark.asyncio
    @respx.mock
    async def test_not_found_is_false(self, client: GitHubClient) -> None:
        respx.get(host=HOST, path="/user/starred/o/r").mock(
            return_value=httpx.Response(404, json={"message": "Not Found"})
        )
        assert await client.check(client.new_request("GET", "user/starred/o/r")) is False

    @pytest.mark.asyncio
    @respx.mock
    async def test_other_errors_propagate(self, client: GitHubClient) -> None:
        respx.get(host=HOST, path="/user/starred/o/r").mock(
            return_value=httpx.Response(500, json={"message": "boom"})
        )
        with pytest.raises(ErrorResponse):
            await client.check(client.new_request("GET", "user/starred/o/r"))


class TestGetRedirectURL:
    """Tests for endpoints that answer with a download location."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_found(self, client: GitHubClient) -> None:
        respx.get(host=HOST, path="/repos/o/r/actions/runs/1/logs").mock(
            return_value=httpx.Response(302, headers={"Location": "https://blob.test/logs.zip"})
        )

        url = await client.get_redirect_url("repos/o/r/actions/runs/1/logs")

        assert url == "https://blob.test/logs.zip"

    @pytest.mark.asyncio
    @respx.mock
    async def test_follows_moved_permanently(self, client: GitHubClient) -> None:
        respx.get(host=HOST, path="/repos/o/r/actions/runs/1/logs").mock(
            return_value=httpx.Response(
                301, headers={"Location": "https://api.github.test/repositories/9/actions/runs/1/logs"}
            )
        )
        respx.get(host=HOST, path="/repositories/9/actions/runs/1/logs").mock(
            return_value=httpx.Response(302, headers={"Location": "https://blob.test/logs.zip"})
        )

        url = await client.get_redirect_url("repos/o/r/actions/runs/1/logs", max_redirects=1)

        assert url == "https://blob.test/logs.zip"

    @pytest.mark.asyncio
    @respx.mock
    async def test_too_many_redirects(self, client: GitHubClient) -> None:
        respx.get(host=HOST, path="/repos/o/r/actions/runs/1/logs").mock(
            return_value=httpx.Response(301, headers={"Location": "https://elsewhere.test/x"})
        )

        with pytest.raises(RedirectionError) as exc_info:
            await client.get_redirect_url("repos/o/r/actions/runs/1/logs", max_redirects=0)

        assert exc_info.value.location == "https://elsewhere.test/x"

    @pytest.mark.asyncio
    @respx.mock
    async def test_unexpected_status(self, client: GitHubClient) -> None:
        respx.get(host=HOST, path="/repos/o/r/actions/runs/1/logs").mock(
            return_value=httpx.Response(200, json={})
        )

        with pytest.raises(ErrorResponse, match="unexpected status code: 200"):
            await client.get_redirect_url("repos/o/r/actions/runs/1/logs")


class TestResponse:
    """Tests for response metadata decoding."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_token_expiration(self, client: GitHubClient) -> None:
        respx.get(host=HOST, path="/user").mock(
            return_value=httpx.Response(
                200,
                json={},
                headers={"GitHub-Authentication-Token-Expiration": "2030-01-02 03:04:05 UTC"},
            )
        )

        response = await client.do(client.new_request("GET", "user"))

        assert response.token_expiration == datetime(2030, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
