"""Webhook signature validation and payload parsing.

https://docs.github.com/en/webhooks/using-webhooks/validating-webhook-deliveries
"""

from __future__ import annotations

import hashlib
import hmac
import json
from collections.abc import Callable
from typing import Any
from urllib.parse import parse_qs

from pydantic import ValidationError

from .errors import GitHubError
from .events import EVENT_TYPES, EventModel

SHA1_SIGNATURE_HEADER = "X-Hub-Signature"
SHA256_SIGNATURE_HEADER = "X-Hub-Signature-256"
EVENT_TYPE_HEADER = "X-GitHub-Event"
DELIVERY_ID_HEADER = "X-GitHub-Delivery"

# Form field holding the JSON document for form-encoded deliveries.
PAYLOAD_FORM_PARAM = "payload"

_HASHES: dict[str, Callable[[], Any]] = {
    "sha1": hashlib.sha1,
    "sha256": hashlib.sha256,
    "sha512": hashlib.sha512,
}


class WebhookError(GitHubError):
    """A webhook delivery could not be validated or decoded."""


class SignatureError(WebhookError):
    """The delivery signature is missing, malformed or does not match."""


def _as_bytes(value: str | bytes | None) -> bytes:
    if value is None:
        return b""
    return value.encode() if isinstance(value, str) else value


def _message_mac(signature: str) -> tuple[bytes, Callable[[], Any]]:
    if not signature:
        raise SignatureError("missing signature")
    prefix, sep, digest = signature.partition("=")
    if not sep:
        raise SignatureError(f"error parsing signature {signature!r}")
    hash_func = _HASHES.get(prefix)
    if hash_func is None:
        raise SignatureError(f"unknown hash type prefix: {prefix!r}")
    try:
        mac = bytes.fromhex(digest)
    except ValueError as exc:
        raise SignatureError(f"error decoding signature {signature!r}: {exc}") from exc
    return mac, hash_func


def validate_signature(signature: str, payload: bytes, secret: str | bytes) -> None:
    """Check *signature* (``sha256=<hex>`` and friends) against *payload*.

    Raises:
        SignatureError: The signature is missing, malformed or does not match.
    """
    expected, hash_func = _message_mac(signature)
    actual = hmac.new(_as_bytes(secret), payload, hash_func).digest()
    if not hmac.compare_digest(expected, actual):
        raise SignatureError("payload signature check failed")


def validate_payload(
    content_type: str,
    body: bytes,
    signature: str | None,
    secret: str | bytes | None,
) -> bytes:
    """Return the JSON payload of a webhook delivery after validating it.

    *content_type* may carry parameters (``application/json; charset=utf-8``).
    The signature covers the raw body, so for form-encoded deliveries it is
    checked before the ``payload`` field is extracted. Validation is skipped
    only when neither a secret nor a signature is present.
    """
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type == "application/json":
        payload = body
    elif media_type == "application/x-www-form-urlencoded":
        form = parse_qs(body.decode("utf-8", errors="replace"))
        payload = form.get(PAYLOAD_FORM_PARAM, [""])[0].encode()
    else:
        raise WebhookError(f"webhook request has unsupported Content-Type {content_type!r}")

    secret_bytes = _as_bytes(secret)
    if secret_bytes or signature:
        validate_signature(signature or "", body, secret_bytes)
    return payload


def message_types() -> list[str]:
    """Return every known ``X-GitHub-Event`` name, sorted."""
    return sorted(EVENT_TYPES)


def event_for_type(message_type: str) -> type[EventModel] | None:
    return EVENT_TYPES.get(message_type)


def parse_webhook(message_type: str, payload: bytes | str) -> EventModel:
    """Decode *payload* into the model registered for *message_type*.

    Raises:
        WebhookError: The event type is unknown or the payload is not a
            JSON object matching the model.
    """
    model = event_for_type(message_type)
    if model is None:
        raise WebhookError(f"unknown X-GitHub-Event in message: {message_type}")
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise WebhookError(f"malformed {message_type} payload: {exc}") from exc
    if not isinstance(data, dict):
        raise WebhookError(f"malformed {message_type} payload: expected a JSON object")
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise WebhookError(f"malformed {message_type} payload: {exc}") from exc
