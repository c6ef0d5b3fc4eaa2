"""Verify a webhook request and decode its payload."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from hubhook.models.secret import SecretHolder, WebhookSecret, resolve_secret
from hubhook.utils.logging import get_logger
from hubhook.webhook.decoder import decode_payload
from hubhook.webhook.errors import RejectionKind, WebhookRejection
from hubhook.webhook.signature import (
    SIGNATURE_HEADER,
    parse_signature_header,
    verify_signature,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

T = TypeVar("T")

logger = get_logger("webhook.extract")


def get_header(headers: Mapping[str, Any], name: str) -> Any:
    """Look up a header by name, ignoring case.

    Args:
        headers: Any header mapping, case-sensitive or not.
        name: The header name.

    Returns:
        The header value, or None if absent.
    """
    value = headers.get(name)
    if value is not None:
        return value

    lowered = name.lower()
    for key, candidate in headers.items():
        key_text = key.decode("latin-1") if isinstance(key, bytes) else key
        if key_text.lower() == lowered:
            return candidate

    return None


def _log_rejection(rejection: WebhookRejection) -> None:
    logger.warning(
        "Webhook request rejected",
        extra={"kind": rejection.kind.value, "reason": rejection.message},
    )


def _read_signature(headers: Mapping[str, Any], header_name: str) -> bytes:
    try:
        return parse_signature_header(get_header(headers, header_name))
    except WebhookRejection as e:
        _log_rejection(e)
        raise


def _verify_and_decode_body(
    secret: WebhookSecret,
    body: bytes,
    signature: bytes,
    target: type[T],
    strict: bool,
) -> T:
    try:
        verify_signature(secret, body, signature)
        # Only bytes that passed verification reach the decoder
        return decode_payload(body, target, strict=strict)
    except WebhookRejection as e:
        _log_rejection(e)
        raise


def verify_and_decode(
    secret: WebhookSecret | SecretHolder,
    headers: Mapping[str, Any],
    body: bytes,
    target: type[T],
    *,
    header_name: str = SIGNATURE_HEADER,
    strict: bool = True,
) -> T:
    """Verify a webhook request whose body has already been read.

    Args:
        secret: The shared secret, or a holder of the current one.
        headers: The request headers.
        body: The exact raw body bytes received.
        target: The payload type to decode into.
        header_name: The signature header name.
        strict: Disable implicit type coercion while decoding.

    Returns:
        The decoded payload.

    Raises:
        WebhookRejection: If the signature is missing, malformed or wrong,
            or if the body does not decode into ``target``.
    """
    key = resolve_secret(secret)
    signature = _read_signature(headers, header_name)
    return _verify_and_decode_body(key, bytes(body), signature, target, strict)


async def extract_webhook_event(
    secret: WebhookSecret | SecretHolder,
    headers: Mapping[str, Any],
    read_body: Callable[[], Awaitable[bytes]],
    target: type[T],
    *,
    header_name: str = SIGNATURE_HEADER,
    strict: bool = True,
) -> T:
    """Verify a webhook request, reading its body from the transport.

    The signature header is checked before the body is read, so requests
    without a usable signature are refused without waiting on the body.

    Args:
        secret: The shared secret, or a holder of the current one.
        headers: The request headers.
        read_body: Coroutine function returning the raw body bytes.
        target: The payload type to decode into.
        header_name: The signature header name.
        strict: Disable implicit type coercion while decoding.

    Returns:
        The decoded payload.

    Raises:
        WebhookRejection: As for ``verify_and_decode``, plus BODY_READ_ERROR
            when ``read_body`` fails.
    """
    key = resolve_secret(secret)
    signature = _read_signature(headers, header_name)

    try:
        body = await read_body()
    except Exception as e:
        raise _body_read_rejection() from e

    return _verify_and_decode_body(key, bytes(body), signature, target, strict)


def read_webhook_event(
    secret: WebhookSecret | SecretHolder,
    headers: Mapping[str, Any],
    read_body: Callable[[], bytes],
    target: type[T],
    *,
    header_name: str = SIGNATURE_HEADER,
    strict: bool = True,
) -> T:
    """Blocking counterpart of ``extract_webhook_event``."""
    key = resolve_secret(secret)
    signature = _read_signature(headers, header_name)

    try:
        body = read_body()
    except Exception as e:
        raise _body_read_rejection() from e

    return _verify_and_decode_body(key, bytes(body), signature, target, strict)


def _body_read_rejection() -> WebhookRejection:
    rejection = WebhookRejection(RejectionKind.BODY_READ_ERROR)
    _log_rejection(rejection)
    return rejection
