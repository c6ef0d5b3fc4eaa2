"""AWS Lambda integration for API Gateway proxy events."""

from __future__ import annotations

import base64
import functools
from typing import TYPE_CHECKING, Any, TypeVar

from hubhook.webhook.extract import read_webhook_event
from hubhook.webhook.signature import SIGNATURE_HEADER

if TYPE_CHECKING:
    from hubhook.models.secret import SecretHolder, WebhookSecret
    from hubhook.webhook.errors import WebhookRejection


T = TypeVar("T")


def event_body(event: dict[str, Any]) -> bytes:
    """Return the raw body bytes of an API Gateway proxy event.

    Args:
        event: Lambda event from API Gateway.

    Returns:
        The body bytes, base64-decoded when ``isBase64Encoded`` is set.

    Raises:
        binascii.Error: If a base64-encoded body is not valid base64.
    """
    body = event.get("body") or ""

    if event.get("isBase64Encoded"):
        return base64.b64decode(body, validate=True)

    return body.encode() if isinstance(body, str) else bytes(body)


def verify_lambda_event(
    event: dict[str, Any],
    secret: WebhookSecret | SecretHolder,
    target: type[T],
    *,
    header_name: str = SIGNATURE_HEADER,
    strict: bool = True,
) -> T:
    """Verify and decode the webhook carried by an API Gateway proxy event.

    Args:
        event: Lambda event from API Gateway.
        secret: The shared secret, or a holder of the current one.
        target: The payload type to decode into.
        header_name: The signature header name.
        strict: Disable implicit type coercion while decoding.

    Returns:
        The decoded payload.

    Raises:
        WebhookRejection: If the request must be refused. An undecodable
            base64 body is reported as BODY_READ_ERROR.
    """
    return read_webhook_event(
        secret,
        event.get("headers") or {},
        functools.partial(event_body, event),
        target,
        header_name=header_name,
        strict=strict,
    )


def rejection_to_lambda_response(rejection: WebhookRejection) -> dict[str, Any]:
    """Create a Lambda response for a rejection.

    Args:
        rejection: The rejection to render.

    Returns:
        Lambda response dictionary.
    """
    return {
        "statusCode": int(rejection.status_code),
        "headers": {
            "Content-Type": "text/plain; charset=utf-8",
        },
        "body": rejection.message,
    }
