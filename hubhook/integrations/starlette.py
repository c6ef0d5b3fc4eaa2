"""Starlette integration: verified webhook endpoints."""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, TypeVar

from starlette.responses import PlainTextResponse

from hubhook.models.secret import SecretHolder, WebhookSecret
from hubhook.webhook.errors import WebhookRejection
from hubhook.webhook.extract import extract_webhook_event
from hubhook.webhook.signature import SIGNATURE_HEADER

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from starlette.requests import Request
    from starlette.responses import Response

T = TypeVar("T")

# Attribute on app.state holding the secret or a SecretHolder
STATE_ATTR = "webhook_secret"


def secret_from_state(request: Request) -> WebhookSecret | SecretHolder:
    """Return the secret bound to the application serving ``request``.

    Raises:
        RuntimeError: If the application has no webhook secret configured.
    """
    secret = getattr(request.app.state, STATE_ATTR, None)
    if not isinstance(secret, WebhookSecret | SecretHolder):
        raise RuntimeError(f"app.state.{STATE_ATTR} must be a WebhookSecret or SecretHolder")
    return secret


def rejection_response(rejection: WebhookRejection) -> PlainTextResponse:
    """Render a rejection as a plain-text 400 response."""
    return PlainTextResponse(rejection.message, status_code=rejection.status_code)


def webhook_endpoint(
    target: type[T],
    *,
    header_name: str = SIGNATURE_HEADER,
    strict: bool = True,
) -> Callable[
    [Callable[[Request, T], Awaitable[Response]]],
    Callable[[Request], Awaitable[Response]],
]:
    """Wrap a handler so it only ever sees verified, decoded payloads.

    Usage::

        @dataclass
        class Event:
            action: str

        @webhook_endpoint(Event)
        async def echo(request: Request, event: Event) -> Response:
            return PlainTextResponse(event.action)

        app = Starlette(routes=[Route("/", echo, methods=["POST"])])
        app.state.webhook_secret = WebhookSecret.from_str(os.environ["GITHUB_WEBHOOK_SECRET"])

    Args:
        target: The payload type to decode into.
        header_name: The signature header name.
        strict: Disable implicit type coercion while decoding.

    Returns:
        Decorator producing a Starlette endpoint.
    """

    def decorator(
        handler: Callable[[Request, T], Awaitable[Response]],
    ) -> Callable[[Request], Awaitable[Response]]:
        @functools.wraps(handler)
        async def endpoint(request: Request) -> Response:
            try:
                event = await extract_webhook_event(
                    secret_from_state(request),
                    request.headers,
                    request.body,
                    target,
                    header_name=header_name,
                    strict=strict,
                )
            except WebhookRejection as e:
                return rejection_response(e)
            return await handler(request, event)

        return endpoint

    return decorator
