"""Verify GitHub-style webhook signatures and decode their JSON payloads."""

from hubhook.models.config import WebhookConfig
from hubhook.models.secret import SecretHolder, WebhookSecret
from hubhook.webhook.decoder import decode_payload
from hubhook.webhook.errors import DecodeError, RejectionKind, WebhookRejection
from hubhook.webhook.extract import extract_webhook_event, read_webhook_event, verify_and_decode
from hubhook.webhook.signature import (
    SIGNATURE_HEADER,
    format_signature_header,
    parse_signature_header,
    verify_signature,
)

__version__ = "0.1.0"

__all__ = [
    "SIGNATURE_HEADER",
    "DecodeError",
    "RejectionKind",
    "SecretHolder",
    "WebhookConfig",
    "WebhookRejection",
    "WebhookSecret",
    "__version__",
    "decode_payload",
    "extract_webhook_event",
    "format_signature_header",
    "parse_signature_header",
    "read_webhook_event",
    "verify_and_decode",
    "verify_signature",
]
