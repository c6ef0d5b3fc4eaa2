"""Data models for hubhook."""

from hubhook.models.config import DEFAULT_SECRET_ENV, WebhookConfig
from hubhook.models.secret import SecretHolder, WebhookSecret

__all__ = [
    "DEFAULT_SECRET_ENV",
    "SecretHolder",
    "WebhookConfig",
    "WebhookSecret",
]
