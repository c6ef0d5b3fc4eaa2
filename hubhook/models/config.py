"""Configuration models for hubhook."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Any

from hubhook.models.secret import SecretHolder, WebhookSecret
from hubhook.webhook.signature import SIGNATURE_HEADER

# Environment variable holding the secret unless configured otherwise
DEFAULT_SECRET_ENV = "GITHUB_WEBHOOK_SECRET"

HEADER_NAME_PATTERN = re.compile(r"^[A-Za-z0-9-]+$")


@dataclass
class WebhookConfig:
    """Configuration for verifying webhook deliveries."""

    secret: str = field(repr=False)
    signature_header: str = SIGNATURE_HEADER
    strict: bool = True

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not isinstance(self.secret, str) or not self.secret:
            raise ValueError("secret must be a non-empty string")

        if not isinstance(self.signature_header, str) or not HEADER_NAME_PATTERN.match(
            self.signature_header
        ):
            raise ValueError(f"Invalid signature_header: {self.signature_header!r}")

        if not isinstance(self.strict, bool):
            raise ValueError(f"strict must be a boolean, got {self.strict!r}")

    @classmethod
    def from_env(cls, env_var: str = DEFAULT_SECRET_ENV) -> WebhookConfig:
        """Load configuration from the environment.

        Args:
            env_var: Name of the variable holding the secret.

        Returns:
            WebhookConfig instance.

        Raises:
            ValueError: If the variable is unset or empty.
        """
        secret = os.environ.get(env_var, "")
        if not secret:
            raise ValueError(f"{env_var} not configured")
        return cls(secret=secret)

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> WebhookConfig:
        """Load configuration from a parsed config file.

        The secret is taken from ``secret`` or, failing that, from the
        environment variable named by ``secret_env``.

        Args:
            config: Configuration dictionary (e.g., from .hubhook.yml).

        Returns:
            WebhookConfig instance.
        """
        secret = config.get("secret")
        if not secret:
            env_var = config.get("secret_env", DEFAULT_SECRET_ENV)
            if not isinstance(env_var, str) or not env_var:
                raise ValueError(f"secret_env must be a non-empty string, got {env_var!r}")
            secret = os.environ.get(env_var, "")
            if not secret:
                raise ValueError(f"No secret in config and {env_var} not configured")

        return cls(
            secret=secret,
            signature_header=config.get("signature_header", SIGNATURE_HEADER),
            strict=config.get("strict", True),
        )

    def webhook_secret(self) -> WebhookSecret:
        """Build the secret value object."""
        return WebhookSecret.from_str(self.secret)

    def holder(self) -> SecretHolder:
        """Build a shared holder for the configured secret."""
        return SecretHolder(self.webhook_secret())
