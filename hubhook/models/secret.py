"""Shared webhook secret models."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field


@dataclass(frozen=True)
class WebhookSecret:
    """The pre-shared key used to sign webhook deliveries."""

    value: bytes = field(repr=False)

    def __post_init__(self) -> None:
        """Normalize text keys to bytes and reject empty keys."""
        if isinstance(self.value, str):
            object.__setattr__(self, "value", self.value.encode("utf-8"))
        elif isinstance(self.value, bytearray | memoryview):
            object.__setattr__(self, "value", bytes(self.value))

        if not isinstance(self.value, bytes):
            raise TypeError(f"Secret must be bytes or str, got {type(self.value).__name__}")

        if not self.value:
            raise ValueError("Webhook secret cannot be empty")

    @classmethod
    def from_str(cls, value: str) -> WebhookSecret:
        """Create a secret from text, encoded as UTF-8."""
        return cls(value.encode("utf-8"))


class SecretHolder:
    """Shared read-only reference to the current webhook secret.

    Rotation swaps the whole reference, so a reader sees either the old or the
    new secret and never a mix of both.
    """

    def __init__(self, secret: WebhookSecret | bytes | str) -> None:
        """Initialize the holder.

        Args:
            secret: The initial secret.
        """
        self._secret = _as_secret(secret)
        self._lock = threading.Lock()

    def get(self) -> WebhookSecret:
        """Return the current secret."""
        return self._secret

    def rotate(self, secret: WebhookSecret | bytes | str) -> WebhookSecret:
        """Replace the current secret.

        Args:
            secret: The new secret.

        Returns:
            The secret that was replaced.
        """
        new_secret = _as_secret(secret)
        with self._lock:
            previous = self._secret
            self._secret = new_secret
        return previous

    def __repr__(self) -> str:
        return "SecretHolder(<redacted>)"


def _as_secret(secret: WebhookSecret | bytes | str) -> WebhookSecret:
    if isinstance(secret, WebhookSecret):
        return secret
    return WebhookSecret(secret)  # type: ignore[arg-type]


def resolve_secret(source: WebhookSecret | SecretHolder) -> WebhookSecret:
    """Return the secret to use for a single verification.

    Args:
        source: A secret or a holder of the current secret.

    Returns:
        The secret, read once.
    """
    if isinstance(source, SecretHolder):
        return source.get()
    if isinstance(source, WebhookSecret):
        return source
    raise TypeError(
        f"Expected WebhookSecret or SecretHolder, got {type(source).__name__}"
    )
