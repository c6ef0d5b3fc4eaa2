"""Webhook signature parsing and verification."""

import binascii
import hashlib
import hmac

from hubhook.models.secret import WebhookSecret
from hubhook.webhook.errors import RejectionKind, WebhookRejection

SIGNATURE_HEADER = "X-Hub-Signature-256"
SIGNATURE_PREFIX = "sha256="


def _header_text(value: str | bytes | None) -> str | None:
    """Return the header as visible ASCII text, or None if it is not text."""
    if value is None:
        return None

    if isinstance(value, bytes | bytearray):
        try:
            value = bytes(value).decode("ascii")
        except UnicodeDecodeError:
            return None

    # Header values may only hold visible ASCII and tabs
    if not all(c == "\t" or " " <= c <= "~" for c in value):
        return None

    return value


def parse_signature_header(value: str | bytes | None) -> bytes:
    """Extract the claimed digest from an X-Hub-Signature-256 header value.

    Args:
        value: The raw header value, or None if the request omitted it.

    Returns:
        The decoded signature bytes. Their length is not checked here.

    Raises:
        WebhookRejection: SIGNATURE_MISSING, SIGNATURE_PREFIX_MISSING or
            SIGNATURE_MALFORMED.
    """
    text = _header_text(value)
    if text is None:
        raise WebhookRejection(RejectionKind.SIGNATURE_MISSING)

    if not text.startswith(SIGNATURE_PREFIX):
        raise WebhookRejection(RejectionKind.SIGNATURE_PREFIX_MISSING)

    try:
        return binascii.unhexlify(text[len(SIGNATURE_PREFIX) :])
    except (binascii.Error, ValueError) as e:
        raise WebhookRejection(RejectionKind.SIGNATURE_MALFORMED) from e


def compute_signature(secret: WebhookSecret, body: bytes) -> bytes:
    """Compute the HMAC-SHA256 digest of a body.

    Args:
        secret: The shared webhook secret.
        body: The raw request body bytes.

    Returns:
        The 32-byte digest.
    """
    return hmac.new(secret.value, body, hashlib.sha256).digest()


def format_signature_header(secret: WebhookSecret, body: bytes) -> str:
    """Build the header value a sender would attach to ``body``."""
    return SIGNATURE_PREFIX + compute_signature(secret, body).hex()


def verify_signature(secret: WebhookSecret, body: bytes, signature: bytes) -> None:
    """Verify a claimed signature against the body.

    The comparison uses ``hmac.compare_digest``, whose running time does not
    depend on where the two digests differ.

    Args:
        secret: The shared webhook secret.
        body: The raw request body bytes.
        signature: The decoded signature from the request header.

    Raises:
        WebhookRejection: SIGNATURE_MISMATCH if the signature does not match.
    """
    expected = compute_signature(secret, body)

    if not hmac.compare_digest(expected, signature):
        raise WebhookRejection(RejectionKind.SIGNATURE_MISMATCH)
