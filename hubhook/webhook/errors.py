"""Rejections raised while verifying and decoding a webhook request."""

from enum import Enum
from http import HTTPStatus
from typing import Any


class RejectionKind(str, Enum):
    """Machine-readable reason a webhook request was rejected."""

    SIGNATURE_MISSING = "signature_missing"
    SIGNATURE_PREFIX_MISSING = "signature_prefix_missing"
    SIGNATURE_MALFORMED = "signature_malformed"
    BODY_READ_ERROR = "body_read_error"
    SIGNATURE_MISMATCH = "signature_mismatch"
    DECODE_ERROR = "decode_error"


# Fixed client-facing messages; DecodeError builds its own
REJECTION_MESSAGES: dict[RejectionKind, str] = {
    RejectionKind.SIGNATURE_MISSING: "signature missing",
    RejectionKind.SIGNATURE_PREFIX_MISSING: "signature prefix missing",
    RejectionKind.SIGNATURE_MALFORMED: "signature malformed",
    RejectionKind.BODY_READ_ERROR: "error reading body",
    RejectionKind.SIGNATURE_MISMATCH: "signature mismatch",
}


class WebhookRejection(Exception):
    """Raised when a webhook request must be refused.

    Every rejection is a client error: ``status_code`` is always 400.
    """

    status_code: int = HTTPStatus.BAD_REQUEST

    def __init__(self, kind: RejectionKind, message: str | None = None) -> None:
        """Initialize the rejection.

        Args:
            kind: The rejection kind.
            message: Client-facing message. Defaults to the fixed message for ``kind``.
        """
        if message is None:
            message = REJECTION_MESSAGES[kind]
        super().__init__(message)
        self.kind = kind
        self.message = message


class DecodeError(WebhookRejection):
    """Raised when a verified body does not decode into the target type."""

    def __init__(
        self,
        path: str,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        """Initialize the decode error.

        Args:
            path: JSON path of the first failure, ``.`` for the document root.
            detail: Underlying error text.
            errors: All validation errors reported by the decoder.
        """
        super().__init__(RejectionKind.DECODE_ERROR, f"{path}: {detail}")
        self.path = path
        self.detail = detail
        self.errors = errors or []
