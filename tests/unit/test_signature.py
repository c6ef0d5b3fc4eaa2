"""Unit tests for webhook signature parsing and verification."""

import hashlib
import hmac
from unittest.mock import patch

import pytest

from hubhook.models.secret import WebhookSecret
from hubhook.webhook.errors import RejectionKind, WebhookRejection
from hubhook.webhook.signature import (
    compute_signature,
    format_signature_header,
    parse_signature_header,
    verify_signature,
)
from tests.fixtures.webhook_payloads import ECHO_BODY, ECHO_SECRET, ECHO_SIGNATURE


class TestParseSignatureHeader:
    """Tests for X-Hub-Signature-256 header parsing."""

    def test_valid_header(self) -> None:
        """Test that a well-formed header yields the digest bytes."""
        assert parse_signature_header("sha256=00ff10") == b"\x00\xff\x10"

    def test_valid_header_bytes(self) -> None:
        """Test that a raw bytes header value is accepted."""
        assert parse_signature_header(b"sha256=abcd") == b"\xab\xcd"

    def test_uppercase_hex(self) -> None:
        """Test that uppercase hex digits decode."""
        assert parse_signature_header("sha256=ABCD") == b"\xab\xcd"

    def test_missing_header(self) -> None:
        """Test that an absent header is reported as missing."""
        with pytest.raises(WebhookRejection) as exc_info:
            parse_signature_header(None)

        assert exc_info.value.kind == RejectionKind.SIGNATURE_MISSING
        assert exc_info.value.message == "signature missing"

    def test_non_text_bytes_header(self) -> None:
        """Test that a header that is not ASCII text is reported as missing."""
        with pytest.raises(WebhookRejection) as exc_info:
            parse_signature_header(b"sha256=\xff\xfe")

        assert exc_info.value.kind == RejectionKind.SIGNATURE_MISSING

    def test_non_visible_characters(self) -> None:
        """Test that control or non-ASCII characters make the header unreadable."""
        for value in ("sha256=ab\ncd", "sha256=é"):
            with pytest.raises(WebhookRejection) as exc_info:
                parse_signature_header(value)

            assert exc_info.value.kind == RejectionKind.SIGNATURE_MISSING

    def test_missing_prefix(self) -> None:
        """Test that a value without sha256= is rejected."""
        with pytest.raises(WebhookRejection) as exc_info:
            parse_signature_header("x")

        assert exc_info.value.kind == RejectionKind.SIGNATURE_PREFIX_MISSING
        assert exc_info.value.message == "signature prefix missing"

    def test_wrong_algorithm_prefix(self) -> None:
        """Test that the legacy sha1= header format is not accepted."""
        with pytest.raises(WebhookRejection) as exc_info:
            parse_signature_header("sha1=0123456789abcdef0123456789abcdef01234567")

        assert exc_info.value.kind == RejectionKind.SIGNATURE_PREFIX_MISSING

    def test_prefix_is_case_sensitive(self) -> None:
        """Test that SHA256= is not treated as the prefix."""
        with pytest.raises(WebhookRejection) as exc_info:
            parse_signature_header("SHA256=abcd")

        assert exc_info.value.kind == RejectionKind.SIGNATURE_PREFIX_MISSING

    @pytest.mark.parametrize("value", ["sha256=x", "sha256=abc", "sha256=zz", "sha256=ab cd"])
    def test_malformed_hex(self, value: str) -> None:
        """Test that non-hex, odd-length or spaced digests are malformed."""
        with pytest.raises(WebhookRejection) as exc_info:
            parse_signature_header(value)

        assert exc_info.value.kind == RejectionKind.SIGNATURE_MALFORMED
        assert exc_info.value.message == "signature malformed"

    def test_short_digest_is_not_malformed(self) -> None:
        """Test that length is left for the comparison step."""
        assert parse_signature_header("sha256=01") == b"\x01"

    def test_empty_digest(self) -> None:
        """Test that an empty digest parses to empty bytes."""
        assert parse_signature_header("sha256=") == b""


class TestComputeSignature:
    """Tests for HMAC-SHA256 computation."""

    def test_known_digest(self) -> None:
        """Test the digest of the reference delivery."""
        secret = WebhookSecret.from_str(ECHO_SECRET)

        assert "sha256=" + compute_signature(secret, ECHO_BODY).hex() == ECHO_SIGNATURE

    def test_matches_hmac_module(self) -> None:
        """Test that the digest equals a plain hmac computation."""
        secret = WebhookSecret(b"test-secret")
        body = b'{"action": "opened"}'

        assert compute_signature(secret, body) == hmac.new(
            b"test-secret", body, hashlib.sha256
        ).digest()
        assert len(compute_signature(secret, body)) == 32

    def test_format_signature_header(self) -> None:
        """Test building a header value the way a sender would."""
        secret = WebhookSecret.from_str(ECHO_SECRET)

        assert format_signature_header(secret, ECHO_BODY) == ECHO_SIGNATURE


class TestVerifySignature:
    """Tests for signature verification."""

    @pytest.fixture
    def secret(self) -> WebhookSecret:
        """Secret for verification tests."""
        return WebhookSecret.from_str(ECHO_SECRET)

    def test_valid_signature(self, secret: WebhookSecret) -> None:
        """Test that a valid signature passes verification."""
        signature = parse_signature_header(ECHO_SIGNATURE)

        # Should not raise
        verify_signature(secret, ECHO_BODY, signature)

    def test_short_signature(self, secret: WebhookSecret) -> None:
        """Test that a digest of the wrong length is a mismatch."""
        with pytest.raises(WebhookRejection) as exc_info:
            verify_signature(secret, ECHO_BODY, b"\x01")

        assert exc_info.value.kind == RejectionKind.SIGNATURE_MISMATCH
        assert exc_info.value.message == "signature mismatch"

    def test_wrong_secret(self) -> None:
        """Test that a signature made with another secret fails."""
        signature = parse_signature_header(ECHO_SIGNATURE)

        with pytest.raises(WebhookRejection) as exc_info:
            verify_signature(WebhookSecret(b"43"), ECHO_BODY, signature)

        assert exc_info.value.kind == RejectionKind.SIGNATURE_MISMATCH

    def test_any_flipped_body_byte(self, secret: WebhookSecret) -> None:
        """Test that flipping any single body byte breaks verification."""
        signature = parse_signature_header(ECHO_SIGNATURE)

        for i in range(len(ECHO_BODY)):
            tampered = bytearray(ECHO_BODY)
            tampered[i] ^= 0x01
            with pytest.raises(WebhookRejection) as exc_info:
                verify_signature(secret, bytes(tampered), signature)

            assert exc_info.value.kind == RejectionKind.SIGNATURE_MISMATCH

    def test_any_flipped_signature_byte(self, secret: WebhookSecret) -> None:
        """Test that flipping any single signature byte breaks verification."""
        signature = parse_signature_header(ECHO_SIGNATURE)

        for i in range(len(signature)):
            tampered = bytearray(signature)
            tampered[i] ^= 0x80
            with pytest.raises(WebhookRejection):
                verify_signature(secret, ECHO_BODY, bytes(tampered))

    def test_uses_constant_time_comparison(self, secret: WebhookSecret) -> None:
        """Test that digests are compared with hmac.compare_digest."""
        signature = parse_signature_header(ECHO_SIGNATURE)

        with patch(
            "hubhook.webhook.signature.hmac.compare_digest", return_value=True
        ) as mock_compare:
            verify_signature(secret, ECHO_BODY, signature)

        mock_compare.assert_called_once_with(signature, signature)

    def test_mismatch_does_not_leak_digest(self, secret: WebhookSecret) -> None:
        """Test that the rejection carries no digest or secret material."""
        expected_hex = compute_signature(secret, ECHO_BODY).hex()

        with pytest.raises(WebhookRejection) as exc_info:
            verify_signature(secret, ECHO_BODY, b"\x00" * 32)

        assert expected_hex not in str(exc_info.value)
        assert str(exc_info.value) == "signature mismatch"
