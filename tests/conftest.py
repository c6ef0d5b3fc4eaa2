"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

import pytest

from hubhook.models.secret import SecretHolder, WebhookSecret
from tests.fixtures.webhook_payloads import (
    ECHO_SECRET,
    create_ping_payload,
    create_pr_payload,
    encode,
    sign,
)

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def reset_env() -> Generator[None]:
    """Reset environment variables after each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def mock_env() -> dict[str, str]:
    """Standard environment variables for testing."""
    return {
        "GITHUB_WEBHOOK_SECRET": "test-webhook-secret",
        "LOG_LEVEL": "DEBUG",
    }


@pytest.fixture
def set_mock_env(mock_env: dict[str, str]) -> Generator[None]:
    """Set mock environment variables for a test."""
    for key, value in mock_env.items():
        os.environ[key] = value
    yield


@pytest.fixture
def secret() -> WebhookSecret:
    """The shared secret used by the end-to-end scenarios."""
    return WebhookSecret.from_str(ECHO_SECRET)


@pytest.fixture
def secret_holder(secret: WebhookSecret) -> SecretHolder:
    """Holder wrapping the shared test secret."""
    return SecretHolder(secret)


@pytest.fixture
def sample_pr_payload() -> dict[str, Any]:
    """Sample GitHub PR webhook payload."""
    return create_pr_payload(pr_number=42, title="Add new feature", labels=["bug", "ci"])


@pytest.fixture
def sample_ping_payload() -> dict[str, Any]:
    """Sample GitHub ping webhook payload."""
    return create_ping_payload()


@pytest.fixture
def signed_pr_request(sample_pr_payload: dict[str, Any]) -> tuple[dict[str, str], bytes]:
    """Headers and body of a correctly signed pull_request delivery."""
    body = encode(sample_pr_payload)
    headers = {
        "X-GitHub-Event": "pull_request",
        "X-Hub-Signature-256": sign(body, ECHO_SECRET),
        "Content-Type": "application/json",
    }
    return headers, body
