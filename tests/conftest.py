"""Shared pytest fixtures and configuration."""

from datetime import datetime, timedelta, timezone
import pytest

from models.data_models import PRStatus, PullRequestRecord

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def test_env(monkeypatch):
    """
    Set up valid test environment variables so config can be loaded
    during tests without requiring real credentials.
    """
    for name in ("GITHUB_API_URL", "PR_PICKER_STRATEGY", "PR_PICKER_SELECTOR", "PR_PICKER_PREVIEW"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_test_token_1234567890")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    
    return {
        "github_token": "ghp_test_token_1234567890",
        "log_level": "DEBUG",
    }


@pytest.fixture
def invalid_env(monkeypatch):
    """
    Set up missing environment variables for testing validation.
    """
    monkeypatch.setenv("GITHUB_TOKEN", "")


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_record():
    """Factory for PullRequestRecord with sensible defaults."""
    def _make(
        number=1,
        repository_name="owner/repo",
        status=PRStatus.OPEN,
        updated_ago=timedelta(minutes=5),
        title=None,
        body="Description",
    ):
        updated_at = NOW - updated_ago
        return PullRequestRecord(
            number=number,
            title=title if title is not None else f"PR {number}",
            url=f"https://github.com/{repository_name}/pull/{number}",
            body=body,
            created_at=updated_at - timedelta(days=1),
            updated_at=updated_at,
            repository_name=repository_name,
            status=status,
        )
    return _make
