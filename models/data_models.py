"""Data models for pull requests gathered from GitHub."""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field


class PRStatus(str, Enum):
    """Lifecycle state of a pull request.
    
    Draft and merged are folded into this single value when a record is
    built, so ranking and display never look at raw API flags.
    """
    OPEN = "OPEN"
    DRAFT = "DRAFT"
    MERGED = "MERGED"
    CLOSED = "CLOSED"


def derive_status(state: str, is_draft: bool = False, is_merged: bool = False) -> PRStatus:
    """Collapse a raw state plus draft/merged flags into one PRStatus.
    
    Args:
        state: Raw state string ("open"/"closed" from search, or
               "OPEN"/"CLOSED"/"MERGED" from GraphQL)
        is_draft: Whether the PR is marked as draft
        is_merged: Whether the PR has been merged
    
    Returns:
        PRStatus
    """
    normalized = (state or "").lower()
    if is_merged or normalized == "merged":
        return PRStatus.MERGED
    if normalized == "closed":
        return PRStatus.CLOSED
    if is_draft:
        return PRStatus.DRAFT
    return PRStatus.OPEN


class PullRequestRecord(BaseModel):
    """Normalized PR, independent of the fetch strategy that produced it.
    
    (repository_name, number) identifies a record within one run.
    """
    model_config = ConfigDict(frozen=True)
    
    number: int = Field(..., ge=1)
    title: str
    url: str
    body: Optional[str] = None  # None (absent) and "" both preview as empty
    created_at: AwareDatetime
    updated_at: AwareDatetime
    repository_name: str = Field(..., pattern=r"^[^/\s]+/[^/\s]+$")  # "owner/name"
    status: PRStatus
    
    @property
    def key(self) -> tuple[str, int]:
        return (self.repository_name, self.number)


class Scope(BaseModel):
    """Set of repositories a query considers.
    
    repository=None means every repository of the author.
    """
    model_config = ConfigDict(frozen=True)
    
    repository: Optional[str] = None
    
    @property
    def multi_repo(self) -> bool:
        return self.repository is None


class MaterializedPR(BaseModel):
    """A record paired with the path of its preview artifact.
    
    The artifact path is the correlation key between a selector line and
    the record; it is never persisted.
    """
    model_config = ConfigDict(frozen=True)
    
    record: PullRequestRecord
    artifact_path: Path


class SelectionOutcome(str, Enum):
    SELECTED = "selected"
    CANCELLED = "cancelled"


class Selection(BaseModel):
    """Result of one interactive selection."""
    model_config = ConfigDict(frozen=True)
    
    outcome: SelectionOutcome
    record: Optional[PullRequestRecord] = None
    
    @classmethod
    def selected(cls, record: PullRequestRecord) -> "Selection":
        return cls(outcome=SelectionOutcome.SELECTED, record=record)
    
    @classmethod
    def cancelled(cls) -> "Selection":
        return cls(outcome=SelectionOutcome.CANCELLED)
