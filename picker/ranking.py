"""Display ordering for fetched pull requests."""

from typing import Iterable

from models.data_models import PRStatus, PullRequestRecord

# Lower sorts first. Open and draft share the top tier.
STATUS_PRIORITY = {
    PRStatus.OPEN: 0,
    PRStatus.DRAFT: 0,
    PRStatus.MERGED: 1,
    PRStatus.CLOSED: 2,
}


def rank(records: Iterable[PullRequestRecord]) -> list[PullRequestRecord]:
    """Order records by updated_at descending, then by status tier.
    
    Two stable passes: the tier sort settles ties left by the recency sort.
    The input is not modified.
    """
    by_tier = sorted(records, key=lambda pr: STATUS_PRIORITY[pr.status])
    return sorted(by_tier, key=lambda pr: pr.updated_at, reverse=True)
