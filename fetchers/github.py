"""GitHub search API fetcher for the author's pull requests.

Uses the flat issue-search endpoint, where each item carries a
denormalized repository_url instead of a nested repository object.
"""

import logging
from typing import Any

from fetchers.base import PullRequestSource, build_search_query, parse_timestamp
from models.data_models import PullRequestRecord, Scope, derive_status
from utils.errors import RemoteQueryError

logger = logging.getLogger(__name__)


def repository_from_api_url(repository_url: str) -> str:
    """Turn ".../repos/owner/name" into "owner/name"."""
    parts = repository_url.rstrip("/").split("/")
    if len(parts) < 2 or "repos" not in parts[:-2]:
        raise RemoteQueryError(f"Unexpected repository_url in search result: {repository_url}")
    return "/".join(parts[-2:])


class GitHubSearchFetcher(PullRequestSource):
    """Fetch pull requests through GET /search/issues."""
    
    def resolve_author(self) -> str:
        user = self._get("/user")
        login = user.get("login") if isinstance(user, dict) else None
        if not login:
            raise RemoteQueryError("GitHub /user response has no login")
        return login
    
    def fetch_records(self, author: str, scope: Scope) -> list[PullRequestRecord]:
        params = {
            "q": build_search_query(author, scope),
            "per_page": self.per_page,
        }
        logger.info(f"Searching pull requests: {params['q']}")
        data = self._get("/search/issues", params=params)
        
        if data.get("incomplete_results"):
            logger.warning("GitHub reported incomplete search results")
        
        items = data.get("items", [])
        logger.debug(f"Search total_count={data.get('total_count')}, page size {len(items)}")
        return [self._parse_item(item) for item in items]
    
    def _parse_item(self, item: dict[str, Any]) -> PullRequestRecord:
        """Build PullRequestRecord from a search result item."""
        pull_request = item.get("pull_request") or {}
        try:
            return PullRequestRecord(
                number=item["number"],
                title=item.get("title", ""),
                url=item.get("html_url", ""),
                body=item.get("body"),
                created_at=parse_timestamp(item["created_at"]),
                updated_at=parse_timestamp(item["updated_at"]),
                repository_name=repository_from_api_url(item["repository_url"]),
                status=derive_status(
                    item.get("state", "open"),
                    is_draft=bool(item.get("draft")),
                    is_merged=pull_request.get("merged_at") is not None,
                ),
            )
        except (KeyError, ValueError) as e:
            raise RemoteQueryError(f"Malformed search result item: {e}") from e
