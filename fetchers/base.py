"""Common interface for the GitHub pull request fetch strategies.

Both strategies resolve to the same PullRequestRecord shape, so callers
past this boundary never branch on which one produced the records.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

import requests

from models.data_models import PullRequestRecord, Scope
from utils.errors import AuthError, RemoteQueryError

logger = logging.getLogger(__name__)

MAX_PER_PAGE = 100
REQUEST_TIMEOUT = 30


def parse_timestamp(value: str) -> datetime:
    """Parse a GitHub ISO-8601 timestamp ("2025-01-15T10:30:00Z")."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def build_search_query(author: str, scope: Scope) -> str:
    """Build the issue-search query shared by both strategies."""
    query = f"author:{author} is:pr"
    if scope.repository:
        query += f" repo:{scope.repository}"
    return query


class PullRequestSource(ABC):
    """Fetch the author's pull requests for a scope.
    
    Subclasses implement the identity lookup and the PR query; this class
    owns the HTTP plumbing and maps failures onto AuthError and
    RemoteQueryError. Requests are never retried.
    """
    
    def __init__(self, token: str, api_url: str = "https://api.github.com", per_page: int = MAX_PER_PAGE):
        """Initialize GitHub API client.
        
        Args:
            token: GitHub personal access token for authentication
            api_url: REST API base URL (GitHub Enterprise uses https://host/api/v3)
            per_page: Page size, capped at 100 (one page is all that is fetched)
        """
        if not token:
            raise AuthError("Missing GitHub token")
        self.token = token
        self.base_url = api_url.rstrip("/")
        self.per_page = min(max(per_page, 1), MAX_PER_PAGE)
        self.headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {token}",
            "X-GitHub-Api-Version": "2022-11-28"
        }
    
    def _check_response(self, response: requests.Response) -> Any:
        """Raise a typed error for a failed response, else return its JSON."""
        remaining = response.headers.get("X-RateLimit-Remaining")
        limit = response.headers.get("X-RateLimit-Limit")
        if remaining and limit:
            logger.debug(f"Rate limit: {remaining}/{limit} remaining")
        
        status = response.status_code
        if status < 400:
            try:
                return response.json()
            except ValueError as e:
                raise RemoteQueryError(
                    "GitHub returned a non-JSON response", status_code=status
                ) from e
        
        detail = response.text[:200]
        try:
            payload = response.json()
            if isinstance(payload, dict) and payload.get("message"):
                detail = payload["message"]
        except ValueError:
            pass
        
        if status == 429 or (status == 403 and remaining == "0"):
            raise RemoteQueryError(
                f"GitHub rate limit exceeded: {detail}", status_code=status, detail=detail
            )
        if status in (401, 403):
            logger.error(f"Authentication error: {status} - {detail}")
            raise AuthError(f"GitHub rejected the token ({status}): {detail}")
        raise RemoteQueryError(
            f"GitHub API error {status}: {detail}", status_code=status, detail=detail
        )
    
    def _get(self, path: str, params: Optional[dict] = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug(f"GET {url} {params or ''}")
        try:
            response = requests.get(url, headers=self.headers, params=params, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            raise RemoteQueryError(f"Request to {url} failed: {e}", detail=str(e)) from e
        return self._check_response(response)
    
    def _post(self, url: str, json: dict) -> Any:
        logger.debug(f"POST {url}")
        try:
            response = requests.post(url, headers=self.headers, json=json, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            raise RemoteQueryError(f"Request to {url} failed: {e}", detail=str(e)) from e
        return self._check_response(response)
    
    @abstractmethod
    def resolve_author(self) -> str:
        """Return the login of the token's owner."""
    
    @abstractmethod
    def fetch_records(self, author: str, scope: Scope) -> list[PullRequestRecord]:
        """Query one page of the author's PRs within scope."""
    
    def fetch(self, scope: Scope, author: Optional[str] = None) -> list[PullRequestRecord]:
        """Fetch PRs for scope in discovery order.
        
        Args:
            scope: Repositories to consider
            author: Login to query for; defaults to the token's owner
        
        Returns:
            List of PullRequestRecord (at most per_page items)
        
        Raises:
            AuthError: Token rejected
            RemoteQueryError: Transport failure or error payload
        """
        if not author:
            author = self.resolve_author()
            logger.info(f"Authenticated as: {author}")
        
        records = self.fetch_records(author, scope)
        logger.info(
            f"Fetched {len(records)} pull requests for {author} "
            f"in {scope.repository or 'all repositories'}"
        )
        return records
