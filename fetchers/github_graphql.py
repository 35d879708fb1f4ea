"""GitHub GraphQL fetcher for the author's pull requests.

Results come back as nested objects (author, repository) rather than the
flat search payload; both are normalized to PullRequestRecord.
"""

import logging
from typing import Any, Optional

from fetchers.base import PullRequestSource, build_search_query, parse_timestamp
from models.data_models import PullRequestRecord, Scope, derive_status
from utils.errors import RemoteQueryError

logger = logging.getLogger(__name__)

VIEWER_QUERY = "query { viewer { login } }"

PULL_REQUESTS_QUERY = """
    query($q: String!, $limit: Int!) {
      search(query: $q, type: ISSUE, first: $limit) {
        issueCount
        nodes {
          ... on PullRequest {
            number
            title
            url
            body
            createdAt
            updatedAt
            state
            isDraft
            merged
            author {
              login
            }
            repository {
              nameWithOwner
            }
          }
        }
      }
    }
"""


class GitHubGraphQLFetcher(PullRequestSource):
    """Fetch pull requests through the GraphQL search connection."""
    
    @property
    def graphql_url(self) -> str:
        # GitHub Enterprise serves REST at /api/v3 and GraphQL at /api/graphql
        if self.base_url.endswith("/api/v3"):
            return self.base_url[: -len("/v3")] + "/graphql"
        return f"{self.base_url}/graphql"
    
    def _query(self, query: str, variables: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """Run a GraphQL query and return its data, raising on an errors payload."""
        payload = {"query": query, "variables": variables or {}}
        body = self._post(self.graphql_url, json=payload)
        
        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            messages = "; ".join(err.get("message", str(err)) for err in errors)
            logger.error(f"GraphQL query failed: {messages}")
            raise RemoteQueryError(f"GitHub GraphQL error: {messages}", detail=messages)
        
        data = body.get("data") if isinstance(body, dict) else None
        if not data:
            raise RemoteQueryError("GitHub GraphQL response has no data")
        return data
    
    def resolve_author(self) -> str:
        data = self._query(VIEWER_QUERY)
        login = (data.get("viewer") or {}).get("login")
        if not login:
            raise RemoteQueryError("GitHub GraphQL viewer has no login")
        return login
    
    def fetch_records(self, author: str, scope: Scope) -> list[PullRequestRecord]:
        variables = {"q": build_search_query(author, scope), "limit": self.per_page}
        logger.info(f"Searching pull requests (GraphQL): {variables['q']}")
        data = self._query(PULL_REQUESTS_QUERY, variables)
        
        search = data.get("search") or {}
        logger.debug(f"GraphQL issueCount={search.get('issueCount')}")
        
        # Non-PR search hits come back as empty objects from the inline fragment
        nodes = [node for node in search.get("nodes") or [] if node]
        return [self._parse_node(node) for node in nodes]
    
    def _parse_node(self, node: dict[str, Any]) -> PullRequestRecord:
        """Build PullRequestRecord from a PullRequest node."""
        repository = node.get("repository") or {}
        try:
            return PullRequestRecord(
                number=node["number"],
                title=node.get("title", ""),
                url=node.get("url", ""),
                body=node.get("body"),
                created_at=parse_timestamp(node["createdAt"]),
                updated_at=parse_timestamp(node["updatedAt"]),
                repository_name=repository["nameWithOwner"],
                status=derive_status(
                    node.get("state", "OPEN"),
                    is_draft=bool(node.get("isDraft")),
                    is_merged=bool(node.get("merged")),
                ),
            )
        except (KeyError, ValueError) as e:
            raise RemoteQueryError(f"Malformed GraphQL pull request node: {e}") from e
