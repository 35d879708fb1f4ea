"""Pull request fetch strategies."""

from fetchers.base import PullRequestSource
from fetchers.github import GitHubSearchFetcher
from fetchers.github_graphql import GitHubGraphQLFetcher

FETCHERS = {
    "search": GitHubSearchFetcher,
    "graphql": GitHubGraphQLFetcher,
}


def create_fetcher(
    strategy: str,
    token: str,
    api_url: str = "https://api.github.com",
    per_page: int = 100,
) -> PullRequestSource:
    """
    Initialize the fetcher for a strategy name.
    
    Raises:
        ValueError: If the strategy is unknown
    """
    try:
        fetcher_cls = FETCHERS[strategy]
    except KeyError:
        raise ValueError(
            f"Unsupported fetch strategy: {strategy} (expected one of {', '.join(FETCHERS)})"
        ) from None
    return fetcher_cls(token, api_url=api_url, per_page=per_page)


__all__ = [
    "FETCHERS",
    "GitHubGraphQLFetcher",
    "GitHubSearchFetcher",
    "PullRequestSource",
    "create_fetcher",
]
