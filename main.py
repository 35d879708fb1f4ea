#!/usr/bin/env python3
"""
pr-picker - Main CLI entrypoint

Lists your GitHub pull requests, most recently updated first, and lets you
pick one in fzf with a preview of its description. The chosen PR's title
and URL are printed to stdout.

Usage:
    python main.py                      # PRs in the current repository
    python main.py --all                # PRs across every repository
    python main.py --author octocat     # Someone else's PRs
    python main.py --all --no-preview --strategy graphql
"""

import argparse
import sys
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

from fetchers import FETCHERS, PullRequestSource, create_fetcher
from models.config_models import Config
from models.data_models import Scope, SelectionOutcome
from picker.previews import PreviewMaterializer
from picker.ranking import rank
from picker.selector import SelectorBridge, resolve_preview_command
from utils.config_loader import load_config
from utils.errors import PRPickerError
from utils.git_remote import resolve_repository
from utils.logger import setup_logger

logger = setup_logger(name=__name__)


def resolve_scope(all_repos: bool, cwd: Path) -> Scope:
    """
    Build the query scope.

    Args:
        all_repos: Query every repository instead of the current one
        cwd: Working directory used to find the current repository

    Raises:
        ScopeResolutionError: If the current repository cannot be resolved
    """
    if all_repos:
        return Scope()
    return Scope(repository=resolve_repository(cwd))


def run(
    config: Config,
    all_repos: bool = False,
    author: Optional[str] = None,
    preview: bool = True,
    cwd: Optional[Path] = None,
    fetcher: Optional[PullRequestSource] = None,
    bridge: Optional[SelectorBridge] = None,
    now: Optional[datetime] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """
    Fetch, rank, materialize previews, and run the selector.

    Stages run strictly in sequence. The preview directory exists only for
    the duration of this call and is removed on every exit path.

    Args:
        config: Validated configuration
        all_repos: Query every repository instead of the current one
        author: Login to query for (default: token owner)
        preview: Show the preview pane in the selector
        cwd: Working directory for scope resolution (default: process cwd)
        fetcher: Fetcher instance (optional, created from config if not provided)
        bridge: SelectorBridge instance (optional, created from config if not provided)
        now: Reference time for relative labels (default: current time)
        out: Stream for user-facing output
        err: Stream for status messages (default: stderr)

    Returns:
        Process exit code (0 for a selection, a cancellation, or no PRs)

    Raises:
        PRPickerError: On any fatal condition
    """
    out = out or sys.stdout
    err = err or sys.stderr
    scope = resolve_scope(all_repos, cwd or Path.cwd())

    if fetcher is None:
        fetcher = create_fetcher(
            config.fetch_strategy,
            config.credentials.github_token,
            api_url=config.api_url,
            per_page=config.per_page,
        )

    if not author:
        author = fetcher.resolve_author()
        print(f"Authenticated as: {author}", file=err)

    records = fetcher.fetch(scope, author=author)
    if not records:
        print("No pull requests found.", file=out)
        return 0

    ranked = rank(records)

    if bridge is None:
        bridge = SelectorBridge(
            command=config.selector_command,
            preview_command=resolve_preview_command(config.preview_command) if preview else None,
            preview=preview,
        )

    with tempfile.TemporaryDirectory(prefix="pr-picker-") as tmp_dir:
        entries = PreviewMaterializer(Path(tmp_dir)).materialize(ranked)
        selection = bridge.select(entries, now=now, multi_repo=scope.multi_repo)

    if selection.outcome is SelectionOutcome.SELECTED and selection.record is not None:
        print(f"Title: {selection.record.title}", file=out)
        print(f"URL  : {selection.record.url}", file=out)
    else:
        print("No PR selected.", file=out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Pick one of your GitHub pull requests with fzf",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="List PRs from all repositories (default: only current repository)",
    )
    parser.add_argument(
        "--author",
        help="GitHub login to list PRs for (default: the token's owner)",
    )
    parser.add_argument(
        "--no-preview",
        action="store_true",
        help="Do not show the PR description preview pane",
    )
    parser.add_argument(
        "--strategy",
        choices=sorted(FETCHERS),
        help="Query GitHub through the search REST API or GraphQL (default: from config)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: LOG_LEVEL or WARNING)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main CLI entrypoint."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config()
        updates: dict[str, str] = {}
        if args.strategy:
            updates["fetch_strategy"] = args.strategy
        if args.log_level:
            updates["log_level"] = args.log_level
        if updates:
            config = Config.model_validate({**config.model_dump(), **updates})

        setup_logger(config.log_level)

        code = run(
            config,
            all_repos=args.all,
            author=args.author,
            preview=not args.no_preview,
        )
    except PRPickerError as e:
        logger.debug("Aborting", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("No PR selected.")
        sys.exit(130)

    sys.exit(code)


if __name__ == "__main__":
    main()
