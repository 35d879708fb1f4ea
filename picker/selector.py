"""Bridge to the external interactive line selector (fzf).

Each record becomes one line of DELIMITER-joined fields:

    artifact_path, relative time, status, title[, repository]

The selector shows every field but the first and may preview the file named
by the first. The selected line's first field is looked up against the
artifact paths to recover the record.
"""

import logging
import shlex
import shutil
import subprocess
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Sequence

from models.data_models import MaterializedPR, PRStatus, Selection
from utils.errors import ArtifactWriteError, SelectorUnavailableError

logger = logging.getLogger(__name__)

# ASCII unit separator; stripped from display fields below
DELIMITER = "\x1f"

DEFAULT_PREVIEW_COMMAND = "bat --color=always --line-range :500 {1}"
FALLBACK_PREVIEW_COMMAND = "cat {1}"

RESET = "\033[0m"
TITLE_COLOR = "\033[34m"
STATUS_COLORS = {
    PRStatus.OPEN: "\033[32m",
    PRStatus.DRAFT: "\033[2m",
    PRStatus.MERGED: "\033[35m",
    PRStatus.CLOSED: "\033[31m",
}

# Every character str.splitlines() breaks on, plus tab and the delimiter
LINE_BREAKS = "\n\r\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029"
_FIELD_TRANSLATION = str.maketrans({char: " " for char in LINE_BREAKS + "\t" + DELIMITER})


def relative_time(updated_at: datetime, now: Optional[datetime] = None) -> str:
    """
    Describe how long ago updated_at was, floored to the largest whole unit.
    
    Examples:
        59 minutes -> "59 minutes ago"
        60 minutes -> "1 hour ago"
        24 hours   -> "1 day ago"
        7 days     -> "1 week ago"
    """
    now = now or datetime.now(timezone.utc)
    elapsed = max(now - updated_at, timedelta(0))
    minutes = int(elapsed.total_seconds() // 60)
    hours = minutes // 60
    days = hours // 24
    
    if hours < 1:
        count, unit = minutes, "minute"
    elif days < 1:
        count, unit = hours, "hour"
    elif days < 7:
        count, unit = days, "day"
    else:
        count, unit = days // 7, "week"
    
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def _clean(value: str) -> str:
    return value.translate(_FIELD_TRANSLATION)


def _paint(text: str, color: str, enabled: bool) -> str:
    return f"{color}{text}{RESET}" if enabled else text


def build_lines(
    entries: Sequence[MaterializedPR],
    now: Optional[datetime] = None,
    multi_repo: bool = False,
    color: bool = True,
) -> list[str]:
    """
    Serialize entries into selector input lines, one per entry.
    
    Raises:
        ArtifactWriteError: If an artifact path would break the line format
    """
    now = now or datetime.now(timezone.utc)
    lines = []
    for entry in entries:
        record = entry.record
        key = str(entry.artifact_path)
        if key != _clean(key):
            raise ArtifactWriteError(f"Preview path contains a reserved character: {key!r}")
        
        fields = [
            key,
            relative_time(record.updated_at, now),
            _paint(record.status.value, STATUS_COLORS[record.status], color),
            _paint(_clean(record.title), TITLE_COLOR, color),
        ]
        if multi_repo:
            fields.append(_clean(record.repository_name))
        lines.append(DELIMITER.join(fields))
    return lines


def parse_selection(output: str, entries: Sequence[MaterializedPR]) -> Selection:
    """
    Map the selector's output back to a record.
    
    Anything other than exactly one line whose key matches exactly one
    entry is treated as no selection.
    """
    # fzf separates items on "\n" only
    lines = [line.rstrip("\r") for line in output.split("\n") if line.strip()]
    if len(lines) != 1:
        if lines:
            logger.warning(f"Selector returned {len(lines)} lines, expected one")
        return Selection.cancelled()
    
    key = lines[0].split(DELIMITER, 1)[0]
    matches = [entry for entry in entries if str(entry.artifact_path) == key]
    if len(matches) != 1:
        logger.warning(f"Selected line did not match a pull request: {key!r}")
        return Selection.cancelled()
    return Selection.selected(matches[0].record)


def resolve_preview_command(command: str) -> str:
    """Fall back to cat when the configured preview binary is missing."""
    parts = shlex.split(command)
    if parts and shutil.which(parts[0]) is None:
        logger.info(f"{parts[0]} not found on PATH, previewing with cat")
        return FALLBACK_PREVIEW_COMMAND
    return command


class SelectorBridge:
    """Run the selector once and return what the user picked.
    
    The call blocks until the selector exits. There is no timeout; aborting
    is up to the user, and any non-zero exit counts as a cancellation.
    """
    
    def __init__(
        self,
        command: str = "fzf",
        preview_command: Optional[str] = DEFAULT_PREVIEW_COMMAND,
        preview: bool = True,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ):
        self.command = command
        self.preview_command = preview_command
        self.preview = preview
        self.runner = runner
    
    def build_command(self) -> list[str]:
        cmd = shlex.split(self.command) + [
            "--ansi",
            "--delimiter", DELIMITER,
            "--with-nth", "2..",
        ]
        if self.preview and self.preview_command:
            cmd += ["--preview", self.preview_command]
        return cmd
    
    def select(
        self,
        entries: Sequence[MaterializedPR],
        now: Optional[datetime] = None,
        multi_repo: bool = False,
        color: bool = True,
    ) -> Selection:
        """
        Show entries in the selector and return the user's choice.
        
        Raises:
            SelectorUnavailableError: If the selector cannot be launched
        """
        if not entries:
            return Selection.cancelled()
        
        lines = build_lines(entries, now=now, multi_repo=multi_repo, color=color)
        cmd = self.build_command()
        logger.debug(f"Running selector: {cmd[0]} with {len(lines)} lines")
        
        try:
            result = self.runner(
                cmd,
                input="\n".join(lines) + "\n",
                stdout=subprocess.PIPE,
                text=True,
                encoding="utf-8",
            )
        except FileNotFoundError as e:
            raise SelectorUnavailableError(
                f"Selector '{cmd[0]}' not found; install it or set PR_PICKER_SELECTOR"
            ) from e
        
        if result.returncode != 0:
            logger.debug(f"Selector exited with {result.returncode}, treating as cancelled")
            return Selection.cancelled()
        
        return parse_selection(result.stdout or "", entries)
