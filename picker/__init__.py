"""Ranking, preview materialization and interactive selection."""

from picker.previews import PreviewMaterializer, artifact_name
from picker.ranking import STATUS_PRIORITY, rank
from picker.selector import DELIMITER, SelectorBridge, build_lines, parse_selection, relative_time

__all__ = [
    "DELIMITER",
    "PreviewMaterializer",
    "STATUS_PRIORITY",
    "SelectorBridge",
    "artifact_name",
    "build_lines",
    "parse_selection",
    "rank",
    "relative_time",
]
