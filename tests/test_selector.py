"""Tests for the selector protocol and bridge."""

import subprocess
from datetime import timedelta
from pathlib import Path
from unittest.mock import Mock, patch
import pytest

from models.data_models import MaterializedPR, PRStatus, SelectionOutcome
from picker.selector import (
    DELIMITER,
    FALLBACK_PREVIEW_COMMAND,
    SelectorBridge,
    build_lines,
    parse_selection,
    relative_time,
    resolve_preview_command,
)
from utils.errors import ArtifactWriteError, SelectorUnavailableError


class TestRelativeTime:
    @pytest.mark.parametrize(
        "elapsed, expected",
        [
            (timedelta(0), "0 minutes ago"),
            (timedelta(seconds=59), "0 minutes ago"),
            (timedelta(minutes=1), "1 minute ago"),
            (timedelta(minutes=59), "59 minutes ago"),
            (timedelta(minutes=60), "1 hour ago"),
            (timedelta(hours=2), "2 hours ago"),
            (timedelta(hours=23, minutes=59), "23 hours ago"),
            (timedelta(hours=24), "1 day ago"),
            (timedelta(days=6, hours=23), "6 days ago"),
            (timedelta(days=7), "1 week ago"),
            (timedelta(days=13), "1 week ago"),
            (timedelta(days=21), "3 weeks ago"),
        ],
    )
    def test_boundaries(self, now, elapsed, expected):
        assert relative_time(now - elapsed, now) == expected
    
    def test_future_timestamp_clamps_to_zero(self, now):
        assert relative_time(now + timedelta(minutes=5), now) == "0 minutes ago"


def _entries(tmp_path, records):
    return [
        MaterializedPR(record=record, artifact_path=tmp_path / f"{record.number}.md")
        for record in records
    ]


class TestBuildLines:
    def test_field_order_single_repo(self, tmp_path, now, make_record):
        entries = _entries(tmp_path, [make_record(5, updated_ago=timedelta(minutes=10), title="Fix")])
        
        [line] = build_lines(entries, now=now, color=False)
        
        assert line.split(DELIMITER) == [str(tmp_path / "5.md"), "10 minutes ago", "OPEN", "Fix"]
    
    def test_repository_column_when_multi_repo(self, tmp_path, now, make_record):
        entries = _entries(tmp_path, [make_record(5, repository_name="x/y", status=PRStatus.MERGED)])
        
        [line] = build_lines(entries, now=now, multi_repo=True, color=False)
        
        assert line.split(DELIMITER)[2:] == ["MERGED", "PR 5", "x/y"]
    
    def test_reserved_characters_removed_from_title(self, tmp_path, now, make_record):
        title = f"tab\there{DELIMITER}unit\nnewline\r"
        entries = _entries(tmp_path, [make_record(1, title=title)])
        
        [line] = build_lines(entries, now=now, color=False)
        
        fields = line.split(DELIMITER)
        assert len(fields) == 4
        assert fields[3] == "tab here unit newline "
        assert "\n" not in line
    
    def test_colored_labels(self, tmp_path, now, make_record):
        entries = _entries(tmp_path, [make_record(1, status=PRStatus.CLOSED, title="T")])
        
        [line] = build_lines(entries, now=now)
        
        key, _, status, title = line.split(DELIMITER)
        assert key == str(tmp_path / "1.md")
        assert status == "\033[31mCLOSED\033[0m"
        assert title == "\033[34mT\033[0m"
    
    def test_path_with_delimiter_rejected(self, now, make_record):
        entries = [MaterializedPR(record=make_record(1), artifact_path=Path(f"/tmp/a{DELIMITER}b"))]
        with pytest.raises(ArtifactWriteError):
            build_lines(entries, now=now)


class TestParseSelection:
    def test_every_line_round_trips_to_its_record(self, tmp_path, now, make_record):
        records = [make_record(n, title="same title") for n in range(1, 6)]
        entries = _entries(tmp_path, records)
        
        for line, record in zip(build_lines(entries, now=now, multi_repo=True), records):
            selection = parse_selection(line + "\n", entries)
            assert selection.outcome is SelectionOutcome.SELECTED
            assert selection.record is record
    
    @pytest.mark.parametrize("output", ["", "\n", "   \n"])
    def test_empty_output_is_cancelled(self, tmp_path, make_record, output):
        entries = _entries(tmp_path, [make_record(1)])
        assert parse_selection(output, entries).outcome is SelectionOutcome.CANCELLED
    
    def test_unknown_key_is_cancelled(self, tmp_path, make_record):
        entries = _entries(tmp_path, [make_record(1)])
        output = f"/elsewhere/1.md{DELIMITER}x{DELIMITER}OPEN{DELIMITER}PR 1\n"
        assert parse_selection(output, entries).outcome is SelectionOutcome.CANCELLED
    
    def test_multiple_lines_are_cancelled(self, tmp_path, now, make_record):
        entries = _entries(tmp_path, [make_record(1), make_record(2)])
        output = "\n".join(build_lines(entries, now=now)) + "\n"
        assert parse_selection(output, entries).outcome is SelectionOutcome.CANCELLED
    
    def test_ambiguous_key_is_cancelled(self, tmp_path, now, make_record):
        path = tmp_path / "same.md"
        entries = [
            MaterializedPR(record=make_record(1), artifact_path=path),
            MaterializedPR(record=make_record(2), artifact_path=path),
        ]
        line = build_lines(entries[:1], now=now)[0]
        assert parse_selection(line, entries).outcome is SelectionOutcome.CANCELLED


def _runner(returncode=0, pick=None):
    """Fake subprocess.run that echoes back the line at index pick."""
    def run(cmd, input, **kwargs):
        lines = input.splitlines()
        stdout = lines[pick] + "\n" if pick is not None else ""
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout)
    return Mock(side_effect=run)


class TestSelectorBridge:
    def test_build_command_with_preview(self):
        bridge = SelectorBridge(preview_command="bat {1}")
        assert bridge.build_command() == [
            "fzf", "--ansi", "--delimiter", DELIMITER, "--with-nth", "2..",
            "--preview", "bat {1}",
        ]
    
    def test_build_command_without_preview(self):
        bridge = SelectorBridge(preview_command="bat {1}", preview=False)
        assert "--preview" not in bridge.build_command()
    
    def test_command_with_arguments(self):
        bridge = SelectorBridge(command="fzf --height 40%", preview=False)
        assert bridge.build_command()[:3] == ["fzf", "--height", "40%"]
    
    def test_select_returns_chosen_record(self, tmp_path, now, make_record):
        records = [make_record(1), make_record(2)]
        runner = _runner(pick=1)
        bridge = SelectorBridge(runner=runner)
        
        selection = bridge.select(_entries(tmp_path, records), now=now)
        
        assert selection.record is records[1]
        kwargs = runner.call_args[1]
        assert kwargs["stdout"] == subprocess.PIPE
        assert kwargs["input"].count("\n") == 2
    
    @pytest.mark.parametrize("returncode", [1, 2, 130])
    def test_nonzero_exit_is_cancelled(self, tmp_path, now, make_record, returncode):
        bridge = SelectorBridge(runner=_runner(returncode=returncode, pick=0))
        selection = bridge.select(_entries(tmp_path, [make_record(1)]), now=now)
        assert selection.outcome is SelectionOutcome.CANCELLED
    
    def test_no_entries_does_not_run_selector(self):
        runner = _runner()
        selection = SelectorBridge(runner=runner).select([])
        assert selection.outcome is SelectionOutcome.CANCELLED
        runner.assert_not_called()
    
    def test_missing_binary(self, tmp_path, now, make_record):
        runner = Mock(side_effect=FileNotFoundError("fzf"))
        bridge = SelectorBridge(runner=runner)
        with pytest.raises(SelectorUnavailableError, match="fzf"):
            bridge.select(_entries(tmp_path, [make_record(1)]), now=now)


class TestLineBreakCharactersInTitles:
    """Titles with any str.splitlines() boundary still round-trip through fzf."""
    
    SEPARATORS = ["\x0b", "\x0c", "\x1c", "\x1d", "\x1e", "\x85", "\u2028", "\u2029", "\r\n"]
    
    @staticmethod
    def _fzf_like(pick):
        """Split input on "\\n" only, as fzf does, and echo the picked item."""
        def run(cmd, input, **kwargs):
            items = [item for item in input.split("\n") if item]
            return subprocess.CompletedProcess(cmd, 0, stdout=items[pick] + "\n")
        return run
    
    @pytest.mark.parametrize("sep", SEPARATORS)
    def test_selected_record_resolves(self, tmp_path, now, make_record, sep):
        records = [make_record(1, title=f"Fix{sep}thing"), make_record(2, title=f"Other{sep}one")]
        bridge = SelectorBridge(runner=self._fzf_like(pick=0))
        
        selection = bridge.select(_entries(tmp_path, records), now=now)
        
        assert selection.outcome is SelectionOutcome.SELECTED
        assert selection.record is records[0]
    
    @pytest.mark.parametrize("sep", SEPARATORS)
    def test_display_fields_have_no_line_breaks(self, tmp_path, now, make_record, sep):
        entries = _entries(tmp_path, [make_record(1, title=f"Fix{sep}thing")])
        
        [line] = build_lines(entries, now=now, color=False)
        
        assert line.splitlines() == [line]
        assert line.split(DELIMITER)[3] == "Fix" + " " * len(sep) + "thing"


class TestResolvePreviewCommand:
    def test_keeps_available_command(self):
        with patch("shutil.which", return_value="/usr/bin/bat"):
            assert resolve_preview_command("bat {1}") == "bat {1}"
    
    def test_falls_back_to_cat(self):
        with patch("shutil.which", return_value=None):
            assert resolve_preview_command("bat {1}") == FALLBACK_PREVIEW_COMMAND
