# tests/test_line_sources.py

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from vault_cli.tasks.line_sources import GrepLineSource, WalkLineSource, make_line_source
from vault_cli.tasks.task_models import TaskLine

from .fakes import write


def test_walk_is_sorted_and_skips_dot_dirs(vault: Path) -> None:
    files = []
    for line in WalkLineSource(".md")(vault):
        if line.file_path not in files:
            files.append(line.file_path)
    assert files == ["CLAUDE.md", "inbox.md", "Templates/daily.md", "projects/garden.md"]


def test_walk_strips_carriage_returns_and_numbers_from_one(tmp_path: Path) -> None:
    write(tmp_path, "a.md", "first\r\n- [ ] second\r\n\r\nlast")
    assert list(WalkLineSource()(tmp_path)) == [
        TaskLine("a.md", 1, "first"),
        TaskLine("a.md", 2, "- [ ] second"),
        TaskLine("a.md", 3, ""),
        TaskLine("a.md", 4, "last"),
    ]


def test_walk_filters_extension_and_skips_undecodable(tmp_path: Path) -> None:
    write(tmp_path, "a.txt", "- [ ] not markdown\n")
    (tmp_path / "bad.md").write_bytes(b"- [ ] \xff\xfe\n")
    write(tmp_path, "good.md", "- [ ] ok\n")
    assert list(WalkLineSource(".md")(tmp_path)) == [TaskLine("good.md", 1, "- [ ] ok")]


@pytest.mark.skipif(shutil.which("grep") is None, reason="grep not available")
def test_grep_source_returns_only_checkbox_lines(vault: Path) -> None:
    lines = sorted(GrepLineSource(".md", timeout=10)(vault))
    assert TaskLine("inbox.md", 2, "- [ ] call plumber #p1") in lines
    assert TaskLine("projects/garden.md", 2, "  - [ ] buy seeds #someday #p3") in lines
    assert all("[" in line.text for line in lines)
    assert not any(line.file_path == "inbox.md" and line.line_number == 1 for line in lines)


@pytest.mark.skipif(shutil.which("grep") is None, reason="grep not available")
def test_grep_source_no_matches_is_empty(tmp_path: Path) -> None:
    write(tmp_path, "a.md", "nothing here\n")
    assert list(GrepLineSource()(tmp_path)) == []


def test_make_line_source() -> None:
    assert isinstance(make_line_source("grep"), GrepLineSource)
    assert isinstance(make_line_source("walk"), WalkLineSource)
    assert isinstance(make_line_source("bogus"), WalkLineSource)
