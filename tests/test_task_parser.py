# tests/test_task_parser.py

from __future__ import annotations

from vault_cli.tasks.priority import classify
from vault_cli.tasks.task_models import Priority, TaskLine
from vault_cli.tasks.task_parser import (
    extract_tags,
    parse_search_output,
    parse_task_line,
    parse_task_lines,
    strip_tags,
)


def test_parse_open_and_done_lines() -> None:
    open_task = parse_task_line("./notes/a.md", 3, "- [ ] write report #p1")
    assert open_task is not None
    assert open_task.file_path == "notes/a.md"
    assert open_task.line_number == 3
    assert open_task.content == "write report #p1"
    assert open_task.tags == ("#p1",)
    assert open_task.completed is False
    assert open_task.priority is None

    done = parse_task_line("a.md", 1, "    - [x] shipped")
    assert done is not None
    assert done.completed is True
    assert done.content == "shipped"


def test_non_task_lines_are_skipped() -> None:
    for text in (
        "plain text",
        "- [X] upper-case x is not done",
        "-  [ ] two spaces",
        "* [ ] star bullet",
        "- [  ] wide box",
        "text - [ ] not at start",
        "",
    ):
        assert parse_task_line("a.md", 1, text) is None, text


def test_content_keeps_trailing_text_and_drops_one_leading_space() -> None:
    task = parse_task_line("a.md", 1, "- [ ]  indented content  ")
    assert task is not None
    assert task.content == " indented content  "


def test_tags_in_order_with_duplicates_and_hierarchy() -> None:
    assert extract_tags("a #project/sub b #p2 c #p2 #next") == ("#project/sub", "#p2", "#p2", "#next")
    assert extract_tags("no tags here") == ()
    assert strip_tags("call #p1 plumber #next") == "call  plumber"


def test_parse_task_lines_is_lazy_stream() -> None:
    lines = [
        TaskLine("a.md", 1, "# title"),
        TaskLine("a.md", 2, "- [ ] one"),
        TaskLine("b.md", 1, "- [x] two"),
    ]
    tasks = list(parse_task_lines(iter(lines)))
    assert [(t.file_path, t.line_number) for t in tasks] == [("a.md", 2), ("b.md", 1)]


def test_parse_search_output() -> None:
    output = (
        "./notes/a.md:2:- [ ] first #p1\n"
        "\n"
        "./notes/b.md:10:  - [x] second: with colon\n"
        "garbage line\n"
    )
    lines = list(parse_search_output(output))
    assert lines == [
        TaskLine("notes/a.md", 2, "- [ ] first #p1"),
        TaskLine("notes/b.md", 10, "  - [x] second: with colon"),
    ]


def test_parse_search_output_empty_is_not_an_error() -> None:
    assert list(parse_search_output("")) == []
    assert list(parse_search_output("\n\n")) == []


def test_priority_precedence_beats_tag_order() -> None:
    assert classify(["#p2", "#p1"]) is Priority.P1
    assert classify(["#next/today"]) is Priority.NEXT
    assert classify(["#someday", "#waiting"]) is Priority.WAITING
    assert classify(["#P1"]) is None
    assert classify([]) is None


def test_priority_parse() -> None:
    assert Priority.parse("next") is Priority.NEXT
    assert Priority.parse("#P1") is Priority.P1
    assert Priority.parse(None) is None
    assert Priority.parse("") is None
