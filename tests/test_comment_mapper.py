import pytest

from comment_mapper import coerce_line_number, map_suggestions
from diff_parser import parse_unified_diff
from models import DEV_NULL, Comment, DiffFile, RawSuggestion

from conftest import SCENARIO_DIFF, suggestion


@pytest.fixture
def a_py():
    return parse_unified_diff(SCENARIO_DIFF)[0]


def test_maps_suggestion_to_comment(a_py):
    comments = map_suggestions(a_py, a_py.hunks[0], [suggestion("10", "avoid magic literal")])

    assert comments == [Comment(path="a.py", line=10, body="avoid magic literal")]


@pytest.mark.parametrize("value, expected", [
    ("10", 10),
    (" 7 ", 7),
    ("+3", 3),
    (12, 12),
    (4.0, 4),
    ("0", None),
    ("-3", None),
    (-3, None),
    ("abc", None),
    ("1.5", None),
    (1.5, None),
    ("", None),
    (None, None),
    (True, None),
    ([10], None),
])
def test_coerce_line_number(value, expected):
    assert coerce_line_number(value) == expected


def test_invalid_entries_are_dropped_silently(a_py):
    raw = [
        suggestion("abc"),
        suggestion("-3"),
        suggestion(None),
        RawSuggestion(lineNumber="9"),
        suggestion("9", ""),
        suggestion("9", {"text": "nested"}),
        RawSuggestion(),
        suggestion("11", "keep me"),
    ]

    assert map_suggestions(a_py, a_py.hunks[0], raw) == [
        Comment(path="a.py", line=11, body="keep me"),
    ]


def test_negative_line_removes_exactly_one_comment(a_py):
    valid = map_suggestions(a_py, a_py.hunks[0], [suggestion("10"), suggestion("3")])
    variant = map_suggestions(a_py, a_py.hunks[0], [suggestion("10"), suggestion("-3")])

    assert len(valid) - len(variant) == 1


def test_body_is_passed_through_unmodified(a_py):
    body = "  **Use a constant**\n\n```python\nLIMIT = 1\n```  "

    comments = map_suggestions(a_py, a_py.hunks[0], [suggestion(10, body)])

    assert comments[0].body == body


def test_out_of_range_lines_pass_through_by_default(a_py):
    comments = map_suggestions(a_py, a_py.hunks[0], [suggestion("500")])

    assert [c.line for c in comments] == [500]


def test_restrict_to_hunk_drops_lines_outside_new_numbering(a_py):
    raw = [suggestion("500"), suggestion("10"), suggestion("7")]

    comments = map_suggestions(a_py, a_py.hunks[0], raw, restrict_to_hunk=True)

    assert [c.line for c in comments] == [10]


def test_file_without_target_yields_nothing():
    deleted = parse_unified_diff(SCENARIO_DIFF)[1]
    empty_target = DiffFile(source_path="x.py", target_path="")

    assert map_suggestions(deleted, deleted.hunks[0], [suggestion("1")]) == []
    assert map_suggestions(empty_target, deleted.hunks[0], [suggestion("1")]) == []
    assert deleted.target_path == DEV_NULL


def test_empty_or_missing_suggestions(a_py):
    assert map_suggestions(a_py, a_py.hunks[0], []) == []
    assert map_suggestions(a_py, a_py.hunks[0], None) == []


def test_plain_dicts_are_accepted(a_py):
    raw = [{"lineNumber": "9", "reviewComment": "from dict"}, {"unexpected": True}]

    assert map_suggestions(a_py, a_py.hunks[0], raw) == [Comment(path="a.py", line=9, body="from dict")]
