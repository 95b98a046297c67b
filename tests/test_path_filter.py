import pytest

from diff_parser import parse_unified_diff
from models import DEV_NULL, DiffFile
from path_filter import filter_files, parse_exclude_patterns

from conftest import MULTI_DIFF, SCENARIO_DIFF


def _file(path, source=None):
    return DiffFile(source_path=source or path, target_path=path)


def _paths(files):
    return [f.target_path for f in files]


def test_deleted_files_are_always_dropped():
    files = parse_unified_diff(SCENARIO_DIFF)

    assert _paths(filter_files(files, [])) == ["a.py"]
    assert _paths(filter_files(files, ["*.md"])) == ["a.py"]


def test_excludes_by_post_change_path():
    files = [_file("new_name.md", source="old_name.py"), _file("keep.py", source="keep.md")]

    assert _paths(filter_files(files, ["*.md"])) == ["keep.py"]


@pytest.mark.parametrize("pattern, path, excluded", [
    ("*.md", "README.md", True),
    ("*.md", "docs/README.md", False),
    ("docs/*.md", "docs/README.md", True),
    ("docs/*.md", "docs/api/index.md", False),
    ("**/*.md", "docs/api/index.md", True),
    ("**/*.md", "README.md", True),
    ("src/**", "src/a/b/c.py", True),
    ("?.py", "a.py", True),
    ("?.py", "ab.py", False),
    ("*.lock", "poetry.lock", True),
    ("src/*", "src/x.py", True),
    ("src/*", "src/sub/x.py", False),
    ("*", "x.py", True),
    ("*", "src/x.py", False),
    ("docs/*", "docs/api/index.md", False),
    ("docs", "docs/README.md", False),
    ("?.py", "a/b.py", False),
    ("*.yml", ".github/ci.yml", False),
    ("**/*.yml", ".github/ci.yml", True),
    ("/*.md", "README.md", True),
])
def test_glob_semantics(pattern, path, excluded):
    kept = filter_files([_file(path)], [pattern])

    assert (kept == []) is excluded


def test_multi_file_diff_with_patterns():
    files = parse_unified_diff(MULTI_DIFF)

    kept = filter_files(files, ["docs/**", "new_*.py"])

    assert _paths(kept) == ["src/app.py"]


def test_no_result_ever_matches_a_pattern_or_is_deleted():
    files = [_file(p) for p in ["a.py", "b/c.py", "b/d.md", "e.md", "x/y/z.txt"]]
    files.append(DiffFile(source_path="gone.py", target_path=DEV_NULL))
    patterns = ["*.md", "b/**", "**/*.txt"]

    kept = filter_files(files, patterns)

    assert _paths(kept) == ["a.py"]


@pytest.mark.parametrize("raw, expected", [
    (None, []),
    ("", []),
    ("*.md", ["*.md"]),
    (" *.md , dist/** ,, ", ["*.md", "dist/**"]),
])
def test_parse_exclude_patterns(raw, expected):
    assert parse_exclude_patterns(raw) == expected
