import re
from typing import Any, List, Optional

from models import DEV_NULL, Comment, DiffFile, DiffHunk, RawSuggestion

_DIGITS_RE = re.compile(r"^\s*\+?(\d+)\s*$")


def coerce_line_number(value: Any) -> Optional[int]:
    """Return ``value`` as a positive int, or None if it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        number = int(value)
    elif isinstance(value, str):
        m = _DIGITS_RE.match(value)
        if not m:
            return None
        number = int(m.group(1))
    else:
        return None
    return number if number > 0 else None


def map_suggestions(file: DiffFile, hunk: DiffHunk, suggestions: List[RawSuggestion],
                    restrict_to_hunk: bool = False) -> List[Comment]:
    """
    Project untrusted model suggestions onto postable comments.

    Invalid entries are dropped, never reported. Line numbers are not checked
    against the hunk unless ``restrict_to_hunk`` is set; by default the host
    rejects lines outside the diff.
    """
    path = file.target_path
    if not path or path == DEV_NULL:
        return []

    allowed = set(hunk.new_line_numbers) if restrict_to_hunk else None
    comments = []
    for s in suggestions or []:
        if isinstance(s, dict):
            s = RawSuggestion.model_validate(s)
        line = coerce_line_number(getattr(s, "line_number", None))
        if line is None:
            continue
        if allowed is not None and line not in allowed:
            continue
        body = getattr(s, "review_comment", None)
        if not isinstance(body, str) or not body.strip():
            continue
        comments.append(Comment(path=path, line=line, body=body))
    return comments
