import logging
from typing import List

from unidiff import PatchSet
from unidiff.errors import UnidiffParseError

from errors import MalformedDiffError
from models import DEV_NULL, DiffFile, DiffHunk, DiffLine

logger = logging.getLogger(__name__)


def _strip_prefix(path: str) -> str:
    if path == DEV_NULL:
        return path
    if path.startswith(("a/", "b/")):
        return path[2:]
    return path


def _convert_hunk(hunk) -> DiffHunk:
    changes = []
    for line in hunk:
        if line.is_added:
            kind = "added"
        elif line.is_removed:
            kind = "removed"
        elif line.is_context:
            kind = "context"
        else:
            # "\ No newline at end of file"
            continue
        changes.append(DiffLine(
            # only the LF is the diff's own terminator; a CR belongs to the file
            content=line.value[:-1] if line.value.endswith("\n") else line.value,
            kind=kind,
            new_line_no=line.target_line_no,
            old_line_no=line.source_line_no,
        ))
    return DiffHunk(
        source_start=hunk.source_start,
        source_length=hunk.source_length,
        target_start=hunk.target_start,
        target_length=hunk.target_length,
        section_header=(hunk.section_header or "").strip(),
        changes=changes,
    )


def parse_unified_diff(diff_text: str) -> List[DiffFile]:
    if not diff_text or not diff_text.strip():
        return []
    try:
        patch = PatchSet(diff_text.splitlines(keepends=True))
    except UnidiffParseError as e:
        raise MalformedDiffError(f"Could not parse diff: {e}") from e

    if len(patch) == 0:
        raise MalformedDiffError("No file headers found in diff")

    files = []
    for patched_file in patch:
        if patched_file.is_binary_file:
            logger.debug("Skipping binary file %s", patched_file.path)
            continue
        files.append(DiffFile(
            source_path=_strip_prefix(patched_file.source_file or DEV_NULL),
            target_path=_strip_prefix(patched_file.target_file or DEV_NULL),
            hunks=[_convert_hunk(h) for h in patched_file],
        ))
    return files


def _file_header(f: DiffFile) -> List[str]:
    source = f.target_path if f.is_added else f.source_path
    target = f.source_path if f.is_deleted else f.target_path
    lines = [f"diff --git a/{source} b/{target}"]
    if f.is_added:
        lines.append("new file mode 100644")
    elif f.is_deleted:
        lines.append("deleted file mode 100644")
    elif f.is_rename:
        lines.extend([f"rename from {source}", f"rename to {target}"])
    if f.hunks:
        lines.append("--- " + (DEV_NULL if f.is_added else f"a/{source}"))
        lines.append("+++ " + (DEV_NULL if f.is_deleted else f"b/{target}"))
    return lines


def render_unified_diff(files: List[DiffFile]) -> str:
    """Render parsed files back to git-style unified diff text."""
    out = []
    for f in files:
        out.extend(_file_header(f))
        for hunk in f.hunks:
            out.append(hunk.header)
            out.extend(c.marker + c.content for c in hunk.changes)
    return "\n".join(out) + "\n" if out else ""
