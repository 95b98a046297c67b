import logging
from typing import Iterable, List, Optional

from wcmatch import glob

from models import DiffFile

logger = logging.getLogger(__name__)

# "*" and "?" stop at "/", "**" spans directories, dotfiles are ordinary names
GLOB_FLAGS = glob.GLOBSTAR | glob.DOTGLOB


def parse_exclude_patterns(raw: Optional[str]) -> List[str]:
    """Split the comma-separated ``exclude`` input, dropping blanks."""
    if not raw:
        return []
    return [p.strip() for p in raw.split(",") if p.strip()]


def compile_patterns(patterns: Iterable[str]) -> List[str]:
    # Patterns are relative to the repository root.
    return [p.strip().lstrip("/") for p in patterns if p and p.strip()]


def is_excluded(path: str, patterns: List[str]) -> bool:
    return bool(patterns) and glob.globmatch(path, patterns, flags=GLOB_FLAGS)


def filter_files(files: List[DiffFile], patterns: Iterable[str]) -> List[DiffFile]:
    compiled = compile_patterns(patterns)
    kept = []
    for f in files:
        if f.is_deleted:
            logger.debug("Skipping deleted file %s", f.source_path)
            continue
        if is_excluded(f.target_path, compiled):
            logger.debug("Excluding %s", f.target_path)
            continue
        kept.append(f)
    return kept
