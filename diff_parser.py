import logging
import re
from typing import List

from unidiff import PatchSet
from unidiff.errors import UnidiffParseError

from errors import DiffParseError
from models import DELETED_PATH, AddedLine, ContextLine, DiffFile, DiffHunk, RemovedLine

logger = logging.getLogger(__name__)

_HUNK_HEADER_RE = re.compile(r"^@@ -\d+(?:,\d+)? \+\d+(?:,\d+)? @@")


def _strip_prefix(path: str, prefix: str) -> str:
    if path == DELETED_PATH:
        return path
    if path.startswith(prefix):
        return path[len(prefix):]
    return path


def _check_range_headers(lines: List[str]) -> None:
    for number, line in enumerate(lines, 1):
        if line.startswith("@@") and not _HUNK_HEADER_RE.match(line):
            raise DiffParseError(f"Unparsable hunk header at diff line {number}: {line.rstrip()!r}")


def _hunk_header(hunk) -> str:
    header = (
        f"@@ -{hunk.source_start},{hunk.source_length} "
        f"+{hunk.target_start},{hunk.target_length} @@"
    )
    if hunk.section_header:
        header += f" {hunk.section_header}"
    return header


def _convert_hunk(hunk) -> DiffHunk:
    changes = []
    for line in hunk:
        content = line.value.rstrip("\n")
        if line.is_added:
            changes.append(AddedLine(content=content, target_line_no=line.target_line_no))
        elif line.is_removed:
            changes.append(RemovedLine(content=content, source_line_no=line.source_line_no))
        elif line.is_context:
            changes.append(ContextLine(
                content=content,
                source_line_no=line.source_line_no,
                target_line_no=line.target_line_no,
            ))
        # "\ No newline at end of file" markers carry no line number and are dropped
    return DiffHunk(
        source_start=hunk.source_start,
        source_length=hunk.source_length,
        target_start=hunk.target_start,
        target_length=hunk.target_length,
        header=_hunk_header(hunk),
        content="".join(str(line) for line in hunk),
        changes=changes,
    )


def parse_unified_diff(diff_text: str) -> List[DiffFile]:
    """
    Split a (possibly multi-file) unified diff into files, hunks and changes.

    Raises DiffParseError on malformed input; nothing is returned for a diff
    that fails half way through.
    """
    if not diff_text or not diff_text.strip():
        return []

    lines = diff_text.splitlines(keepends=True)
    _check_range_headers(lines)

    try:
        patch = PatchSet(lines)
    except UnidiffParseError as e:
        raise DiffParseError(f"Malformed diff: {e}") from e

    if len(patch) == 0:
        raise DiffParseError("No file headers found in diff text")

    files = []
    for patched_file in patch:
        files.append(DiffFile(
            path_before=_strip_prefix(patched_file.source_file, "a/"),
            path_to=_strip_prefix(patched_file.target_file, "b/"),
            hunks=[_convert_hunk(hunk) for hunk in patched_file],
        ))

    logger.debug("Parsed %d files / %d hunks", len(files), sum(len(f.hunks) for f in files))
    return files
