# agents/comment_writer.py
import logging
from typing import Dict, List, Optional, Union

from line_resolver import comment_side, resolve_line_number
from models import AddedLine, AIReviewEntry, DiffFile, DiffHunk, RemovedLine, ReviewComment

logger = logging.getLogger(__name__)


def _as_line_number(value: Union[int, str]) -> Optional[int]:
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _eligible_sides(hunk: DiffHunk) -> Dict[int, str]:
    sides = {}
    for change in hunk.changes:
        if not isinstance(change, (AddedLine, RemovedLine)):
            continue
        line = resolve_line_number(change)
        # an old and a new line can share a number; the added line wins
        if line not in sides or isinstance(change, AddedLine):
            sides[line] = comment_side(change)
    return sides


def create_comments(file: DiffFile, hunk: DiffHunk, entries: List[AIReviewEntry]) -> List[ReviewComment]:
    """
    Turn model entries into review comments anchored on the hunk's changed lines.

    Entries pointing at lines the hunk did not change, and every entry for a
    deleted file, are dropped. Removed lines are anchored on the LEFT side.
    """
    if file.is_deleted:
        return []

    valid_lines = _eligible_sides(hunk)
    comments = []
    for entry in entries:
        line = _as_line_number(entry.lineNumber)
        if line is None or line not in valid_lines:
            logger.debug("Dropping comment on %s:%r (not a changed line)", file.path_to, entry.lineNumber)
            continue
        comments.append(ReviewComment(
            path=file.path_to, line=line, body=entry.reviewComment, side=valid_lines[line],
        ))
    return comments
