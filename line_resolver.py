from models import AddedLine, ContextLine, DiffHunk, EligibleLineSet, RemovedLine


def resolve_line_number(change) -> int:
    """
    Line number used to anchor a comment on a change.

    Context and added lines live in the new file, removed lines only exist in
    the old one.
    """
    if isinstance(change, (ContextLine, AddedLine)):
        return change.target_line_no
    if isinstance(change, RemovedLine):
        return change.source_line_no
    raise TypeError(f"Not a diff change: {change!r}")


def eligible_lines(hunk: DiffHunk) -> EligibleLineSet:
    return frozenset(
        resolve_line_number(c)
        for c in hunk.changes
        if isinstance(c, (AddedLine, RemovedLine))
    )


def comment_side(change) -> str:
    """Diff side a comment on this change is anchored to, in GitHub's terms."""
    if isinstance(change, RemovedLine):
        return "LEFT"
    if isinstance(change, (ContextLine, AddedLine)):
        return "RIGHT"
    raise TypeError(f"Not a diff change: {change!r}")
