"""Tests for agents/comment_writer.py: only changed lines may carry comments."""

from agents.comment_writer import create_comments
from conftest import ADDITION_DIFF, DELETED_FILE_DIFF, DELETION_DIFF
from diff_parser import parse_unified_diff
from line_resolver import eligible_lines
from models import AIReviewEntry, ReviewComment


def _file_and_hunk(diff):
    f = parse_unified_diff(diff)[0]
    return f, f.hunks[0]


class TestCreateComments:
    def test_valid_line_becomes_comment(self):
        f, hunk = _file_and_hunk(ADDITION_DIFF)
        comments = create_comments(f, hunk, [AIReviewEntry(lineNumber="10", reviewComment="b may be 0")])
        assert len(comments) == 1
        assert comments[0].path == "b.txt"
        assert comments[0].line == 10
        assert comments[0].body == "b may be 0"

    def test_integer_line_numbers_accepted(self):
        f, hunk = _file_and_hunk(DELETION_DIFF)
        comments = create_comments(f, hunk, [AIReviewEntry(lineNumber=2, reviewComment="why?")])
        assert [(c.path, c.line) for c in comments] == [("src/app.py", 2)]

    def test_removed_line_is_anchored_left(self):
        f, hunk = _file_and_hunk(DELETION_DIFF)
        comments = create_comments(f, hunk, [AIReviewEntry(lineNumber="2", reviewComment="why remove?")])
        assert comments == [ReviewComment(path="src/app.py", line=2, body="why remove?", side="LEFT")]

    def test_added_line_is_anchored_right(self):
        f, hunk = _file_and_hunk(ADDITION_DIFF)
        comments = create_comments(f, hunk, [AIReviewEntry(lineNumber=10, reviewComment="b may be 0")])
        assert [c.side for c in comments] == ["RIGHT"]

    def test_context_and_unknown_lines_dropped(self):
        f, hunk = _file_and_hunk(ADDITION_DIFF)
        entries = [
            AIReviewEntry(lineNumber="9999", reviewComment="hallucinated"),
            AIReviewEntry(lineNumber="9", reviewComment="context line"),
            AIReviewEntry(lineNumber="-10", reviewComment="negative"),
            AIReviewEntry(lineNumber="ten", reviewComment="not a number"),
            AIReviewEntry(lineNumber="", reviewComment="empty"),
        ]
        assert create_comments(f, hunk, entries) == []

    def test_never_leaves_eligible_set(self):
        f, hunk = _file_and_hunk(ADDITION_DIFF)
        entries = [AIReviewEntry(lineNumber=n, reviewComment="x") for n in range(-5, 50)]
        comments = create_comments(f, hunk, entries)
        assert {c.line for c in comments} <= eligible_lines(hunk)
        assert len(comments) == 1

    def test_deleted_file_yields_nothing(self):
        f, hunk = _file_and_hunk(DELETED_FILE_DIFF)
        entries = [AIReviewEntry(lineNumber=1, reviewComment="removed code")]
        assert create_comments(f, hunk, entries) == []
