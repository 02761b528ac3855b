"""Tests for line_resolver.py: anchor line numbers and eligible line sets."""

import pytest

from conftest import ADDITION_DIFF, DELETION_DIFF
from diff_parser import parse_unified_diff
from line_resolver import eligible_lines, resolve_line_number
from models import AddedLine, ContextLine, RemovedLine


class TestResolveLineNumber:
    def test_context_uses_new_file_number(self):
        assert resolve_line_number(ContextLine(content="x", source_line_no=3, target_line_no=7)) == 7

    def test_added_uses_new_file_number(self):
        assert resolve_line_number(AddedLine(content="x", target_line_no=12)) == 12

    def test_removed_uses_old_file_number(self):
        assert resolve_line_number(RemovedLine(content="x", source_line_no=4)) == 4

    def test_rejects_non_change(self):
        with pytest.raises(TypeError):
            resolve_line_number({"add": True, "ln": 3})

    def test_parsed_changes_resolve_to_non_negative_numbers(self):
        for diff in (ADDITION_DIFF, DELETION_DIFF):
            for change in parse_unified_diff(diff)[0].hunks[0].changes:
                assert resolve_line_number(change) >= 0


class TestEligibleLines:
    def test_only_added_lines(self):
        hunk = parse_unified_diff(ADDITION_DIFF)[0].hunks[0]
        assert eligible_lines(hunk) == frozenset({10})

    def test_removed_lines_use_old_numbers(self):
        hunk = parse_unified_diff(DELETION_DIFF)[0].hunks[0]
        assert eligible_lines(hunk) == frozenset({2})

    def test_context_numbers_never_included(self):
        hunk = parse_unified_diff(ADDITION_DIFF)[0].hunks[0]
        context_numbers = {c.target_line_no for c in hunk.changes if isinstance(c, ContextLine)}
        assert context_numbers == {8, 9, 11}
        assert not (eligible_lines(hunk) & context_numbers)
