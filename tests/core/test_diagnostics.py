"""
Tests for diagnostic records.
"""

from flowlint.core import Diagnostic, IssueCategory, Severity, count_by_severity


class TestDiagnostic:
    """Test Diagnostic construction and helpers."""

    def test_factories(self):
        error = Diagnostic.error(IssueCategory.EMPTY_CODE, "Code block is empty.")
        warning = Diagnostic.warning(
            IssueCategory.BOOLEAN_CONTEXT, "Not boolean.", suggested_replacement="{x} != 0"
        )

        assert error.is_error and not error.has_fix
        assert warning.severity is Severity.WARNING
        assert warning.has_fix

    def test_located_copy(self):
        """Test that locating returns a new record with the same identity."""
        diagnostic = Diagnostic.error(IssueCategory.TYPE_MISMATCH, "Mismatch.")

        located = diagnostic.located("flow-1", "node-1")

        assert (located.flow_id, located.node_id) == ("flow-1", "node-1")
        assert located.id == diagnostic.id
        assert diagnostic.flow_id is None

    def test_unique_ids(self):
        first = Diagnostic.error(IssueCategory.EMPTY_CODE, "x")
        second = Diagnostic.error(IssueCategory.EMPTY_CODE, "x")
        assert first.id != second.id

    def test_count_by_severity(self):
        diagnostics = [
            Diagnostic.error(IssueCategory.EMPTY_CODE, "a"),
            Diagnostic.warning(IssueCategory.UNDEFINED_VARIABLE, "b"),
            Diagnostic.warning(IssueCategory.UNDEFINED_VARIABLE, "c"),
        ]
        assert count_by_severity(diagnostics) == {Severity.ERROR: 1, Severity.WARNING: 2}
        assert count_by_severity([]) == {Severity.ERROR: 0, Severity.WARNING: 0}
