"""
Tests for OperationResult.
"""

from hireflow.results import ErrorKind, OperationResult


class TestOperationResult:
    """Test cases for OperationResult."""

    def test_ok(self):
        result = OperationResult.ok("payload", message="done")

        assert result
        assert result.is_failure is False
        assert result.data == "payload"
        assert result.error is None
        assert result.kind is None
        assert str(result) == "✓ done"

    def test_fail(self):
        result = OperationResult.fail(ErrorKind.OUT_OF_RANGE, "No such step")

        assert not result
        assert result.is_failure is True
        assert result.data is None
        assert result.error == "No such step"
        assert str(result) == "✗ [OUT_OF_RANGE] No such step"

    def test_wrap_keeps_kind(self):
        inner = OperationResult.fail(ErrorKind.UNAUTHORIZED, "Not allowed")

        outer = inner.wrap("Failed to approve")

        assert outer.kind == ErrorKind.UNAUTHORIZED
        assert outer.error == "Failed to approve: Not allowed"
        assert inner.error == "Not allowed"
