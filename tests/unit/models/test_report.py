"""Unit tests for run report models."""

import pytest
from pkgstrap.models.operation import OperationResult, OperationState
from pkgstrap.models.package import PackageRef
from pkgstrap.models.report import EntryOutcome, RunReport


def _outcome(index: int, identifier: str, state: OperationState) -> EntryOutcome:
    error = None if state == OperationState.SUCCEEDED else "nope"
    return EntryOutcome(index, PackageRef.from_identifier(identifier), state, error)


class TestOperationResult:
    """Tests for OperationResult flags."""

    def test_pending_is_not_terminal(self) -> None:
        """PENDING results are not terminal."""
        result = OperationResult(OperationState.PENDING)
        assert result.is_terminal is False
        assert result.failed is False

    def test_timed_out_counts_as_failed(self) -> None:
        """TIMED_OUT is terminal and failed."""
        result = OperationResult(OperationState.TIMED_OUT, error="late")
        assert result.is_terminal is True
        assert result.failed is True
        assert result.success is False


class TestEntryOutcome:
    """Tests for EntryOutcome validation."""

    def test_rejects_pending_state(self) -> None:
        """Only terminal states can be recorded."""
        with pytest.raises(ValueError, match="terminal"):
            _outcome(0, "org.a.b", OperationState.PENDING)


class TestRunReport:
    """Tests for RunReport aggregation and summary."""

    def test_summary_completed(self) -> None:
        """A run without failures summarizes as completed."""
        report = RunReport()
        report.record(_outcome(0, "org.a.b", OperationState.SUCCEEDED))

        assert report.summary() == "completed"
        assert len(report.succeeded) == 1

    def test_summary_lists_failures(self) -> None:
        """Failed and timed-out entries are enumerated."""
        report = RunReport()
        report.record(_outcome(0, "org.a.b", OperationState.SUCCEEDED))
        report.record(_outcome(1, "org.c.d", OperationState.FAILED))
        report.record(_outcome(2, "org.e.f", OperationState.TIMED_OUT))

        assert report.summary() == (
            "completed with 2 failed: org.c.d (failed), org.e.f (timed_out)"
        )
        assert [o.index for o in report.failures] == [1, 2]

    def test_summary_halted(self) -> None:
        """A halt reason takes precedence over outcomes."""
        report = RunReport(halt_reason="Manifest not found: x")

        assert report.halted is True
        assert report.summary() == "halted: Manifest not found: x"
