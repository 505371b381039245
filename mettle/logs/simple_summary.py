"""A plain summary logger with no colors and no per-run detail."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from ..filters import TestName
from .output import FileLogger, IndentingWriter, TestOutput


@dataclass(frozen=True)
class _TestDetails:
    test: TestName
    message: str


class SimpleSummaryLogger(FileLogger):
    """Counts tests and lists the skipped and failed ones."""

    def __init__(self, out: IndentingWriter) -> None:
        self._out = out
        self._total = 0
        self._failures: list[_TestDetails] = []
        self._skips: list[_TestDetails] = []

    def started_test(self, test: TestName) -> None:
        self._total += 1

    def failed_test(
        self,
        test: TestName,
        message: str,
        output: TestOutput,
        duration: timedelta,
    ) -> None:
        self._failures.append(_TestDetails(test, message))

    def skipped_test(self, test: TestName, message: str) -> None:
        self._skips.append(_TestDetails(test, message))

    def summarize(self) -> None:
        """Write the totals, then each skipped and each failed test."""
        out = self._out
        passes = self._total - len(self._skips) - len(self._failures)
        out.write(f"{passes}/{self._total} tests passed")
        if self._skips:
            out.write(f" ({len(self._skips)} skipped)")
        out.write("\n")

        with out.indented():
            for details in self._skips:
                self._summarize_test(details, failure=False)
            for details in self._failures:
                self._summarize_test(details, failure=True)

    def good(self) -> bool:
        """Tell whether no test has failed."""
        return not self._failures

    def _summarize_test(self, details: _TestDetails, failure: bool) -> None:
        out = self._out
        label = "FAILED" if failure else "SKIPPED"
        out.write(f"{details.test.full_name()} {label}\n")
        if details.message:
            with out.indented():
                out.write(details.message + "\n")