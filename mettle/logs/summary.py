"""A logger that prints a summary of passes, skips and failures at the end."""

from __future__ import annotations

import math
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import timedelta

from ..filters import TestName
from .output import FileLogger, IndentingWriter, TestOutput


@dataclass
class _Failure:
    run: int
    message: str
    output: TestOutput = field(default_factory=TestOutput)


class SummaryLogger(FileLogger):
    """Collects results over one or more runs and summarizes them.

    Every event is also passed on to ``log`` when one is given.
    """

    def __init__(
        self,
        out: IndentingWriter,
        log: FileLogger | None = None,
        show_time: bool = False,
        show_terminal: bool = False,
    ) -> None:
        self._out = out
        self._log = log
        self._show_time = show_time
        self._show_terminal = show_terminal
        self._runs = 0
        self._total = 0
        self._file_index = 0
        self._start_time = 0.0
        self._skips: dict[int, tuple[TestName, str]] = {}
        self._failures: dict[int, tuple[TestName, list[_Failure]]] = {}
        self._failed_files: dict[tuple[int, str], list[_Failure]] = {}

    def started_run(self) -> None:
        if self._log:
            self._log.started_run()
        if self._show_time and self._runs == 0:
            self._start_time = time.monotonic()
        self._runs += 1
        self._total = 0
        self._file_index = 0

    def ended_run(self) -> None:
        if self._log:
            self._log.ended_run()

    def started_suite(self, suites: Sequence[str]) -> None:
        if self._log:
            self._log.started_suite(suites)

    def ended_suite(self, suites: Sequence[str]) -> None:
        if self._log:
            self._log.ended_suite(suites)

    def started_test(self, test: TestName) -> None:
        if self._log:
            self._log.started_test(test)
        self._total += 1

    def passed_test(
        self, test: TestName, output: TestOutput, duration: timedelta
    ) -> None:
        if self._log:
            self._log.passed_test(test, output, duration)

    def failed_test(
        self,
        test: TestName,
        message: str,
        output: TestOutput,
        duration: timedelta,
    ) -> None:
        if self._log:
            self._log.failed_test(test, message, output, duration)
        kept = output if self._show_terminal else TestOutput()
        _, failures = self._failures.setdefault(test.id, (test, []))
        failures.append(_Failure(self._runs, message, kept))

    def skipped_test(self, test: TestName, message: str) -> None:
        if self._log:
            self._log.skipped_test(test, message)
        self._skips.setdefault(test.id, (test, message))

    def started_file(self, file: str) -> None:
        if self._log:
            self._log.started_file(file)

    def ended_file(self, file: str) -> None:
        if self._log:
            self._log.ended_file(file)
        self._file_index += 1

    def failed_file(self, file: str, message: str) -> None:
        if self._log:
            self._log.failed_file(file, message)
        key = (self._file_index, file)
        self._file_index += 1
        self._failed_files.setdefault(key, []).append(
            _Failure(self._runs, message)
        )

    def summarize(self) -> None:
        """Write the summary of everything seen so far."""
        if self._runs == 0:
            raise RuntimeError("number of runs can't be zero")

        out, term = self._out, self._out.term
        if self._log:
            out.write("\n")

        passes = self._total - len(self._skips) - len(self._failures)
        noun = "test" if passes == 1 and self._total == 1 else "tests"
        out.write(f"{term.fmt('bold')}{passes}/{self._total} {noun} passed")

        if self._skips:
            out.write(f" ({len(self._skips)} skipped)")

        if self._failed_files:
            count = len(self._failed_files)
            plural = "s" if count > 1 else ""
            out.write(
                f" [{count} file{plural} {term.fmt('red')}FAILED"
                f"{term.fmt('normal')}]"
            )

        if self._show_time:
            elapsed = time.monotonic() - self._start_time
            out.write(f" {term.fmt('black')}(took {elapsed:.4f} s)")

        out.write(term.reset() + "\n")

        with out.indented():
            for key in sorted(self._skips):
                test, message = self._skips[key]
                self._summarize_skip(test.full_name(), message)
            for key in sorted(self._failures):
                test, failures = self._failures[key]
                self._summarize_failure(test.full_name(), failures)
            for key in sorted(self._failed_files):
                self._summarize_failure(f"`{key[1]}`", self._failed_files[key])

    def good(self) -> bool:
        """Tell whether no test and no file has failed."""
        return not self._failures and not self._failed_files

    def _summarize_skip(self, test: str, message: str) -> None:
        out, term = self._out, self._out.term
        out.write(f"{test} {term.fmt('bold', 'blue')}SKIPPED{term.reset()}\n")
        if message:
            with out.indented():
                out.write(message + "\n")

    def _summarize_failure(self, where: str, failures: list[_Failure]) -> None:
        out, term = self._out, self._out.term
        out.write(f"{where} {term.fmt('bold', 'red')}FAILED{term.reset()}")
        if self._runs > 1:
            color = "red" if len(failures) == self._runs else "yellow"
            out.write(
                f" {term.fmt('bold', color)}[{len(failures)}/{self._runs}]"
                f"{term.reset()}"
            )
        out.write("\n")

        with out.indented():
            if self._runs == 1:
                message = failures[0].message
                if message:
                    out.write(message + "\n")
                self._log_output(failures[0].output, bool(message))
            else:
                run_width = math.ceil(math.log10(self._runs))
                for failure in failures:
                    out.write(
                        f"{term.fmt('bold', 'yellow')}[#"
                        f"{failure.run:>{run_width}}]{term.reset()} "
                    )
                    with out.indented(run_width + 4):
                        out.write(failure.message + "\n")
                        self._log_output(failure.output, True)

    def _log_output(self, output: TestOutput, extra_newline: bool) -> None:
        if not self._show_terminal:
            return
        out, term = self._out, self._out.term
        if extra_newline and output:
            out.write("\n")
        for label, text in (("stdout", output.stdout_log),
                            ("stderr", output.stderr_log)):
            if text:
                out.write(
                    f"{term.fmt('yellow', 'underline')}{label}{term.reset()}:\n"
                    f"{text}\n"
                )