"""A logger that prints every suite and test as it happens."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import timedelta

from ..filters import TestName
from .output import FileLogger, IndentingWriter, TestOutput


class _Indenter:
    """Persistent indentation levels that can be undone all at once."""

    def __init__(self, out: IndentingWriter) -> None:
        self._out = out
        self._levels = 0

    def push(self) -> None:
        self._out.indent += self._out.indent_width
        self._levels += 1

    def pop(self) -> None:
        self._out.indent -= self._out.indent_width
        self._levels -= 1

    def reset(self) -> None:
        self._out.indent -= self._out.indent_width * self._levels
        self._levels = 0


class VerboseLogger(FileLogger):
    """Writes a line for each test, nested under its suites."""

    def __init__(
        self,
        out: IndentingWriter,
        runs: int = 1,
        show_time: bool = False,
        show_terminal: bool = False,
    ) -> None:
        self._out = out
        self._indent = _Indenter(out)
        self._run_indent = _Indenter(out)
        self._total_runs = runs
        self._run = 0
        self._first = True
        self._show_time = show_time
        self._show_terminal = show_terminal

    def started_run(self) -> None:
        if self._run >= self._total_runs:
            raise RuntimeError("tests were run too many times")
        out, term = self._out, self._out.term
        self._first = True

        if self._total_runs > 1:
            self._run += 1
            if self._run > 1:
                out.write("\n")
            out.write(
                f"{term.fmt('bold')}Test run{term.reset()} "
                f"{term.fmt('bold', 'yellow')}[#{self._run}/{self._total_runs}]"
                f"{term.reset()}\n\n"
            )
            self._run_indent.push()

    def ended_run(self) -> None:
        if self._total_runs > 1:
            self._run_indent.pop()

    def started_suite(self, suites: Sequence[str]) -> None:
        out, term = self._out, self._out.term
        if not self._first:
            out.write("\n")
        self._first = False
        out.write(f"{term.fmt('bold')}{suites[-1]}{term.reset()}\n")
        self._indent.push()

    def ended_suite(self, suites: Sequence[str]) -> None:
        self._indent.pop()

    def started_test(self, test: TestName) -> None:
        self._out.write(f"{test.test} ")
        self._out.flush()

    def passed_test(
        self, test: TestName, output: TestOutput, duration: timedelta
    ) -> None:
        out, term = self._out, self._out.term
        out.write(f"{term.fmt('bold', 'green')}PASSED{term.reset()}")
        self._summarize_output(output)
        self._log_time(duration)
        out.write("\n")
        with out.indented():
            self._log_output(output, False)

    def failed_test(
        self,
        test: TestName,
        message: str,
        output: TestOutput,
        duration: timedelta,
    ) -> None:
        out, term = self._out, self._out.term
        out.write(f"{term.fmt('bold', 'red')}FAILED{term.reset()}")
        self._summarize_output(output)
        self._log_time(duration)
        out.write("\n")
        with out.indented():
            if message:
                out.write(message + "\n")
            self._log_output(output, bool(message))

    def skipped_test(self, test: TestName, message: str) -> None:
        out, term = self._out, self._out.term
        out.write(f"{term.fmt('bold', 'blue')}SKIPPED{term.reset()}\n")
        if message:
            with out.indented():
                out.write(message + "\n")

    def started_file(self, file: str) -> None:
        super().started_file(file)

    def ended_file(self, file: str) -> None:
        self._indent.reset()
        super().ended_file(file)

    def failed_file(self, file: str, message: str) -> None:
        out, term = self._out, self._out.term
        self._indent.reset()
        if not self._first:
            out.write("\n")
        self._first = False
        out.write(f"`{file}` {term.fmt('bold', 'red')}FAILED{term.reset()}\n")
        with out.indented():
            out.write(message + "\n")

    def _log_time(self, duration: timedelta) -> None:
        if self._show_time:
            term = self._out.term
            millis = duration // timedelta(milliseconds=1)
            self._out.write(
                f" {term.fmt('bold', 'black')}({millis} ms){term.reset()}"
            )

    def _summarize_output(self, output: TestOutput) -> None:
        if self._show_terminal or not output:
            return
        term = self._out.term
        self._out.write(f" {term.fmt('yellow')}[...]{term.reset()}")

    def _log_output(self, output: TestOutput, extra_newline: bool) -> None:
        if not self._show_terminal or not output:
            return
        out, term = self._out, self._out.term
        if extra_newline:
            out.write("\n")
        for label, text in (("stdout", output.stdout_log),
                            ("stderr", output.stderr_log)):
            if text:
                out.write(
                    f"{term.fmt('yellow', 'underline')}{label}{term.reset()}:\n"
                    f"{text}\n"
                )