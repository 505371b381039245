"""Shared pieces for loggers: captured test output, indented writing and colors."""

from __future__ import annotations

import io
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import timedelta
from typing import TextIO

from ..filters import TestName

_SGR_CODES = {
    "reset": 0,
    "bold": 1,
    "underline": 4,
    "black": 30,
    "red": 31,
    "green": 32,
    "yellow": 33,
    "blue": 34,
    "magenta": 35,
    "cyan": 36,
    "white": 37,
    "normal": 39,
}


@dataclass(frozen=True)
class TestOutput:
    """What a test wrote to its standard output and standard error."""

    __test__ = False

    stdout_log: str = ""
    stderr_log: str = ""

    def __bool__(self) -> bool:
        return bool(self.stdout_log or self.stderr_log)


class Formatter:
    """Produces terminal escape sequences, or nothing when disabled."""

    def __init__(self, enabled: bool = False) -> None:
        self.enabled = enabled

    def fmt(self, *args: str) -> str:
        """Return the sequence selecting the named styles and colors."""
        try:
            codes = [str(_SGR_CODES[name]) for name in args]
        except KeyError as exc:
            raise ValueError(f"unknown terminal style {exc.args[0]!r}") from None
        if not self.enabled or not codes:
            return ""
        return f"\x1b[{';'.join(codes)}m"

    def reset(self) -> str:
        """Return the sequence restoring the default style."""
        return self.fmt("reset")


class IndentingWriter:
    """A text writer that indents every non-empty line it starts."""

    def __init__(
        self,
        stream: TextIO | None = None,
        *,
        colored: bool = False,
        indent_width: int = 2,
    ) -> None:
        self.stream = stream if stream is not None else io.StringIO()
        self.term = Formatter(colored)
        self.indent_width = indent_width
        self.indent = 0
        self._at_line_start = True

    def write(self, text: str) -> int:
        pieces: list[str] = []
        first, *rest = text.split("\n")
        self._emit(first, pieces)
        for part in rest:
            pieces.append("\n")
            self._at_line_start = True
            self._emit(part, pieces)
        self.stream.write("".join(pieces))
        return len(text)

    def _emit(self, part: str, pieces: list[str]) -> None:
        if not part:
            return
        if self._at_line_start and self.indent > 0:
            pieces.append(" " * self.indent)
        self._at_line_start = False
        pieces.append(part)

    @contextmanager
    def indented(self, amount: int | None = None) -> Iterator[IndentingWriter]:
        """Indent by one level, or by ``amount`` spaces, for the block's duration."""
        step = self.indent_width if amount is None else amount
        self.indent += step
        try:
            yield self
        finally:
            self.indent -= step

    def flush(self) -> None:
        self.stream.flush()

    def getvalue(self) -> str:
        """Return everything written so far (the stream must be a StringIO)."""
        return self.stream.getvalue()


class FileLogger:
    """Receives the events of a test run.

    The base class only keeps track of the file being run; every other
    handler ignores its event unless a subclass overrides it.
    """

    current_file: str | None = None

    def started_run(self) -> None:
        pass

    def ended_run(self) -> None:
        pass

    def started_suite(self, suites: Sequence[str]) -> None:
        pass

    def ended_suite(self, suites: Sequence[str]) -> None:
        pass

    def started_test(self, test: TestName) -> None:
        pass

    def passed_test(
        self, test: TestName, output: TestOutput, duration: timedelta
    ) -> None:
        pass

    def failed_test(
        self,
        test: TestName,
        message: str,
        output: TestOutput,
        duration: timedelta,
    ) -> None:
        pass

    def skipped_test(self, test: TestName, message: str) -> None:
        pass

    def started_file(self, file: str) -> None:
        self.current_file = file

    def ended_file(self, file: str) -> None:
        self.current_file = None

    def failed_file(self, file: str, message: str) -> None:
        pass