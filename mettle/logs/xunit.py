"""A logger that writes results as an xUnit-style XML report."""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import timedelta
from typing import TextIO

from ..filters import TestName
from .output import FileLogger, TestOutput
from .xml import Document, Element, Text


def _seconds(duration: timedelta) -> str:
    return f"{duration.total_seconds():f}"


def _message_element(name: str, message: str) -> Element:
    return Element(name).attr("message", message)


def _test_element(test: TestName) -> Element:
    return Element("testcase").attr("name", test.test)


def _append_test_output(elt: Element, output: TestOutput) -> None:
    if output.stdout_log:
        elt.append_child(Element("system-out").append_child(Text(output.stdout_log)))
    if output.stderr_log:
        elt.append_child(Element("system-err").append_child(Text(output.stderr_log)))


@dataclass
class _Suite:
    elt: Element
    failures: int = 0
    skips: int = 0
    duration: timedelta = field(default_factory=timedelta)


class XunitLogger(FileLogger):
    """Builds an XML report and writes it when the run ends.

    ``out`` is a file name or an open text stream. Only a single run is
    supported.
    """

    def __init__(self, out: str | os.PathLike[str] | TextIO, runs: int = 1) -> None:
        if runs != 1:
            raise ValueError("xunit logger may only be used with --runs=1")
        if isinstance(out, (str, os.PathLike)):
            self._stream: TextIO = open(out, "w", encoding="utf-8")
            self._owns_stream = True
        else:
            self._stream = out
            self._owns_stream = False
        self._doc = Document("testsuites")
        self._suites: list[_Suite] = []
        self._tests = 0
        self._failures = 0
        self._skips = 0
        self._duration = timedelta()

    def started_run(self) -> None:
        pass

    def ended_run(self) -> None:
        root = self._doc.root
        root.attr("tests", self._tests)
        root.attr("failures", self._failures)
        root.attr("skipped", self._skips)
        root.attr("time", _seconds(self._duration))
        self._doc.write(self._stream)
        self._stream.flush()
        if self._owns_stream:
            self._stream.close()

    def started_suite(self, suites: Sequence[str]) -> None:
        elt = Element("testsuite").attr("name", " > ".join(suites))
        self._suites.append(_Suite(elt))

    def ended_suite(self, suites: Sequence[str]) -> None:
        suite = self._current_suite()
        count = len(suite.elt.children)
        if count:
            suite.elt.attr("tests", count)
            suite.elt.attr("failures", suite.failures)
            suite.elt.attr("skipped", suite.skips)
            suite.elt.attr("time", _seconds(suite.duration))
            self._doc.root.append_child(suite.elt)
        self._suites.pop()

    def started_test(self, test: TestName) -> None:
        pass

    def passed_test(
        self, test: TestName, output: TestOutput, duration: timedelta
    ) -> None:
        suite = self._current_suite()
        elt = _test_element(test).attr("time", _seconds(duration))
        _append_test_output(elt, output)
        suite.elt.append_child(elt)
        self._tests += 1
        suite.duration += duration
        self._duration += duration

    def failed_test(
        self,
        test: TestName,
        message: str,
        output: TestOutput,
        duration: timedelta,
    ) -> None:
        suite = self._current_suite()
        elt = _test_element(test).attr("time", _seconds(duration))
        elt.append_child(_message_element("failure", message))
        _append_test_output(elt, output)
        suite.elt.append_child(elt)
        self._tests += 1
        self._failures += 1
        suite.failures += 1
        suite.duration += duration
        self._duration += duration

    def skipped_test(self, test: TestName, message: str) -> None:
        suite = self._current_suite()
        elt = _test_element(test)
        elt.append_child(_message_element("skipped", message))
        suite.elt.append_child(elt)
        self._tests += 1
        self._skips += 1
        suite.skips += 1

    def started_file(self, file: str) -> None:
        super().started_file(file)

    def ended_file(self, file: str) -> None:
        super().ended_file(file)

    def failed_file(self, file: str, message: str) -> None:
        suite = Element("testsuite")
        suite.attr("name", f"file `{file}`")
        suite.attr("tests", 1)
        suite.attr("failures", 1)
        suite.attr("time", 0)

        case = Element("testcase").attr("name", "<file>").attr("time", 0)
        case.append_child(_message_element("failure", message))
        suite.append_child(case)

        self._doc.root.append_child(suite)
        self._tests += 1
        self._failures += 1

    def _current_suite(self) -> _Suite:
        if not self._suites:
            raise RuntimeError("test event outside of any suite")
        return self._suites[-1]