import re
from datetime import timedelta

import pytest

from mettle.filters import TestName
from mettle.logs.output import IndentingWriter, TestOutput
from mettle.logs.verbose import VerboseLogger

SUITE_TEST = TestName(("suite",), "test", 1)
SUBSUITE_TEST = TestName(("suite", "subsuite"), "test", 2)
SECOND_TEST = TestName(("second suite",), "test", 3)
OUTPUT = TestOutput("standard output", "standard error")
NO_TIME = timedelta(0)


def run_tests(logger, skip=False, fail=False, file_failure=False):
    logger.started_run()
    logger.started_file("test_file1")
    logger.started_suite(["suite"])
    logger.started_test(SUITE_TEST)
    logger.passed_test(SUITE_TEST, TestOutput(), NO_TIME)
    logger.started_suite(["suite", "subsuite"])
    logger.started_test(SUBSUITE_TEST)
    if skip:
        logger.skipped_test(SUBSUITE_TEST, "message\nmore")
    else:
        logger.passed_test(SUBSUITE_TEST, TestOutput(), NO_TIME)
    logger.ended_suite(["suite", "subsuite"])
    logger.ended_suite(["suite"])
    logger.ended_file("test_file1")
    if file_failure:
        logger.started_file("test_file")
        logger.failed_file("test_file", "error\nmore")
    logger.started_file("test_file2")
    logger.started_suite(["second suite"])
    logger.started_test(SECOND_TEST)
    if fail:
        logger.failed_test(SECOND_TEST, "error\nmore", OUTPUT, NO_TIME)
    else:
        logger.passed_test(SECOND_TEST, TestOutput(), NO_TIME)
    logger.ended_suite(["second suite"])
    logger.ended_file("test_file2")
    logger.ended_run()


def make(runs=1, show_time=False, show_terminal=False):
    out = IndentingWriter()
    return out, VerboseLogger(out, runs, show_time, show_terminal)


def test_passing_run():
    out, logger = make()
    run_tests(logger)
    assert out.getvalue() == (
        "suite\n  test PASSED\n\n  subsuite\n    test PASSED\n\n"
        "second suite\n  test PASSED\n"
    )
    assert out.indent == 0


def test_failing_run_hides_terminal_output():
    out, logger = make()
    run_tests(logger, skip=True, fail=True)
    text = out.getvalue()
    assert "test FAILED [...]\n" in text
    assert "test SKIPPED\n" in text
    assert "stdout" not in text
    lines = text.split("\n")
    failed = next(i for i, line in enumerate(lines) if "FAILED" in line)
    indent = len(lines[failed]) - len(lines[failed].lstrip())
    assert lines[failed + 1] == " " * (indent + out.indent_width) + "error"
    assert lines[failed + 2] == " " * (indent + out.indent_width) + "more"


def test_failing_run_shows_terminal_output():
    out, logger = make(show_terminal=True)
    run_tests(logger, fail=True)
    text = out.getvalue()
    assert "[...]" not in text
    stripped = [line.strip() for line in text.split("\n")]
    start = stripped.index("error")
    assert stripped[start:start + 7] == [
        "error", "more", "", "stdout:", OUTPUT.stdout_log,
        "stderr:", OUTPUT.stderr_log,
    ]


def test_passed_output_shown_with_terminal():
    out, logger = make(show_terminal=True)
    logger.started_run()
    logger.started_suite(["suite"])
    logger.started_test(SUITE_TEST)
    logger.passed_test(SUITE_TEST, TestOutput("out"), NO_TIME)
    stripped = [line.strip() for line in out.getvalue().split("\n")]
    assert stripped[1:4] == ["test PASSED", "stdout:", "out"]


def test_show_time():
    out, logger = make(show_time=True)
    run_tests(logger)
    text = out.getvalue()
    assert len(re.findall(r"PASSED \(\d+ ms\)\n", text)) == 3


def test_show_time_reports_milliseconds():
    out, logger = make(show_time=True)
    logger.started_run()
    logger.started_suite(["suite"])
    logger.started_test(SUITE_TEST)
    logger.passed_test(SUITE_TEST, TestOutput(), timedelta(milliseconds=1000))
    assert "(1000 ms)" in out.getvalue()


def test_failed_file_resets_indent():
    out, logger = make()
    run_tests(logger, skip=True, file_failure=True)
    lines = out.getvalue().split("\n")
    assert "`test_file` FAILED" in lines
    idx = lines.index("`test_file` FAILED")
    assert lines[idx - 1] == ""
    assert lines[idx + 1].strip() == "error"
    assert lines[idx + 1].startswith(" " * out.indent_width)
    assert out.indent == 0


def test_multiple_runs_have_headers():
    out, logger = make(runs=2)
    run_tests(logger)
    run_tests(logger)
    text = out.getvalue()
    assert text.startswith("Test run [#1/2]\n\n")
    assert "\nTest run [#2/2]\n\n" in text
    lines = text.split("\n")
    assert " " * out.indent_width + "suite" in lines
    assert out.indent == 0


def test_too_many_runs():
    _, logger = make(runs=2)
    run_tests(logger)
    run_tests(logger)
    with pytest.raises(RuntimeError):
        logger.started_run()


def test_colored_output_contains_escapes():
    out = IndentingWriter(colored=True)
    logger = VerboseLogger(out)
    run_tests(logger)
    text = out.getvalue()
    assert out.term.fmt("bold", "green") + "PASSED" + out.term.reset() in text
    assert text.count("PASSED") == 3