import io
import xml.etree.ElementTree as ET
from datetime import timedelta

import pytest

from mettle.filters import TestName
from mettle.logs.output import TestOutput
from mettle.logs.xunit import XunitLogger


def _parse(stream):
    return ET.fromstring(stream.getvalue().encode("utf-8"))


def _run(logger):
    logger.started_run()
    logger.started_suite(["suite"])
    logger.started_suite(["suite", "subsuite"])
    test = TestName(("suite", "subsuite"), "test", 1)
    logger.started_test(test)
    logger.passed_test(test, TestOutput("standard output", ""), timedelta(seconds=1))
    logger.ended_suite(["suite", "subsuite"])
    second = TestName(("suite",), "second", 2)
    logger.started_test(second)
    logger.failed_test(second, "error", TestOutput("", "standard error"),
                       timedelta(seconds=2))
    third = TestName(("suite",), "third", 3)
    logger.started_test(third)
    logger.skipped_test(third, "message")
    logger.ended_suite(["suite"])
    logger.ended_run()


def test_multiple_runs_rejected():
    with pytest.raises(ValueError, match="--runs=1"):
        XunitLogger(io.StringIO(), runs=2)


def test_root_totals():
    stream = io.StringIO()
    _run(XunitLogger(stream))
    root = _parse(stream)
    assert root.tag == "testsuites"
    assert root.get("tests") == "3"
    assert root.get("failures") == "1"
    assert root.get("skipped") == "1"
    assert float(root.get("time")) == pytest.approx(3.0)


def test_time_has_six_decimals():
    stream = io.StringIO()
    _run(XunitLogger(stream))
    root = _parse(stream)
    case = root.find("testsuite/testcase")
    assert case.get("time") == "1.000000"


def test_suites_are_named_by_path_and_nested_last():
    stream = io.StringIO()
    _run(XunitLogger(stream))
    suites = _parse(stream).findall("testsuite")
    assert [s.get("name") for s in suites] == ["suite > subsuite", "suite"]
    inner, outer = suites
    assert inner.get("tests") == "1"
    assert inner.get("failures") == "0"
    assert outer.get("tests") == "2"
    assert outer.get("failures") == "1"
    assert outer.get("skipped") == "1"


def test_failure_skip_and_output_elements():
    stream = io.StringIO()
    _run(XunitLogger(stream))
    suites = _parse(stream).findall("testsuite")
    passed = suites[0].find("testcase")
    assert passed.find("system-out").text.strip() == "standard output"
    assert passed.find("system-err") is None

    failed, skipped = suites[1].findall("testcase")
    assert failed.get("name") == "second"
    assert failed.find("failure").get("message") == "error"
    assert failed.find("system-err").text.strip() == "standard error"
    assert skipped.find("skipped").get("message") == "message"
    assert skipped.get("time") is None


def test_empty_suite_is_left_out():
    stream = io.StringIO()
    logger = XunitLogger(stream)
    logger.started_run()
    logger.started_suite(["empty"])
    logger.ended_suite(["empty"])
    logger.ended_run()
    root = _parse(stream)
    assert root.findall("testsuite") == []
    assert root.get("tests") == "0"


def test_failed_file():
    stream = io.StringIO()
    logger = XunitLogger(stream)
    logger.started_run()
    logger.failed_file("test_file", "error")
    logger.ended_run()
    root = _parse(stream)
    suite = root.find("testsuite")
    assert suite.get("name") == "file `test_file`"
    case = suite.find("testcase")
    assert case.get("name") == "<file>"
    assert case.find("failure").get("message") == "error"
    assert root.get("failures") == "1"


def test_test_outside_suite_raises():
    logger = XunitLogger(io.StringIO())
    with pytest.raises(RuntimeError):
        logger.passed_test(TestName((), "test", 1), TestOutput(), timedelta())


def test_writes_to_named_file(tmp_path):
    path = tmp_path / "report.xml"
    _run(XunitLogger(str(path)))
    root = ET.parse(path).getroot()
    assert root.get("tests") == "3"
    assert len(root.findall("testsuite")) == 2