# mettle

Building blocks for a unit-testing framework: test attributes, test filters,
matchers with readable failure messages, and loggers that report the results
of test runs.

## Modules

- **`mettle.attributes`**: `BoolAttr`, `StringAttr` and `ListAttr` are
  attribute kinds. Calling one returns an `AttrInstance`, which holds a frozen
  set of values. `BoolAttr.instance()` returns an instance with no comment. An
  attribute created with `TestAction.SKIP` marks the tests that carry it as
  skipped. `make_attributes(...)` builds an attribute set. The set is a dict
  keyed and ordered by attribute name. `unite(a, b)` composes two instances of
  the same attribute, and raises `ValueError("mismatched attributes")` when they
  belong to different attributes. For a `ListAttr` the values are merged. For
  the other kinds the left instance wins. `unite_all(lhs, rhs)` merges two
  attribute sets.
- **`mettle.filters`**: `TestName` is a suite path, a test name and an id.
  `full_name()` joins these with `" > "`. A filter returns a `FilterResult`,
  which holds an action (`RUN`, `SKIP`, `HIDE` or `INDETERMINATE`) and a
  message.
  - `NameFilterSet` runs tests whose full name matches any of its regular
    expressions.
  - `AttrFilter` is a conjunction of `has_attr(name)` and
    `has_attr(name, value)` items. `~item` negates an item.
  - `AttrFilterSet` is a disjunction of `AttrFilter`s. Run beats skip, and skip
    beats hide.
  - `FilterSet` combines the name filters with the attribute filters.
  - `default_filter` and `filter_by_attr` are the filters used when nothing is
    chosen.
- **`mettle.matchers`**: `equal_to`, `not_equal_to`, `greater`,
  `greater_equal`, `less`, `less_equal`, `anything`, `is_not`, `describe`,
  `filter`, `ensure_matcher` and `make_matcher`. Each matcher is callable and
  has a `desc()`. `expect(value, matcher)` and `expect(desc, value, matcher)`
  raise `ExpectationError` (an `AssertionError`) with an "expected/actual"
  message. The message is prefixed with the caller's file and line.
- **`mettle.exit_code`**: `ExitCode`, an `IntEnum` of driver exit statuses
  (`SUCCESS`, `FAILURE`, `TIMEOUT`, `BAD_ARGS`, `NO_INPUTS`, `UNKNOWN_ERROR`,
  `FATAL`). The values from 64 up follow the `sysexits.h` convention.
- **`mettle.posix`**: context managers that put things back on exit.
  - `ScopedPipe` closes both ends of a pipe. It also has `move_read` and
    `move_write`, which move an end onto another file descriptor.
  - `ScopedSigprocmask` keeps a stack of signal-mask changes.
  - `ScopedSigaction` restores the previous handler of a signal.
  - `err_string(errnum)` returns the system's message for an error number.
- **`mettle.logs`**: loggers that receive the events of a test run. These
  events are `started_run`, `started_suite`, `started_test`, `passed_test`,
  `failed_test`, `skipped_test`, `failed_file` and the rest; `FileLogger` in
  `mettle.logs.output` is their base class.
  - `mettle.logs.summary.SummaryLogger` summarizes one or more runs. It can
    show the elapsed time and captured output. It can pass every event on to
    another logger.
  - `mettle.logs.simple_summary.SimpleSummaryLogger` prints a plain pass/skip/
    fail summary.
  - `mettle.logs.verbose.VerboseLogger` prints each suite and test as it
    happens.
  - `mettle.logs.xunit.XunitLogger` writes an xUnit-style XML report when the
    run ends. The report goes to a file name or an open stream, and the logger
    supports a single run only. It builds the report with
    `mettle.logs.xml.Document`, `Element` and `Text`.

  The text loggers write to an `IndentingWriter`. `IndentingWriter(colored=True)`
  emits terminal color sequences. `TestOutput` holds a test's captured stdout
  and stderr.

## Installing

```
pip install .
```

## Example

```python
from mettle.attributes import BoolAttr, TestAction, make_attributes
from mettle.filters import AttrFilter, AttrFilterSet, TestName, has_attr
from mettle.matchers import equal_to, expect

slow = BoolAttr("slow", TestAction.SKIP)
attrs = make_attributes(slow("takes a while"))

# Asking for "slow" tests explicitly runs them instead of skipping them.
result = AttrFilterSet([AttrFilter([has_attr("slow")])])(TestName(), attrs)
expect(result.action, equal_to(TestAction.RUN))
```

A summary of a run:

```python
from datetime import timedelta

from mettle.filters import TestName
from mettle.logs.output import IndentingWriter, TestOutput
from mettle.logs.summary import SummaryLogger

out = IndentingWriter()
log = SummaryLogger(out)
test = TestName(["suite"], "test", 1)
log.started_run()
log.started_test(test)
log.passed_test(test, TestOutput(), timedelta(milliseconds=5))
log.ended_run()
log.summarize()
print(out.getvalue())  # 1/1 test passed
```

## What this package does not do

There is no command to start and no test runner. The package does not define
suites, discover or run tests, capture their output, or enforce timeouts. A
caller that runs tests uses the filters to decide what to run and sends each
event to a logger.

## Running the tests

```
pip install .[test]
pytest
```