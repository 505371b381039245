"""Matchers: callable predicates that can describe what they expect."""

from __future__ import annotations

import inspect
import operator
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

_NO_THING = object()


@dataclass(frozen=True)
class MatchResult:
    """The outcome of a match, with an optional message describing the actual value."""

    matched: bool
    message: str = ""

    def __bool__(self) -> bool:
        return self.matched


class ExpectationError(AssertionError):
    """Raised when an expectation is not met."""


def _printable(value: Any) -> str:
    return repr(value)


def matcher_message(result: Any, value: Any) -> str:
    """Describe the actual value, preferring the message carried by the result."""
    if isinstance(result, MatchResult) and result.message:
        return result.message
    return _printable(value)


class Matcher:
    """A predicate with a description.

    If the matcher holds a ``thing``, the predicate is called as
    ``func(actual, thing)`` and the description is ``desc`` followed by the
    description of the thing and ``suffix``. Otherwise the predicate is called
    as ``func(actual)`` and ``desc`` is the whole description.
    """

    def __init__(
        self,
        func: Callable[..., Any],
        desc: str = "",
        thing: Any = _NO_THING,
        suffix: str = "",
    ) -> None:
        self._func = func
        self._prefix = desc
        self._thing = thing
        self._suffix = suffix

    def __call__(self, actual: Any) -> Any:
        if self._thing is _NO_THING:
            return self._func(actual)
        return self._func(actual, self._thing)

    def desc(self) -> str:
        if self._thing is _NO_THING:
            return self._prefix
        return f"{self._prefix}{_matcher_desc(self._thing)}{self._suffix}"

    def __repr__(self) -> str:
        return f"Matcher({self.desc()!r})"


def is_matcher(thing: Any) -> bool:
    """Tell whether ``thing`` is a matcher."""
    return isinstance(thing, Matcher)


def _matcher_desc(thing: Any) -> str:
    return thing.desc() if is_matcher(thing) else _printable(thing)


def make_matcher(
    func: Callable[..., Any],
    desc: str,
    thing: Any = _NO_THING,
    suffix: str = "",
) -> Matcher:
    """Build a matcher from a predicate and its description."""
    return Matcher(func, desc, thing, suffix)


def equal_to(expected: Any) -> Matcher:
    return make_matcher(operator.eq, "", expected)


def not_equal_to(expected: Any) -> Matcher:
    return make_matcher(operator.ne, "not ", expected)


def greater(expected: Any) -> Matcher:
    return make_matcher(operator.gt, "> ", expected)


def greater_equal(expected: Any) -> Matcher:
    return make_matcher(operator.ge, ">= ", expected)


def less(expected: Any) -> Matcher:
    return make_matcher(operator.lt, "< ", expected)


def less_equal(expected: Any) -> Matcher:
    return make_matcher(operator.le, "<= ", expected)


def anything() -> Matcher:
    """A matcher that accepts every value."""
    return make_matcher(lambda _actual: True, "anything")


def ensure_matcher(thing: Any) -> Matcher:
    """Return ``thing`` if it is a matcher, else a matcher for equality with it."""
    return thing if is_matcher(thing) else equal_to(thing)


def is_not(thing: Any) -> Matcher:
    """Negate a matcher (or equality with a value)."""
    return make_matcher(
        lambda actual, matcher: not matcher(actual), "not ", ensure_matcher(thing)
    )


def describe(matcher: Matcher, desc: str) -> Matcher:
    """Give a matcher a new description."""
    return make_matcher(matcher, desc)


def filter(func: Callable[[Any], Any], matcher: Any, desc: str = "") -> Matcher:
    """Match the result of applying ``func`` to the actual value."""

    def check(actual: Any, inner: Matcher) -> MatchResult:
        filtered = func(actual)
        result = inner(filtered)
        return MatchResult(bool(result), desc + matcher_message(result, filtered))

    return make_matcher(check, desc, ensure_matcher(matcher))


def _caller_location() -> tuple[str, int]:
    frame = inspect.currentframe()
    try:
        caller = frame.f_back.f_back if frame and frame.f_back else None
        if caller is None:
            return ("", 0)
        return (caller.f_code.co_filename, caller.f_lineno)
    finally:
        del frame


def expect(*args: Any, location: tuple[str, int] | None = None) -> None:
    """Check ``expect(value, matcher)`` or ``expect(desc, value, matcher)``.

    Raises ExpectationError if the matcher rejects the value. ``location`` is a
    ``(file, line)`` pair; by default it is the caller's position, and a line
    of 0 leaves it out of the message.
    """
    if len(args) == 2:
        desc = None
        value, matcher = args
    elif len(args) == 3:
        desc, value, matcher = args
    else:
        raise TypeError("expect() takes (value, matcher) or (desc, value, matcher)")
    if not is_matcher(matcher):
        raise TypeError("expect() needs a matcher")

    if location is None:
        location = _caller_location()

    result = matcher(value)
    if result:
        return

    file_name, line = location
    if desc is None:
        head = f"{file_name}:{line}\n" if line else ""
    else:
        head = f"{desc} ({file_name}:{line})\n" if line else f"{desc}\n"
    raise ExpectationError(
        f"{head}expected: {matcher.desc()}\n"
        f"actual:   {matcher_message(result, value)}"
    )