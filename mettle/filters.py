"""Filters that decide whether tests run, are skipped or are hidden."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .attributes import AttrInstance, TestAction

Attributes = Mapping[str, AttrInstance]
T = TypeVar("T")


@dataclass(frozen=True)
class TestName:
    """The full identity of a test: its suite path, its name and its id."""

    __test__ = False

    suites: tuple = ()
    test: str = ""
    id: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "suites", tuple(self.suites))

    def full_name(self) -> str:
        return " > ".join((*self.suites, self.test))


@dataclass(frozen=True)
class FilterResult:
    """The outcome of a filter: an action and an explanatory message."""

    action: TestAction
    message: str = ""


def _first_value(attr: AttrInstance | None) -> str:
    if attr is None or not attr.value:
        return ""
    return min(attr.value)


def default_filter(name: TestName, attrs: Attributes) -> FilterResult:
    """A filter that never decides anything."""
    return FilterResult(TestAction.INDETERMINATE)


def filter_by_attr(attrs: Attributes) -> FilterResult:
    """Skip a test carrying any skipping attribute, otherwise run it."""
    for attr in attrs.values():
        if attr.attribute.action is TestAction.SKIP:
            return FilterResult(TestAction.SKIP, _first_value(attr))
    return FilterResult(TestAction.RUN)


class _FilterCollection(Generic[T]):
    def __init__(self, filters: Iterable[T] = ()) -> None:
        self._filters: list[T] = []
        for item in filters:
            self.insert(item)

    def insert(self, item: T) -> None:
        self._filters.append(item)

    def __len__(self) -> int:
        return len(self._filters)

    def __iter__(self) -> Iterator[T]:
        return iter(self._filters)


class NameFilterSet(_FilterCollection["re.Pattern[str]"]):
    """Runs tests whose full name matches any of a set of regexes."""

    def insert(self, item: str | re.Pattern[str]) -> None:
        self._filters.append(re.compile(item) if isinstance(item, str) else item)

    def __call__(self, name: TestName, attrs: Attributes) -> FilterResult:
        if not self._filters:
            return FilterResult(TestAction.INDETERMINATE)
        full = name.full_name()
        if any(regex.search(full) for regex in self._filters):
            return FilterResult(TestAction.RUN)
        return FilterResult(TestAction.HIDE)


@dataclass(frozen=True)
class AttrFilterItem:
    """A predicate on the instance of one named attribute (None if absent)."""

    attribute: str
    func: Callable[[AttrInstance | None], bool]

    def __invert__(self) -> AttrFilterItem:
        func = self.func
        return AttrFilterItem(self.attribute, lambda attr: not func(attr))


def has_attr(name: str, value: str | None = None) -> AttrFilterItem:
    """Match tests that have the attribute, or that have it with this value."""
    if value is None:
        return AttrFilterItem(name, lambda attr: attr is not None)
    return AttrFilterItem(
        name, lambda attr: attr is not None and value in attr.value
    )


class AttrFilter(_FilterCollection[AttrFilterItem]):
    """A conjunction of attribute predicates."""

    def __call__(self, name: TestName, attrs: Attributes) -> FilterResult:
        explicitly_shown = set()
        for item in self._filters:
            attr = attrs.get(item.attribute)
            if not item.func(attr):
                return FilterResult(TestAction.HIDE, _first_value(attr))
            if attr is not None:
                explicitly_shown.add(id(attr.attribute))

        for attr in attrs.values():
            if (attr.attribute.action is TestAction.SKIP
                    and id(attr.attribute) not in explicitly_shown):
                return FilterResult(TestAction.SKIP, _first_value(attr))
        return FilterResult(TestAction.RUN)

    def insert(self, item: AttrFilterItem) -> None:
        self._filters.append(item)


class AttrFilterSet(_FilterCollection[AttrFilter]):
    """A disjunction of attribute filters: run beats skip beats hide."""

    def __call__(self, name: TestName, attrs: Attributes) -> FilterResult:
        result: FilterResult | None = None
        for attr_filter in self._filters:
            current = attr_filter(name, attrs)
            if current.action is TestAction.RUN:
                return current
            if result is None or (current.action is TestAction.SKIP
                                   and result.action is TestAction.HIDE):
                result = current
        return result if result is not None else FilterResult(
            TestAction.INDETERMINATE
        )

    def insert(self, item: AttrFilter | Iterable[AttrFilterItem]) -> None:
        self._filters.append(
            item if isinstance(item, AttrFilter) else AttrFilter(item)
        )


@dataclass
class FilterSet:
    """Combines name filters and attribute filters."""

    by_name: NameFilterSet = field(default_factory=NameFilterSet)
    by_attr: AttrFilterSet = field(default_factory=AttrFilterSet)

    def __call__(self, name: TestName, attrs: Attributes) -> FilterResult:
        first = self.by_name(name, attrs)
        if first.action is TestAction.HIDE:
            return first
        second = self.by_attr(name, attrs)
        if second.action is TestAction.INDETERMINATE:
            return first
        return second