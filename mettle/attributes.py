"""Test attributes: named tags attached to tests and suites."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field


class TestAction(enum.Enum):
    """What should happen to a test after filtering."""

    __test__ = False

    RUN = "run"
    SKIP = "skip"
    HIDE = "hide"
    INDETERMINATE = "indeterminate"


@dataclass(frozen=True)
class AttrInstance:
    """A concrete use of an attribute, holding its set of values."""

    attribute: AttrBase
    value: frozenset = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", frozenset(self.value))

    @property
    def name(self) -> str:
        return self.attribute.name


class AttrBase:
    """Base class of all attribute kinds."""

    def __init__(self, name: str, action: TestAction = TestAction.RUN) -> None:
        if action not in (TestAction.RUN, TestAction.SKIP):
            raise ValueError("attribute action must be RUN or SKIP")
        self._name = name
        self._action = action

    @property
    def name(self) -> str:
        return self._name

    @property
    def action(self) -> TestAction:
        return self._action

    def _check_owner(self, lhs: AttrInstance, rhs: AttrInstance) -> None:
        if lhs.attribute is not self or rhs.attribute is not self:
            raise ValueError("instances do not belong to this attribute")

    def compose(self, lhs: AttrInstance, rhs: AttrInstance) -> AttrInstance:
        """Combine two instances of this attribute; the left one wins."""
        self._check_owner(lhs, rhs)
        return lhs

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r})"


class BoolAttr(AttrBase):
    """An attribute that is either present or not, with an optional comment."""

    def instance(self) -> AttrInstance:
        """Return an instance with no comment."""
        return AttrInstance(self, frozenset())

    def __call__(self, comment: str) -> AttrInstance:
        return AttrInstance(self, frozenset({comment}))


class StringAttr(AttrBase):
    """An attribute carrying a single string value."""

    def __init__(self, name: str) -> None:
        super().__init__(name)

    def __call__(self, value: str) -> AttrInstance:
        return AttrInstance(self, frozenset({value}))


class ListAttr(AttrBase):
    """An attribute carrying a set of values; composing merges them."""

    def __init__(self, name: str) -> None:
        super().__init__(name)

    def __call__(self, *args: str) -> AttrInstance:
        return AttrInstance(self, frozenset(args))

    def compose(self, lhs: AttrInstance, rhs: AttrInstance) -> AttrInstance:
        self._check_owner(lhs, rhs)
        return AttrInstance(self, lhs.value | rhs.value)


def _to_instance(item: AttrInstance | BoolAttr) -> AttrInstance:
    if isinstance(item, AttrInstance):
        return item
    if isinstance(item, BoolAttr):
        return item.instance()
    raise TypeError(f"cannot use {item!r} as an attribute")


def make_attributes(*args: AttrInstance | BoolAttr) -> dict[str, AttrInstance]:
    """Build an attribute set keyed and ordered by name; the first of a name wins."""
    result: dict[str, AttrInstance] = {}
    for item in args:
        inst = _to_instance(item)
        result.setdefault(inst.name, inst)
    return dict(sorted(result.items()))


def unite(lhs: AttrInstance, rhs: AttrInstance) -> AttrInstance:
    """Compose two instances of the same attribute."""
    if lhs.attribute is not rhs.attribute:
        raise ValueError("mismatched attributes")
    return lhs.attribute.compose(lhs, rhs)


def unite_all(
    lhs: Mapping[str, AttrInstance] | Iterable[AttrInstance],
    rhs: Mapping[str, AttrInstance] | Iterable[AttrInstance],
) -> dict[str, AttrInstance]:
    """Merge two attribute sets, uniting instances that share a name."""
    left = lhs if isinstance(lhs, Mapping) else make_attributes(*lhs)
    right = rhs if isinstance(rhs, Mapping) else make_attributes(*rhs)
    merged = dict(left)
    for name, inst in right.items():
        merged[name] = unite(merged[name], inst) if name in merged else inst
    return dict(sorted(merged.items()))