"""A small XML tree that writes itself as indented text."""

from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import TextIO, Union

from .output import IndentingWriter

# Anything that starts with "xml" or with something other than a letter or
# underscore, or that holds anything other than alphanumerics, underscores,
# hyphens and dots.
_INVALID_NAME = re.compile(r"^xml|^[^A-Za-z_]|[^A-Za-z0-9_.\-]", re.IGNORECASE)

_TEXT_ESCAPES = str.maketrans({
    "<": "&lt;",
    ">": "&gt;",
    "&": "&amp;",
    '"': "&quot;",
})

# Newlines are allowed in attributes, but they read badly and break the
# indentation, so they are escaped too.
_ATTR_ESCAPES = str.maketrans({
    "<": "&lt;",
    ">": "&gt;",
    "&": "&amp;",
    '"': "&quot;",
    "\n": "&#10;",
})


def valid_name(name: str) -> bool:
    """Tell whether ``name`` may be used as an XML tag or attribute name."""
    return bool(name) and _INVALID_NAME.search(name) is None


def _check_name(name: str) -> None:
    if not valid_name(name):
        raise ValueError(f"invalid XML name {name!r}")


def _writer(out: IndentingWriter | TextIO) -> IndentingWriter:
    return out if isinstance(out, IndentingWriter) else IndentingWriter(out)


class Text:
    """A run of character data."""

    def __init__(self, content: str) -> None:
        self.content = content

    def write(self, out: IndentingWriter | TextIO) -> None:
        _writer(out).write(self.content.translate(_TEXT_ESCAPES) + "\n")


Node = Union["Element", Text]


class Element:
    """An element with ordered attributes and child nodes."""

    def __init__(self, tag: str) -> None:
        _check_name(tag)
        self.tag = tag
        self._attrs: dict[str, str] = {}
        self._children: list[Node] = []

    @property
    def attrs(self) -> Mapping[str, str]:
        return MappingProxyType(self._attrs)

    @property
    def children(self) -> tuple[Node, ...]:
        return tuple(self._children)

    def attr(self, name: str, value: object) -> Element:
        """Set an attribute, replacing any earlier value of the same name."""
        _check_name(name)
        self._attrs[name] = str(value)
        return self

    def append_child(self, child: Node) -> Element:
        if not isinstance(child, (Element, Text)):
            raise TypeError(f"cannot append {child!r} to an element")
        self._children.append(child)
        return self

    def write(self, out: IndentingWriter | TextIO) -> None:
        out = _writer(out)
        attrs = "".join(
            f' {name}="{value.translate(_ATTR_ESCAPES)}"'
            for name, value in self._attrs.items()
        )
        if not self._children:
            out.write(f"<{self.tag}{attrs}/>\n")
            return
        out.write(f"<{self.tag}{attrs}>\n")
        with out.indented():
            for child in self._children:
                child.write(out)
        out.write(f"</{self.tag}>\n")


class Document:
    """An XML document with a single root element."""

    def __init__(self, root_tag: str) -> None:
        self.root = Element(root_tag)

    def write(self, out: IndentingWriter | TextIO) -> None:
        out = _writer(out)
        out.write('<?xml version="1.0" encoding="UTF-8"?>\n')
        self.root.write(out)