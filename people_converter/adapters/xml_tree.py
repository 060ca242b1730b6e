"""Generic XML element builder and encoded byte sink on top of lxml.

WHY: Formatters describe output as a small tree of named elements with
text leaves and nested children, rendered at a given indentation depth.
The rendered text then goes to a byte sink in the configured charset.
Wrapping lxml behind that narrow interface keeps formatters free of
serializer details such as escaping and indentation.

HOW: XMLElement wraps an ``lxml.etree`` element. Serialization works on
a deep copy so indentation never mutates the tree and renders to text with
``etree.tostring(encoding="unicode")``. EncodedSink is the one place text
becomes bytes: a single incremental encoder per document, so stateful
charsets such as UTF-16 emit their BOM once.

RULES:
- add_child_value(name, value) appends ``<name>value</name>``
- add_child(element) appends an XMLElement's tree (the child is copied)
- Indentation: two spaces per level, starting at ``indent_level``
- No XML declaration is emitted
- Characters the charset cannot encode become numeric character references
- Serializing the same element twice yields identical text
- EncodedSink flushes the sink on finish() but never closes it
"""

from __future__ import annotations

import codecs
import copy
from typing import BinaryIO

from lxml import etree

INDENT = "  "
"""One level of indentation in serialized output."""


class XMLElement:
    """A named XML element with text-leaf and nested-element children."""

    def __init__(self, tag: str) -> None:
        self._element = etree.Element(tag)

    @property
    def tag(self) -> str:
        return self._element.tag

    def add_child_value(self, name: str, value: str) -> XMLElement:
        """Append a text leaf ``<name>value</name>``. Returns self."""
        child = etree.SubElement(self._element, name)
        child.text = value
        return self

    def add_child(self, element: XMLElement) -> XMLElement:
        """Append a copy of another element's tree. Returns self."""
        self._element.append(copy.deepcopy(element._element))
        return self

    def children(self) -> list[str]:
        """Tags of the direct children, in document order."""
        return [child.tag for child in self._element]

    def to_string(self, indent_level: int = 0) -> str:
        """Render the element as indented text, without trailing newline."""
        if indent_level < 0:
            raise ValueError("indent_level must be >= 0")
        tree = copy.deepcopy(self._element)
        etree.indent(tree, space=INDENT, level=indent_level)
        body = etree.tostring(tree, encoding="unicode", with_tail=False)
        return INDENT * indent_level + body


class EncodedSink:
    """Text-to-bytes adapter over an already-open binary stream.

    Args:
        sink: Binary stream receiving the encoded output.
        charset: Python codec name; unencodable characters are written as
            numeric character references.
    """

    def __init__(self, sink: BinaryIO, charset: str = "utf-8") -> None:
        self._sink = sink
        self._encoder = codecs.getincrementalencoder(charset)(
            errors="xmlcharrefreplace"
        )

    def write(self, text: str) -> None:
        data = self._encoder.encode(text)
        if data:
            self._sink.write(data)

    def finish(self) -> None:
        """Write any pending encoder state and flush the sink."""
        tail = self._encoder.encode("", final=True)
        if tail:
            self._sink.write(tail)
        self._sink.flush()
