"""Abstract base for streaming document formatters.

WHY: The assembler emits output in three phases (document start, one
chunk per completed Person, document end) and must not care how those
chunks look. This base class fixes that contract so the assembler works
with any formatter generically.

HOW: BaseStreamFormatter is an ABC with a ``name`` property and three
text-producing methods. The assembler encodes the returned text with a
single incremental encoder per conversion, so multi-byte charsets with a
byte-order mark (UTF-16, UTF-32) get exactly one BOM at the start.

RULES:
- Subclasses MUST implement ``name``, ``open_document()``,
  ``format_person()`` and ``close_document()``
- Methods return text (str), never bytes
- format_person() must not mutate the Person
- The same Person must always format to the same text
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from people_converter.core.ir import Person


class BaseStreamFormatter(ABC):
    """Abstract base for all streaming output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseStreamFormatter
    3. Implement name, open_document(), format_person() and close_document()
    4. Pass an instance to RecordAssembler(formatter=...)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'People XML'."""

    @abstractmethod
    def open_document(self) -> str:
        """Text written before the first row is processed."""

    @abstractmethod
    def format_person(self, person: Person) -> str:
        """Text for one completed Person, written as soon as it is flushed."""

    @abstractmethod
    def close_document(self) -> str:
        """Text written after the final flush."""
