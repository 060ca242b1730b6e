"""Record assembly: a streaming state machine from typed rows to Person records.

WHY: The legacy format spreads one person over many lines: a P row,
then phone, address and family rows until the next P row. Downstream
systems need one nested record per person. This module is the bridge
between the flat row stream and the formatter, and is where all
structural and duplicate checks live.

HOW: RecordAssembler keeps the currently open Person and a tagged
Target saying which individual (the Person or its latest FamilyMember)
receives T and A rows. Each row performs one transition. A P row, or
the end of input, completes the open Person: it is formatted, encoded
and written to the sink immediately, then dropped.

RULES:
- P: flush the open Person (if any), open a new one, target = Person
- F: requires an open Person; append member, target = that member
- T / A: requires an open Person; attach to the target
- Second Phone / Address on one target: DuplicateAssociationError,
  unless allow_duplicate_info, then the later row replaces the earlier
- Any other type code: StructuralFormatError
- Every BadFormatError is re-raised as "Bad format on line N: ..." with
  N the 1-based number of the line being processed
- On error the sink keeps only the root open tag and already flushed
  persons; no closing tag is written
- The sink is never closed here; it is flushed once at the end
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import BinaryIO, Iterable, Optional

from people_converter.adapters.xml_tree import EncodedSink
from people_converter.config import ConversionOptions
from people_converter.core.errors import (
    BadFormatError,
    DuplicateAssociationError,
    StructuralFormatError,
)
from people_converter.core.ir import (
    Address,
    FamilyMember,
    Individual,
    Person,
    Phone,
    Target,
)
from people_converter.core.lexer import Row, iter_lines, parse_row
from people_converter.formatters.base import BaseStreamFormatter
from people_converter.formatters.people_xml import PeopleXMLFormatter


@dataclass
class ConversionStats:
    """Counters for one conversion, reported by the CLI."""

    lines: int = 0
    persons: int = 0
    family_members: int = 0


class RecordAssembler:
    """Stateful converter from input lines to a streamed output document.

    One instance handles exactly one conversion. It is not thread-safe
    and must not be shared.

    Args:
        sink: Already-open binary stream receiving encoded output.
        charset: Output charset; characters it cannot represent are
            written as numeric character references.
        allow_duplicate_info: Overwrite instead of failing on a second
            Address or Phone row for the same individual.
        formatter: Output formatter, PeopleXMLFormatter by default.
    """

    def __init__(
        self,
        sink: BinaryIO,
        charset: str = "utf-8",
        allow_duplicate_info: bool = False,
        formatter: Optional[BaseStreamFormatter] = None,
    ) -> None:
        self._out = EncodedSink(sink, charset)
        self.charset = charset
        self.allow_duplicate_info = allow_duplicate_info
        self.formatter = formatter if formatter is not None else PeopleXMLFormatter()
        self.stats = ConversionStats()

        self._person: Optional[Person] = None
        self._target = Target.none()
        self._started = False
        self._finished = False

    @classmethod
    def from_options(
        cls,
        sink: BinaryIO,
        options: ConversionOptions,
    ) -> RecordAssembler:
        """Build an assembler from validated ConversionOptions."""
        return cls(
            sink,
            charset=options.charset,
            allow_duplicate_info=options.allow_duplicate_info,
            formatter=PeopleXMLFormatter(root_element=options.root_element),
        )

    # ------------------------------------------------------------------
    # Driving the conversion
    # ------------------------------------------------------------------

    def convert(self, lines: Iterable[str]) -> ConversionStats:
        """Convert every line and complete the document.

        Args:
            lines: Forward-only sequence of lines without terminators.

        Returns:
            Counters for the finished conversion.

        Raises:
            BadFormatError: On the first malformed or misplaced row,
                localized with its line number. Remaining lines are not read.
        """
        self.start()
        for line in lines:
            self.feed_line(line)
        self.finish()
        return self.stats

    def start(self) -> None:
        """Write the document opening. Called implicitly by feed_row()."""
        self._ensure_not_finished()
        if not self._started:
            self._started = True
            self._write(self.formatter.open_document())

    def feed_line(self, line: str) -> None:
        """Parse and process one line, localizing any format error."""
        self.stats.lines += 1
        try:
            self.feed_row(parse_row(line))
        except BadFormatError as exc:
            raise exc.with_line(self.stats.lines) from exc

    def feed_row(self, row: Row) -> None:
        """Apply one row transition. Errors are not localized here."""
        self.start()
        if row.type == "P":
            self._on_person(row)
        elif row.type == "F":
            self._on_family_member(row)
        elif row.type == "T":
            self._on_phone(row)
        elif row.type == "A":
            self._on_address(row)
        else:
            raise StructuralFormatError("Unknown row type: {}".format(row.type))

    def finish(self) -> None:
        """Flush the open Person, close the document and flush the sink."""
        self.start()
        self._flush_person()
        self._write(self.formatter.close_document())
        self._out.finish()
        self._finished = True

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _on_person(self, row: Row) -> None:
        # No more rows can belong to the open person
        self._flush_person()
        self._person = Person.from_row(row)
        self._target = Target.person(self._person)

    def _on_family_member(self, row: Row) -> None:
        person = self._require_person("FamilyMember")
        member = FamilyMember.from_row(row)
        person.family.append(member)
        self.stats.family_members += 1
        self._target = Target.family_member(member)

    def _on_phone(self, row: Row) -> None:
        individual = self._require_target("Phone")
        self._check_duplicate("Phone", individual.phone)
        individual.phone = Phone.from_row(row)

    def _on_address(self, row: Row) -> None:
        individual = self._require_target("Address")
        self._check_duplicate("Address", individual.address)
        individual.address = Address.from_row(row)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_person(self, row_name: str) -> Person:
        if self._person is None:
            raise StructuralFormatError(
                "{} row appeared before Person row".format(row_name)
            )
        return self._person

    def _require_target(self, row_name: str) -> Individual:
        # Target is NONE exactly when no Person is open
        individual = self._target.individual
        if individual is None:
            raise StructuralFormatError(
                "{} row appeared before Person row".format(row_name)
            )
        return individual

    def _check_duplicate(self, row_name: str, existing: object) -> None:
        if existing is None or self.allow_duplicate_info:
            return
        raise DuplicateAssociationError(
            "Duplicate error: {} row cannot appear multiple times "
            "for the same person".format(row_name)
        )

    def _flush_person(self) -> None:
        if self._person is None:
            return
        self._write(self.formatter.format_person(self._person))
        self.stats.persons += 1
        self._person = None
        self._target = Target.none()

    def _write(self, text: str) -> None:
        self._out.write(text)

    def _ensure_not_finished(self) -> None:
        if self._finished:
            raise RuntimeError("Conversion already finished")


def convert_lines(
    lines: Iterable[str],
    sink: BinaryIO,
    options: Optional[ConversionOptions] = None,
) -> ConversionStats:
    """Convert ``lines`` into ``sink`` using ``options`` (environment defaults if None)."""
    if options is None:
        options = ConversionOptions.from_env()
    return RecordAssembler.from_options(sink, options).convert(lines)


def convert_text(
    text: str,
    options: Optional[ConversionOptions] = None,
) -> bytes:
    """Convert an in-memory input string and return the encoded document.

    Lines may end in ``\\n``, ``\\r\\n`` or ``\\r``.
    """
    sink = io.BytesIO()
    convert_lines(iter_lines(io.StringIO(text, newline=None)), sink, options)
    return sink.getvalue()
