"""Row lexer: one raw text line in, one typed Row out.

WHY: Every line of the legacy format has the same outer shape,
``<TypeChar>|<field1>|<field2>|...``, regardless of record type. Parsing
that shape separately from the state machine keeps the assembler free of
string handling and makes format errors easy to test in isolation.

HOW: Check the minimum length and the separator at index 1, take the
type character verbatim, split the rest on ``|`` and trim each piece.

RULES:
- len(line) <= 2 → StructuralFormatError (minimum viable row is ``X|Y``)
- line[1] != "|" → StructuralFormatError
- type is not validated here; unknown codes are the assembler's concern
- Every field is stripped of leading/trailing whitespace
- Trailing empty fields are dropped: ``A|street|city|`` has no zip field,
  ``P||`` has no fields; whitespace-only trailing fields still count (as "")
- Characters outside XML 1.0 (NUL, \\x0b, ...) → StructuralFormatError
- Row.part(i) beyond the parsed fields returns None, never raises
- Stateless: the same line always yields an equal Row
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from people_converter.config import FIELD_SEPARATOR
from people_converter.core.errors import StructuralFormatError

# Anything outside the XML 1.0 Char production
_XML_INVALID_RE = re.compile(
    r"[^\t\n\r\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]"
)


@dataclass(frozen=True)
class Row:
    """One parsed input line: a record-type code plus its trimmed fields."""

    type: str
    fields: tuple[str, ...]

    def part(self, index: int) -> Optional[str]:
        """Return field ``index`` or None when the row is shorter."""
        if index >= len(self.fields):
            return None
        return self.fields[index]


def parse_row(line: str) -> Row:
    """Parse a single line (without its line terminator) into a Row.

    Args:
        line: Raw text of one input line.

    Returns:
        Row with the type character and trimmed fields.

    Raises:
        StructuralFormatError: If the line is too short, the second
            character is not the field separator, or the line holds a
            character XML cannot represent.
    """
    if len(line) <= 2:
        raise StructuralFormatError("Line must have a minimum length of 3")
    if line[1] != FIELD_SEPARATOR:
        raise StructuralFormatError(
            "The second character must be '{}'".format(FIELD_SEPARATOR)
        )

    invalid = _XML_INVALID_RE.search(line)
    if invalid:
        raise StructuralFormatError(
            "Character U+{:04X} is not allowed in XML".format(ord(invalid.group()))
        )

    pieces = line[2:].split(FIELD_SEPARATOR)
    # Trailing empty pieces are absent fields, not empty ones
    while pieces and pieces[-1] == "":
        pieces.pop()
    fields = tuple(piece.strip() for piece in pieces)
    return Row(type=line[0], fields=fields)


def iter_lines(stream: Iterable[str]) -> Iterator[str]:
    """Yield lines from an open text stream with terminators removed.

    WHY: File objects yield lines with their ``\\n`` (and, for files read
    with ``newline=""``, ``\\r\\n``) attached. The lexer expects bare lines.

    RULES:
    - Lazy and forward-only; reads one line per yielded item
    - Never closes the stream; the caller owns it
    """
    for line in stream:
        yield line.rstrip("\r\n")
