"""Fatal conversion errors raised by the lexer and the record assembler.

WHY: A malformed line anywhere in the input makes the whole conversion
untrustworthy. Callers need one exception family they can catch to
report a clean, line-localized message, while I/O failures from the
underlying streams keep propagating untouched.

HOW: BadFormatError is a ValueError subclass carrying an optional
line number. The assembler catches it around each line and re-raises a
copy of the same class with the "Bad format on line N: " prefix,
chaining the original.

RULES:
- StructuralFormatError: malformed row, unknown type code, T/A/F before P
- DuplicateAssociationError: second Address or Phone for one individual
- OSError / UnicodeDecodeError are never wrapped
- Messages never include the raw line content
"""

from __future__ import annotations

from typing import Optional


class BadFormatError(ValueError):
    """Base class for every fatal input-format error."""

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.line_number = line_number

    def with_line(self, line_number: int) -> "BadFormatError":
        """Return a copy of this error localized to ``line_number``.

        The copy has the same class so callers can still distinguish
        structural errors from duplicate errors after localization.
        """
        return type(self)(
            "Bad format on line {}: {}".format(line_number, self.message),
            line_number=line_number,
        )


class StructuralFormatError(BadFormatError):
    """Malformed row or a row appearing out of its required order."""


class DuplicateAssociationError(BadFormatError):
    """A second Address or Phone row for the same individual."""
