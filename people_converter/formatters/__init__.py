"""Output formatters for assembled Person records.

WHY: The assembler streams each completed Person through a formatter.
Keeping formatters behind BaseStreamFormatter lets the output layout
change without touching the state machine.

RULES:
- Formatters return text; the assembler encodes it
- Every formatter listed here must be importable without side effects
"""

from people_converter.formatters.base import BaseStreamFormatter
from people_converter.formatters.people_xml import PeopleXMLFormatter

__all__ = ["BaseStreamFormatter", "PeopleXMLFormatter"]
