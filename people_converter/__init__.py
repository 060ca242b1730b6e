"""People Record Converter — legacy pipe-delimited person rows to nested XML.

WHY: An old system exports people, their family members, addresses and
phone numbers as flat ``P|...``, ``F|...``, ``A|...``, ``T|...`` lines.
Newer systems want one nested XML document. This package performs that
conversion in a single streaming pass.

HOW: Three-stage pipeline: lex (one line → typed Row), assemble
(stateful rows → Person IR), format (Person IR → XML text, written as
soon as each person completes). Each stage is independently testable.

RULES:
- Input is read strictly forward, once
- At most one Person is held in memory at any time
- Any format error aborts the whole conversion with its line number
"""

__version__ = "0.1.0"
