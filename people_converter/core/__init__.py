"""Core lexing, assembly and intermediate representation modules.

WHY: The core package contains the logic of the converter: row
parsing, the record state machine and the IR dataclasses it fills.
Formatters and the CLI depend on it; it depends on neither.

HOW: lexer.py turns lines into Rows, assembler.py drives the state
machine and streams output through a formatter, ir.py defines the
records, errors.py the fatal error family.

RULES:
- The core never opens or closes files; callers pass open streams
- The core never logs; it raises and lets the caller report
"""
