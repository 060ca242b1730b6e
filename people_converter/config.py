"""Configuration constants, bundled sample data, and .env loading.

WHY: Centralizes every configurable value (charset, duplicate policy,
root element name) so the CLI, tests and library callers all share the
same defaults, and deployments can change them without touching code.

HOW: python-dotenv loads the .env file on import. Defaults are plain
module-level constants overridable through environment variables.
ConversionOptions is a pydantic model that validates one conversion's
settings (charset must be a known codec, root element must be a valid
XML name) before any input is read.

RULES:
- FIELD_SEPARATOR is fixed; it is part of the input grammar, not a setting
- parse_bool accepts "1", "true", "yes", "on" (any case) as True
- Unknown charsets are rejected at option construction time
- SAMPLE_DATA is the input used when the CLI is run without arguments
"""

from __future__ import annotations

import codecs
import os
import re

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load .env from the project root (where the script is run from)
load_dotenv()

FIELD_SEPARATOR = "|"
"""Separator between the type code and fields, and between fields."""

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


def parse_bool(value: str | None) -> bool:
    """Interpret a command-line or environment string as a boolean.

    RULES:
    - "1", "true", "yes", "on" (case-insensitive, surrounding space ignored) → True
    - Anything else, including None and "" → False
    """
    if value is None:
        return False
    return value.strip().lower() in _TRUE_VALUES


# ---------------------------------------------------------------------------
# Defaults (overridable via environment)
# ---------------------------------------------------------------------------

DEFAULT_CHARSET = os.getenv("PEOPLE_CONVERTER_CHARSET", "utf-8")
DEFAULT_ALLOW_DUPLICATE_INFO = parse_bool(
    os.getenv("PEOPLE_CONVERTER_ALLOW_DUPLICATE_INFO", "false")
)
DEFAULT_ROOT_ELEMENT = os.getenv("PEOPLE_CONVERTER_ROOT_ELEMENT", "people")

# ---------------------------------------------------------------------------
# Bundled sample input
# ---------------------------------------------------------------------------

SAMPLE_DATA = (
    "P|Elof|Sundin\r\n"
    "T|073-101801|018-101801\r\n"
    "A|S:t Johannesgatan 16|Uppsala|75330\r\n"
    "F|Hans|1967\r\n"
    "A|Frodegatan 13B|Uppsala|75325\r\n"
    "F|Anna|1969\r\n"
    "T|073-101802|08-101802\r\n"
    "P|Boris|Johnson\r\n"
    "A|10 Downing Street|London"
)
"""Input converted when the CLI is started without an input file."""

# Element names: letter or underscore first, no colon (no namespaces here)
_XML_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.\-]*$")


class ConversionOptions(BaseModel):
    """Settings for one conversion run.

    WHY: The CLI, environment and library callers can all supply these
    values. Validating them up front means a bad charset fails before the
    root tag is written, not halfway through the output.

    RULES:
    - charset must resolve through codecs.lookup; stored as given
    - allow_duplicate_info: False → second A/T row is fatal, True → overwrite
    - root_element must be a plain XML element name
    """

    charset: str = Field(
        default=DEFAULT_CHARSET,
        description="Charset used to decode input and encode the XML output.",
    )
    allow_duplicate_info: bool = Field(
        default=DEFAULT_ALLOW_DUPLICATE_INFO,
        description="Let a later Address/Phone row replace an earlier one.",
    )
    root_element: str = Field(
        default=DEFAULT_ROOT_ELEMENT,
        description="Name of the document's root element.",
    )

    @field_validator("charset")
    @classmethod
    def _known_charset(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError:
            raise ValueError("Unknown charset: {}".format(value))
        return value

    @field_validator("root_element")
    @classmethod
    def _valid_element_name(cls, value: str) -> str:
        if not _XML_NAME_RE.match(value) or value.lower().startswith("xml"):
            raise ValueError("Invalid root element name: {}".format(value))
        return value

    @classmethod
    def from_env(cls) -> ConversionOptions:
        """Build options from the current environment.

        Re-reads the environment on every call, so changes made after
        import (e.g. by tests) are honoured.
        """
        return cls(
            charset=os.getenv("PEOPLE_CONVERTER_CHARSET", "utf-8"),
            allow_duplicate_info=parse_bool(
                os.getenv("PEOPLE_CONVERTER_ALLOW_DUPLICATE_INFO", "false")
            ),
            root_element=os.getenv("PEOPLE_CONVERTER_ROOT_ELEMENT", "people"),
        )
