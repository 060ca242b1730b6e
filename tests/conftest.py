"""Shared test fixtures for the people_converter test suite.

WHY: Most test modules need the bundled sample input and a quick way to
run a conversion into memory. Centralizing both here keeps every test on
the same authoritative data.

HOW: Fixtures expose the sample as a list of lines, and a ``convert``
helper that runs a RecordAssembler over lines and returns the bytes
written to an in-memory sink.

RULES:
- SAMPLE_LINES matches config.SAMPLE_DATA line for line
- The convert helper never swallows conversion errors
"""

import io
from typing import Callable, List

import pytest

from people_converter.core.assembler import RecordAssembler

SAMPLE_LINES: List[str] = [
    "P|Elof|Sundin",
    "T|073-101801|018-101801",
    "A|S:t Johannesgatan 16|Uppsala|75330",
    "F|Hans|1967",
    "A|Frodegatan 13B|Uppsala|75325",
    "F|Anna|1969",
    "T|073-101802|08-101802",
    "P|Boris|Johnson",
    "A|10 Downing Street|London",
]

EXPECTED_SAMPLE_XML = (
    "<people>\n"
    "  <person>\n"
    "    <firstname>Elof</firstname>\n"
    "    <lastname>Sundin</lastname>\n"
    "    <address>\n"
    "      <street>S:t Johannesgatan 16</street>\n"
    "      <city>Uppsala</city>\n"
    "      <zip>75330</zip>\n"
    "    </address>\n"
    "    <phone>\n"
    "      <mobile>073-101801</mobile>\n"
    "      <landline>018-101801</landline>\n"
    "    </phone>\n"
    "    <family>\n"
    "      <firstname>Hans</firstname>\n"
    "      <born>1967</born>\n"
    "      <address>\n"
    "        <street>Frodegatan 13B</street>\n"
    "        <city>Uppsala</city>\n"
    "        <zip>75325</zip>\n"
    "      </address>\n"
    "    </family>\n"
    "    <family>\n"
    "      <firstname>Anna</firstname>\n"
    "      <born>1969</born>\n"
    "      <phone>\n"
    "        <mobile>073-101802</mobile>\n"
    "        <landline>08-101802</landline>\n"
    "      </phone>\n"
    "    </family>\n"
    "  </person>\n"
    "  <person>\n"
    "    <firstname>Boris</firstname>\n"
    "    <lastname>Johnson</lastname>\n"
    "    <address>\n"
    "      <street>10 Downing Street</street>\n"
    "      <city>London</city>\n"
    "    </address>\n"
    "  </person>\n"
    "</people>\n"
)


def run_conversion(lines, allow_duplicate_info=False, charset="utf-8"):
    """Convert ``lines`` into memory and return the written bytes."""
    sink = io.BytesIO()
    assembler = RecordAssembler(
        sink, charset=charset, allow_duplicate_info=allow_duplicate_info
    )
    assembler.convert(lines)
    return sink.getvalue()


@pytest.fixture
def sample_lines() -> List[str]:
    """The bundled sample input, one string per line."""
    return list(SAMPLE_LINES)


@pytest.fixture
def convert() -> Callable[..., bytes]:
    """Helper running a full conversion into an in-memory sink."""
    return run_conversion


@pytest.fixture
def expected_sample_xml() -> str:
    """The exact document produced from the sample input."""
    return EXPECTED_SAMPLE_XML
