"""Command-line interface for the People Record Converter.

WHY: Operators convert legacy exports from the terminal, often piping
the XML on to another tool. The CLI owns everything the core does not:
argument parsing, opening and closing files, choosing stdout or a file,
falling back to bundled sample data, and turning errors into messages
and exit codes.

HOW: Uses argparse for ``[input] [output] [allow_duplicate]`` positionals
plus flags, builds validated ConversionOptions, opens the streams in an
ExitStack and hands them to the RecordAssembler. Status messages go to
stderr; the document goes to the output file or stdout.

RULES:
- No input argument → convert SAMPLE_DATA and echo it to stderr first
- No output argument, or "-" → write the document to stdout
- Third positional (legacy form): "1"/"true"/... enables duplicate tolerance
- --allow-duplicate-info / --no-allow-duplicate-info override the positional
- Format errors print their line-localized message and exit 1
- Missing input file → "Error: Input file not found: <path>", exit 1
- Files are always closed, even when the conversion fails
"""

from __future__ import annotations

import argparse
import io
import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import BinaryIO, Iterable, List, Optional

from pydantic import ValidationError

from people_converter import __version__
from people_converter.config import SAMPLE_DATA, ConversionOptions, parse_bool
from people_converter.core.assembler import ConversionStats, RecordAssembler
from people_converter.core.errors import BadFormatError
from people_converter.core.lexer import iter_lines

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the XML can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _resolve_options(args: argparse.Namespace) -> ConversionOptions:
    """Merge environment defaults with command-line overrides.

    RULES:
    - Explicit --allow-duplicate-info/--no-... wins over the positional
    - The positional wins over PEOPLE_CONVERTER_ALLOW_DUPLICATE_INFO
    - --encoding and --root-element override their environment defaults

    Raises:
        ValidationError: If the charset or root element name is invalid.
    """
    defaults = ConversionOptions.from_env()

    if args.allow_duplicate_info is not None:
        allow = args.allow_duplicate_info
    elif args.allow_duplicate is not None:
        allow = parse_bool(args.allow_duplicate)
    else:
        allow = defaults.allow_duplicate_info

    return ConversionOptions(
        charset=args.encoding or defaults.charset,
        allow_duplicate_info=allow,
        root_element=args.root_element or defaults.root_element,
    )


def _open_input(
    stack: ExitStack,
    input_file: Optional[str],
    charset: str,
) -> Iterable[str]:
    """Return the input line source, registering any opened file on ``stack``."""
    if input_file is None:
        _status("Using test data as input:")
        _status(SAMPLE_DATA)
        _status("")
        return iter_lines(io.StringIO(SAMPLE_DATA, newline=None))

    stream = stack.enter_context(open(input_file, "r", encoding=charset))
    logger.debug("Reading %s as %s", input_file, charset)
    return iter_lines(stream)


def _open_output(stack: ExitStack, output_file: Optional[str]) -> BinaryIO:
    """Return the binary sink: stdout's buffer or a newly opened file."""
    if output_file is None or output_file == "-":
        return sys.stdout.buffer
    logger.debug("Writing %s", output_file)
    return stack.enter_context(open(output_file, "wb"))


def _run_conversion(args: argparse.Namespace) -> ConversionStats:
    """Execute one conversion, exiting with a message on any failure.

    RULES:
    - Options are validated before any file is opened
    - Input must exist before the output file is created
    - BadFormatError → its message on stderr, exit 1
    - Decoding and other I/O errors → "Error: ..." on stderr, exit 1
    """
    try:
        options = _resolve_options(args)
    except ValidationError as e:
        for err in e.errors():
            print("Error: {}".format(err["msg"]), file=sys.stderr)
        sys.exit(1)

    if args.input_file is not None and not Path(args.input_file).is_file():
        print("Error: Input file not found: {}".format(args.input_file), file=sys.stderr)
        sys.exit(1)

    try:
        with ExitStack() as stack:
            lines = _open_input(stack, args.input_file, options.charset)
            sink = _open_output(stack, args.output_file)
            assembler = RecordAssembler.from_options(sink, options)
            stats = assembler.convert(lines)
    except BadFormatError as e:
        logger.debug("Conversion aborted", exc_info=True)
        print(str(e), file=sys.stderr)
        sys.exit(1)
    except UnicodeDecodeError as e:
        print(
            "Error: Input is not valid {}: {}".format(options.charset, e.reason),
            file=sys.stderr,
        )
        sys.exit(1)
    except OSError as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    logger.info(
        "Converted %d line(s): %d person(s), %d family member(s)",
        stats.lines, stats.persons, stats.family_members,
    )
    if args.output_file not in (None, "-"):
        _status("Wrote {} person(s) to {}".format(stats.persons, args.output_file))
    return stats


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without running a conversion.
    """
    parser = argparse.ArgumentParser(
        prog="people_converter",
        description="Convert pipe-delimited person records (P/T/A/F rows) "
                    "into a nested XML document.",
    )

    parser.add_argument(
        "input_file",
        nargs="?",
        default=None,
        help="Input file with one record per line. Default: bundled sample data.",
    )

    parser.add_argument(
        "output_file",
        nargs="?",
        default=None,
        help="Output XML file, or '-' for stdout (default: stdout).",
    )

    parser.add_argument(
        "allow_duplicate",
        nargs="?",
        default=None,
        help="Legacy form of --allow-duplicate-info: '1' or 'true' to enable.",
    )

    parser.add_argument(
        "--allow-duplicate-info",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Let a later Address/Phone row replace an earlier one for the "
             "same individual instead of failing.",
    )

    parser.add_argument(
        "--encoding",
        default=None,
        help="Charset of the input file and the XML output (default: utf-8).",
    )

    parser.add_argument(
        "--root-element",
        default=None,
        help="Name of the document's root element (default: people).",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug information to stderr.",
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s {}".format(__version__),
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        _run_conversion(args)
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)


if __name__ == "__main__":
    main()
