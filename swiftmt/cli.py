import argparse
import json
import logging
import sys

from swiftmt.exceptions import SwiftError
from swiftmt.integrations.pydantic import from_dataclass
from swiftmt.streaming import StreamingParser
from swiftmt.validator import Validator


def _read_file(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def handle_parse(args):
    """Handles the 'parse' subcommand: Outputs a JSON array with one object per page."""
    try:
        pages = list(StreamingParser(_read_file(args.file), lenient=args.lenient).iter_pages())
        print(json.dumps([from_dataclass(page).model_dump() for page in pages], indent=2))
    except (OSError, SwiftError) as e:
        print(f"Error parsing file: {e}", file=sys.stderr)
        sys.exit(1)


def handle_validate(args):
    """Handles the 'validate' subcommand: Structural and round-trip checks."""
    try:
        raw_data = _read_file(args.file)
    except OSError as e:
        print(f"Error validating file: {e}", file=sys.stderr)
        sys.exit(1)

    report = Validator.validate_text(raw_data, lenient=args.lenient)
    if not report.is_valid:
        print("Validation Failed:")
        for err in report.errors:
            print(f"  - {err}")
        sys.exit(1)

    for page in StreamingParser(raw_data, lenient=args.lenient).iter_pages():
        round_trip = Validator.validate(page)
        if not round_trip.is_valid:
            print(f"Structure OK, but page '{page.senders_reference.reference}' does not round-trip:")
            for err in round_trip.errors:
                print(f"  - {err}")
            sys.exit(1)

    print("Validation Successful: Message is structurally valid.")


def handle_render(args):
    """Handles the 'render' subcommand: Re-renders every page in canonical form."""
    try:
        for page in StreamingParser(_read_file(args.file), lenient=args.lenient).iter_pages():
            print(page.get_content())
    except (OSError, SwiftError) as e:
        print(f"Error rendering file: {e}", file=sys.stderr)
        sys.exit(1)


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="swiftmt",
        description="swiftmt CLI - Parse, validate and re-render SWIFT MT101 messages.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Accept pages that start with :21: instead of :20:.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Subcommand: parse
    parse_parser = subparsers.add_parser("parse", help="Parse a file and output JSON.")
    parse_parser.add_argument("file", help="Path to the MT101 message file.")
    parse_parser.set_defaults(func=handle_parse)

    # Subcommand: validate
    validate_parser = subparsers.add_parser("validate", help="Check field order, formats and round-trip.")
    validate_parser.add_argument("file", help="Path to the file to validate.")
    validate_parser.set_defaults(func=handle_validate)

    # Subcommand: render
    render_parser = subparsers.add_parser("render", help="Parse and re-render a file.")
    render_parser.add_argument("file", help="Path to the file to render.")
    render_parser.set_defaults(func=handle_render)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    args.func(args)


if __name__ == "__main__":
    main()
