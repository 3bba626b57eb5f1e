#!/usr/bin/env python3
"""
catmd - CLI Entry Point
=======================
Concatenates a root Markdown file and every document it links to into a
single Markdown document.

Usage:
    python -m catmd.cli.main index.md
    python -m catmd.cli.main index.md --output book.md
    python -m catmd.cli.main docs/index.md --scope docs
    python -m catmd.cli.main index.md --copy
    python -m catmd.cli.main index.md --verbose --list-unreachable
"""

import argparse
import codecs
import sys
from pathlib import Path
from typing import List, Optional

import pyperclip

from catmd.config.manager import ConfigManager
from catmd.core.formatter import OutputAssembler
from catmd.core.processor import CatmdProcessor
from catmd.core.traversal import find_markdown_files
from catmd.events import Event, EventDispatcher, EventType


def decode_separator(text: str) -> str:
    """Interpret escape sequences such as ``\\n`` in a separator argument."""
    return codecs.decode(text, "unicode_escape")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catmd",
        description="Concatenates Markdown files intelligently.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s index.md
  %(prog)s index.md --output book.md
  %(prog)s docs/index.md --scope docs
  %(prog)s index.md --copy
        """
    )

    parser.add_argument(
        "root",
        type=Path,
        help="Root markdown file to start from"
    )

    parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file to write (default: stdout)"
    )

    parser.add_argument(
        "--scope",
        type=Path,
        help="Directory containing all files eligible for concatenation "
             "(default: directory of the root file)"
    )

    parser.add_argument(
        "--separator",
        type=str,
        help="Text written between documents; escapes like \\n are interpreted "
             "(default: one blank line)"
    )

    parser.add_argument(
        "--copy",
        action="store_true",
        help="Also copy the concatenated document to the clipboard"
    )

    parser.add_argument(
        "--list-unreachable",
        action="store_true",
        help="Report markdown files in scope that no link leads to"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print progress information to stderr"
    )

    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Remember --output, --scope and --separator as defaults"
    )

    return parser


def make_dispatcher(verbose: bool = False) -> EventDispatcher:
    """Create an event dispatcher that reports to stderr."""
    events = EventDispatcher()

    def print_warning(event: Event) -> None:
        print(f"Warning: {event.data}", file=sys.stderr)

    def print_error(event: Event) -> None:
        print(f"Error: {event.data}", file=sys.stderr)

    def print_status(event: Event) -> None:
        print(event.data, file=sys.stderr)

    events.add_listener(EventType.WARNING_RAISED, print_warning)
    events.add_listener(EventType.ERROR_OCCURRED, print_error)
    if verbose:
        events.add_listener(EventType.STATUS_UPDATED, print_status)
        events.add_listener(EventType.DOCUMENT_WRITTEN, lambda e: print(f"Wrote {e.data}", file=sys.stderr))
    return events


def report_unreachable(processor: CatmdProcessor) -> List[Path]:
    """Print markdown files in scope that traversal did not reach."""
    unreachable = [
        path for path in find_markdown_files(processor.scope)
        if path not in processor.context.visited
    ]
    for path in unreachable:
        print(f"Unreachable: {path}", file=sys.stderr)
    return unreachable


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)
    config = ConfigManager.load()

    separator = decode_separator(args.separator) if args.separator is not None else config["separator"]
    scope = args.scope or config["scope"] or None
    output = args.output or (Path(config["output"]) if config["output"] else None)
    events = make_dispatcher(args.verbose)

    if args.save_config:
        config_file = ConfigManager.save(
            output=str(args.output) if args.output else "",
            scope=str(args.scope.resolve()) if args.scope else "",
            separator=separator if args.separator is not None else ""
        )
        if args.verbose:
            print(f"Saved configuration to: {config_file}", file=sys.stderr)

    try:
        processor = CatmdProcessor(
            args.root,
            scope=scope,
            assembler=OutputAssembler(separator),
            events=events
        )
        processor.traverse()

        if args.list_unreachable:
            report_unreachable(processor)

        if args.copy:
            content = processor.format()
            if output:
                output.parent.mkdir(parents=True, exist_ok=True)
                output.write_text(content, encoding="utf-8")
            else:
                sys.stdout.write(content)
            pyperclip.copy(content)
        elif output:
            processor.save(output)
        else:
            processor.write(sys.stdout)

        if args.verbose and output:
            print(f"Saved to: {output}", file=sys.stderr)

    except ValueError as e:
        events.dispatch_error(str(e))
        sys.exit(1)
    except pyperclip.PyperclipException as e:
        events.dispatch_error(f"cannot copy to clipboard: {e}")
        sys.exit(1)
    except OSError as e:
        events.dispatch_error(str(e))
        sys.exit(1)
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
