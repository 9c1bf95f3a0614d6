#!/usr/bin/env python3
"""
Main entry point for pyinkdec command-line interface.
"""
import sys
import argparse
import logging
from typing import List, Optional

from .ast.ast import GlobalVariableStatement, KnotStatement, TopLevelStatement
from .decoder.builder import UTF8_BOM, loads
from .decoder.tokenizer import Tokenizer
from .decompiler.story import StoryDecompiler
from .exceptions import InkDecompError
from .printer import ScriptWriter, TokenWriter

LOG = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    """Configure root logging handlers."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)

    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root.addHandler(stream)


def show_statistics(token_writer: TokenWriter, statements) -> None:
    """Display token and declaration statistics"""
    print(f"\n{'=' * 80}")
    print("STORY STATISTICS")
    print("=" * 80)
    print(f"Tokens: {token_writer.token_count}")

    if statements is not None:
        sections = [node for node in statements if isinstance(node, TopLevelStatement)]
        knots = [node for node in sections if isinstance(node, KnotStatement)]
        print(f"Globals: {sum(isinstance(node, GlobalVariableStatement) for node in statements)}")
        print(f"Knots: {len(knots)}")
        print(f"Functions: {len(sections) - len(knots)}")
        print(f"Stitches: {sum(len(knot.stitches) for knot in knots)}")

    if not token_writer.kind_counts:
        return

    print(f"\nToken kinds:")
    for kind, count in token_writer.kind_counts.most_common():
        print(f"  {kind.name:<15s}: {count:6d} occurrences")


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI function."""
    parser = argparse.ArgumentParser(
        prog='pyinkdec',
        description='pyinkdec - reconstruct ink script from compiled story JSON',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pyinkdec story.json                             # Ink script
  pyinkdec story.json --mode tokens               # Token stream
  pyinkdec story.json --mode both                 # Both outputs
  pyinkdec story.json --stats                     # Show statistics
        """
    )

    parser.add_argument('story_file', nargs='?', help='Path to compiled story JSON')
    parser.add_argument('--mode', choices=['script', 'tokens', 'both'],
                       default='script', help='Output mode (default: script)')
    parser.add_argument('--show-offsets', action='store_true',
                       help='Show token input offsets')
    parser.add_argument('--with-header', action='store_true',
                       help='Start the script with a decompiler comment')
    parser.add_argument('--stats', action='store_true',
                       help='Show token and declaration statistics')
    parser.add_argument('--verbose', action='store_true',
                       help='Enable debug logging')

    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    # Check if story_file is provided
    if not args.story_file:
        parser.print_help()
        print("\nError: story file is required", file=sys.stderr)
        return 1

    # Read story file
    try:
        with open(args.story_file, 'rb') as f:
            data = f.read()
    except FileNotFoundError:
        print(f"Error: File not found: {args.story_file}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return 1

    token_writer = TokenWriter({'showOffsets': args.show_offsets})
    statements = None

    if args.mode in ['script', 'both'] or args.stats:
        try:
            statements = StoryDecompiler().decompile(loads(data))
        except InkDecompError as e:
            print(f"Error decompiling: {e}", file=sys.stderr)
            return 1

    if args.mode in ['script', 'both']:
        if args.mode == 'both':
            print("=" * 80)
            print("INK SCRIPT")
            print("=" * 80)

        print(ScriptWriter.write(statements, {'withoutHeader': not args.with_header}), end="")

        if args.mode == 'both':
            print("\n")

    if args.mode in ['tokens', 'both'] or args.stats:
        raw = data[len(UTF8_BOM):] if data.startswith(UTF8_BOM) else data
        token_writer.write_stream(Tokenizer(raw))
        if token_writer.error is not None:
            LOG.warning("Token stream stopped at offset %d: %s",
                        token_writer.error.offset, token_writer.error.text)

    if args.mode in ['tokens', 'both']:
        if args.mode == 'both':
            print("=" * 80)
            print("TOKENS")
            print("=" * 80)
        print(token_writer.output(), end="")

    # Show statistics if requested
    if args.stats:
        show_statistics(token_writer, statements)

    return 1 if token_writer.error is not None else 0


if __name__ == '__main__':
    sys.exit(main())
