#!/usr/bin/env python3
"""
monkeytitles CLI
================
Command-line interface for fetching titles and generating new ones.

Usage:
    monkeytitles fetch https://example.com/feed.xml > titles.txt
    monkeytitles gen 10 < titles.txt
    monkeytitles gen 10 --input titles.txt --seed 42
    monkeytitles build --input titles.txt --output chain.json
    monkeytitles gen 10 --chain chain.json
"""

import argparse
import io
import logging
import random
import sys
from pathlib import Path

# Add parent to path
_parent = Path(__file__).parent.parent
if str(_parent) not in sys.path:
    sys.path.insert(0, str(_parent))

from monkeytitles import __version__
from monkeytitles.settings import get_setting, resolve_path


logger = logging.getLogger(__name__)


# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support.

    Results go to stdout so they can be piped; everything else goes to stderr.
    """

    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def result(self, line: str):
        print(line, flush=True)

    def print(self, *args, **kwargs):
        if not self.quiet:
            print(*args, file=sys.stderr, **kwargs)

    def error(self, msg: str):
        print(f"Error: {msg}", file=sys.stderr)

    def success(self, msg: str):
        if not self.quiet:
            print(f"OK: {msg}", file=sys.stderr)


def positive_int(value: str) -> int:
    """argparse type for a count greater than zero."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: '{value}'")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive number: '{value}'")
    return number


def configure_logging(args):
    """Set the root log level from app.yaml, overridden by --verbose/--quiet."""
    if getattr(args, 'verbose', False):
        level = logging.DEBUG
    elif getattr(args, 'quiet', False):
        level = logging.WARNING
    else:
        level_name = str(get_setting("cli.log_level", "WARNING")).upper()
        level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def read_titles(input_path) -> list[str]:
    """
    Read titles from a file, or from stdin when no path is given.

    Lines break at '\\n' only; other Unicode line separators stay inside the
    title as whitespace. Invalid UTF-8 bytes are replaced, not fatal.
    """
    if input_path is None:
        data = sys.stdin.buffer.read()
    else:
        data = resolve_path(input_path).read_bytes()
    text = data.decode('utf-8', errors='replace')
    return list(io.StringIO(text, newline='\n'))


# =============================================================================
# Commands
# =============================================================================

def cmd_fetch(args, out: Output):
    """Fetch titles from a feed and print them."""
    from feed_fetcher import FeedFetcher

    fetcher = FeedFetcher(timeout=args.timeout)
    titles = fetcher.fetch(args.url)
    for title in titles:
        out.result(title)
    return 0


def cmd_gen(args, out: Output):
    """Generate titles from stdin, an input file or a saved chain."""
    from markov_generator import TitleGenerator, build_markov_chain, load_chain
    from monkeytitles.stats import RunStats, render_report

    stats = RunStats()
    with stats.timed("build"):
        if args.chain:
            chain, originals = load_chain(resolve_path(args.chain))
        else:
            chain, originals = build_markov_chain(read_titles(args.input))
    stats.set_input(originals)
    logger.debug(f"Chain has {len(chain)} prefixes from {len(originals)} titles")

    if not chain.has_start_state:
        out.error("no input title is long enough to build a chain "
                  "(titles need more than 2 words)")
        return 1

    rng = random.Random(args.seed)
    generator = TitleGenerator(chain, originals, rng=rng,
                               max_attempts_per_title=args.max_attempts)

    with stats.timed("generation"):
        for title in generator.iter_titles(args.num):
            out.result(title)
    stats.record_counts(generator.counts)

    show_stats = get_setting("cli.show_stats", True)
    if show_stats and not args.no_stats and not out.quiet:
        render_report(stats)

    if generator.counts.generated < args.num:
        out.error(f"only {generator.counts.generated} of {args.num} titles could be generated")
        return 1
    return 0


def cmd_build(args, out: Output):
    """Build a chain and save it as JSON."""
    from markov_generator import build_markov_chain, save_chain

    chain, originals = build_markov_chain(read_titles(args.input))
    if not chain.has_start_state:
        out.error("no input title is long enough to build a chain "
                  "(titles need more than 2 words)")
        return 1

    output = resolve_path(args.output)
    save_chain(chain, output, originals)
    out.success(f"Saved chain with {len(chain)} prefixes from {len(originals)} titles to {output}")
    return 0


# =============================================================================
# Main
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='monkeytitles',
        description='monkeytitles - Markov Chain Title Generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s fetch https://example.com/feed.xml > titles.txt
  %(prog)s gen 10 < titles.txt
  %(prog)s gen 10 --input titles.txt --seed 42 --no-stats
  %(prog)s build --input titles.txt --output chain.json
  %(prog)s gen 10 --chain chain.json
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- fetch ---
    p = subparsers.add_parser('fetch', help='Fetch titles from an RSS/Atom feed and print them')
    p.add_argument('url', help='Feed URL')
    p.add_argument('--timeout', type=float, help='Request timeout in seconds')

    # --- gen ---
    p = subparsers.add_parser('gen', aliases=['g'], help='Generate titles from stdin')
    p.add_argument('num', type=positive_int, help='Number of titles to generate')
    source = p.add_mutually_exclusive_group()
    source.add_argument('--input', '-i', help='Read titles from file instead of stdin')
    source.add_argument('--chain', '-c', help='Use a chain saved by the build command')
    p.add_argument('--seed', '-s', type=int, help='Random seed for reproducible output')
    p.add_argument('--max-attempts', type=positive_int,
                   help='Attempts allowed per title (default: from app.yaml)')
    p.add_argument('--no-stats', action='store_true', help='Do not print the statistics report')

    # --- build ---
    p = subparsers.add_parser('build', help='Build a chain and save it as JSON')
    p.add_argument('--input', '-i', help='Read titles from file instead of stdin')
    p.add_argument('--output', '-o', required=True, help='Output file path')

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args)

    # Handle aliases
    cmd_map = {
        'g': 'gen',
    }
    command = cmd_map.get(args.command, args.command)

    out = Output(quiet=args.quiet)

    commands = {
        'fetch': cmd_fetch,
        'gen': cmd_gen,
        'build': cmd_build,
    }

    handler = commands.get(command)
    if handler:
        try:
            return handler(args, out)
        except KeyboardInterrupt:
            out.print("\nCancelled.")
            return 130
        except Exception as e:
            out.error(str(e))
            if args.verbose:
                import traceback
                traceback.print_exc()
            return 1

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())
