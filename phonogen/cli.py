#!/usr/bin/env python3
"""
phonogen CLI
============
Command-line interface for word generation.

Usage:
    phonogen generate 20 3 -l fr
    phonogen generate 5 2 --seed 42 -v
    phonogen varieties
    phonogen bench -l en -n 20000
    phonogen bench -l fr --report --output bench.json
"""

import argparse
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from phonogen import __version__
from phonogen.phonology.engine import Engine, GenerationPolicy
from phonogen.phonology.entropy import time_seed
from phonogen.phonology.varieties import list_varieties, load_variety
from phonogen.profiler import run_benchmark
from phonogen.settings import get_setting

logger = logging.getLogger("phonogen")

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']


# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self.console = Console(highlight=False)

    def print(self, *args, **kwargs):
        if not self.quiet:
            print(*args, **kwargs)

    def result(self, line: str):
        """Primary output; printed even in quiet mode."""
        print(line)

    def error(self, msg: str):
        print(f"Error: {msg}", file=sys.stderr)

    def table(self, title: str, headers: list, rows: list):
        """Print a rich table."""
        if self.quiet:
            return
        table = Table(title=title)
        for h in headers:
            table.add_column(str(h))
        for row in rows:
            table.add_row(*(str(c) for c in row))
        self.console.print(table)


def setup_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


# =============================================================================
# Commands
# =============================================================================

def cmd_generate(args, out: Output):
    """Generate words, one per line."""
    variety = args.variety or get_setting('generation.default_variety', 'american_english')
    count = args.count if args.count is not None else get_setting('generation.count', 100)
    max_syllables = (args.max_syllables if args.max_syllables is not None
                     else get_setting('generation.max_syllables', 3))
    seed = args.seed if args.seed is not None else time_seed()
    logger.info(f"Generating {count} word(s) of up to {max_syllables} syllable(s), seed {seed}")

    engine = Engine(variety, seed=seed, policy=GenerationPolicy.from_settings())

    if args.verbose:
        if count < 0:
            raise ValueError(f"count must not be negative, got {count}")
        words = [engine.generate(max_syllables) for _ in range(count)]
        out.table(
            f"{engine.definition.display_name} (seed {seed})",
            ['Word', 'IPA', 'Syllables', 'Shape'],
            [(w.text, f"/{w.transcription}/", w.nuclei,
              '.'.join(s.pattern for s in w.syllables)) for w in words],
        )
        if out.quiet:
            for w in words:
                out.result(w.text)
        return 0

    for word in engine.generate_words(count, max_syllables):
        out.result(word)
    return 0


def cmd_varieties(args, out: Output):
    """List the bundled varieties."""
    rows = []
    for name in list_varieties():
        d = load_variety(name)
        rows.append((d.name, d.display_name, ', '.join(d.aliases), len(d.phonemes)))

    if out.quiet:
        for row in rows:
            out.result(row[0])
        return 0
    out.table("Varieties", ['Name', 'Display name', 'Aliases', 'Phonemes'], rows)
    return 0


def cmd_bench(args, out: Output):
    """Measure generation throughput."""
    variety = args.variety or get_setting('generation.default_variety', 'american_english')
    iterations = args.iterations if args.iterations is not None else get_setting('bench.iterations', 10000)
    max_syllables = (args.max_syllables if args.max_syllables is not None
                     else get_setting('bench.max_syllables', 1))

    profiler = run_benchmark(variety, iterations, max_syllables, seed=args.seed)

    rows = []
    for name, stats in profiler.stages.items():
        rows.append((name, stats.count, stats.items, f"{stats.total:.3f}s",
                     f"{stats.per_item * 1e6:.1f}us", f"{stats.throughput:,.0f}"))
    out.table(f"Benchmark: {variety}, {iterations} words, up to {max_syllables} syllable(s)",
              ['Stage', 'Calls', 'Items', 'Total', 'Per item', 'Items/s'], rows)
    if out.quiet:
        out.result(f"{profiler.stages['generate'].throughput:.0f}")

    if args.report:
        report = profiler.report()
        if report:
            out.print(report)
    if args.output:
        profiler.save_json(args.output)
        out.print(f"\nProfiling data saved to: {args.output}")
    return 0


# =============================================================================
# Main
# =============================================================================

def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='phonogen',
        description='phonogen - pronounceable invented words',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate 20 3
  %(prog)s generate 10 2 -l fr --seed 7 -v
  %(prog)s varieties
  %(prog)s bench -l metropolitan_french -n 50000
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')
    parser.add_argument('--log-level', choices=LOG_LEVELS, type=str.upper,
                        help='Logging level (default: logging.level in app.yaml)')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- generate ---
    p = subparsers.add_parser('generate', aliases=['gen', 'g'], help='Generate words')
    p.add_argument('count', type=int, nargs='?', help='Number of words (default: generation.count)')
    p.add_argument('max_syllables', type=int, nargs='?',
                   help='Maximum syllables per word (default: generation.max_syllables)')
    p.add_argument('--variety', '-l', help='Variety name or alias (en, fr, ...)')
    p.add_argument('--seed', type=int, help='Seed for a reproducible run (default: from the clock)')
    p.add_argument('--verbose', '-v', action='store_true', help='Show transcriptions')

    # --- varieties ---
    subparsers.add_parser('varieties', help='List available varieties')

    # --- bench ---
    p = subparsers.add_parser('bench', help='Measure generation throughput')
    p.add_argument('--variety', '-l', help='Variety name or alias')
    p.add_argument('--iterations', '-n', type=int, help='Words to generate (default: bench.iterations)')
    p.add_argument('--max-syllables', '-s', type=int,
                   help='Maximum syllables per word (default: bench.max_syllables)')
    p.add_argument('--seed', type=int, help='Seed (default: hardware entropy)')
    p.add_argument('--report', action='store_true', help='Print the per-stage profiling report')
    p.add_argument('--output', '-o', help='Save profiling data to JSON file')

    args = parser.parse_args(argv)

    out = Output(quiet=args.quiet)
    try:
        setup_logging(args.log_level or get_setting('logging.level', 'WARNING'))
    except FileNotFoundError as e:
        out.error(str(e))
        return 1

    if not args.command:
        parser.print_help()
        return 0

    cmd_map = {'gen': 'generate', 'g': 'generate'}
    command = cmd_map.get(args.command, args.command)

    commands = {
        'generate': cmd_generate,
        'varieties': cmd_varieties,
        'bench': cmd_bench,
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
            if getattr(args, 'verbose', False):
                import traceback
                traceback.print_exc()
            return 1

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())
