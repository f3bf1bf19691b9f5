#!/usr/bin/env python3
"""
Run Statistics
==============
Timing and discard bookkeeping for a generation run, plus the report printed
to stderr after `monkeytitles gen`.

Usage:
    stats = RunStats()
    with stats.timed("build"):
        chain, originals = build_markov_chain(lines)
    stats.set_input(originals)
    with stats.timed("generation"):
        titles = generator.generate(10)
    stats.record_counts(generator.counts)
    render_report(stats)
"""

import time
from contextlib import contextmanager
from dataclasses import dataclass

from rich import box
from rich.console import Console
from rich.table import Table

from markov_generator import LOOKBACK, LOOP_SIZE, GenerationCounts


STAGES = ('build', 'generation')


def format_duration(seconds: float) -> str:
    """Human readable duration: 850us, 12.40ms, 3.215s."""
    if seconds < 1e-3:
        return f"{seconds * 1e6:.0f}us"
    if seconds < 1:
        return f"{seconds * 1e3:.2f}ms"
    return f"{seconds:.3f}s"


@dataclass
class RunStats:
    """Statistics for a single generation run."""
    input_titles: int = 0
    longest_input: int = 0
    lookback: int = LOOKBACK
    loop_size: int = LOOP_SIZE
    build_seconds: float = 0.0
    generation_seconds: float = 0.0
    attempts: int = 0
    generated: int = 0
    loops: int = 0
    original_matches: int = 0

    def set_input(self, originals: list[str]):
        self.input_titles = len(originals)
        self.longest_input = max((len(t.split()) for t in originals), default=0)

    def record_counts(self, counts: GenerationCounts):
        self.attempts = counts.attempts
        self.generated = counts.generated
        self.loops = counts.loops
        self.original_matches = counts.original_matches

    @contextmanager
    def timed(self, stage: str):
        """
        Time a stage and add the elapsed seconds to it.

        Args:
            stage: "build" or "generation"
        """
        if stage not in STAGES:
            raise ValueError(f"Unknown stage '{stage}'. Available stages: {', '.join(STAGES)}")
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            attr = f"{stage}_seconds"
            setattr(self, attr, getattr(self, attr) + elapsed)


def _section(title: str, rows: list[tuple[str, str]]) -> Table:
    table = Table(title=title, title_justify="left", box=box.SIMPLE,
                  show_header=False, pad_edge=False)
    table.add_column("metric", style="cyan")
    table.add_column("value", justify="right")
    for label, value in rows:
        table.add_row(label, value)
    return table


def render_report(stats: RunStats, console: Console = None):
    """Print the run report (to stderr unless a console is given)."""
    if console is None:
        console = Console(stderr=True)

    console.print(_section("Parameter Overview", [
        ("input titles", str(stats.input_titles)),
        ("longest input", f"{stats.longest_input} words"),
        ("lookback", f"{stats.lookback} words"),
        ("loop size", f"{stats.loop_size} words"),
    ]))
    console.print(_section("Performance", [
        ("input analyzing", format_duration(stats.build_seconds)),
        ("title generation", format_duration(stats.generation_seconds)),
    ]))
    console.print(_section("Discarded Titles", [
        ("contained loops", str(stats.loops)),
        ("matched original titles", str(stats.original_matches)),
    ]))
