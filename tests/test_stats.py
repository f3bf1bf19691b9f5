"""
Tests for Run Statistics
========================
Tests RunStats bookkeeping and the rich report in monkeytitles/stats.py.
"""

import io
import pytest
import sys
import time
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rich.console import Console

from markov_generator import GenerationCounts
from monkeytitles.stats import RunStats, format_duration, render_report


class TestRunStats:
    """Tests for RunStats."""

    def test_set_input(self):
        stats = RunStats()
        stats.set_input(["a b c", "", "one two three four five"])

        assert stats.input_titles == 3
        assert stats.longest_input == 5
        assert stats.lookback == 2
        assert stats.loop_size == 6

    def test_set_input_empty(self):
        stats = RunStats()
        stats.set_input([])

        assert stats.input_titles == 0
        assert stats.longest_input == 0

    def test_timed_accumulates(self):
        stats = RunStats()

        with stats.timed("build"):
            time.sleep(0.01)
        with stats.timed("build"):
            time.sleep(0.01)

        assert stats.build_seconds >= 0.02
        assert stats.generation_seconds == 0.0

    def test_timed_records_on_error(self):
        stats = RunStats()

        with pytest.raises(RuntimeError):
            with stats.timed("generation"):
                raise RuntimeError("boom")

        assert stats.generation_seconds > 0

    def test_unknown_stage(self):
        with pytest.raises(ValueError):
            with RunStats().timed("fetch"):
                pass

    def test_record_counts(self):
        stats = RunStats()
        stats.record_counts(GenerationCounts(attempts=9, generated=5, loops=1, original_matches=3))

        assert (stats.attempts, stats.generated, stats.loops, stats.original_matches) == (9, 5, 1, 3)
        assert data["discarded_original_matches"] == 7
        assert data["lookback_words"] == 2


class TestFormatDuration:
    """Tests for format_duration()."""

    def test_microseconds(self):
        assert format_duration(0.00085) == "850us"

    def test_milliseconds(self):
        assert format_duration(0.0124) == "12.40ms"

    def test_seconds(self):
        assert format_duration(3.2154) == "3.215s"


class TestRenderReport:
    """Tests for the stderr report."""

    def test_sections_and_values(self):
        buffer = io.StringIO()
        console = Console(file=buffer, width=100, force_terminal=False, color_system=None)
        stats = RunStats(input_titles=12, longest_input=9, loops=3, original_matches=4)

        render_report(stats, console)
        text = buffer.getvalue()

        for heading in ("Parameter Overview", "Performance", "Discarded Titles"):
            assert heading in text
        assert "input titles" in text
        assert "12" in text
        assert "9 words" in text
        assert "contained loops" in text
        assert "matched original titles" in text
