#!/usr/bin/env python3
"""
monkeytitles - Markov Chain Title Generator
===========================================

Builds a word-level Markov chain from a list of titles and generates new,
plausible-looking titles that do not appear inside any of the originals.

Quick Start
-----------
    import random
    from monkeytitles import build_markov_chain, generate_title, TitleGenerator

    chain, originals = build_markov_chain(open("titles.txt"))

    # One walk, with the raw status
    title, status = generate_title(chain, random.Random(1))

    # Or a batch that skips loops and known titles
    titles = TitleGenerator(chain, originals).generate(10)

Modules
-------
    markov_generator    - Chain building, sampling walk, loop detection
    originality_checker - Substring filter against the training titles
    feed_fetcher        - RSS/Atom title download
    monkeytitles.stats  - Run statistics and report
    monkeytitles.cli    - Command-line interface

CLI Usage
---------
    python -m monkeytitles fetch https://example.com/feed.xml > titles.txt
    python -m monkeytitles gen 10 < titles.txt
    python -m monkeytitles build --input titles.txt --output chain.json
"""

__version__ = "0.1.0"
__author__ = "monkeytitles"

import sys
from pathlib import Path

# Ensure parent directory is in path for imports
_parent = Path(__file__).parent.parent
if str(_parent) not in sys.path:
    sys.path.insert(0, str(_parent))

from markov_generator import (
    LOOKBACK,
    LOOP_SIZE,
    Suffix,
    MarkovChain,
    MarkovTrainer,
    GenerationStatus,
    GenerationCounts,
    TitleGenerator,
    build_markov_chain,
    generate_title,
    sample,
    has_loop,
    save_chain,
    load_chain,
)
from originality_checker import OriginalityChecker, is_known
from feed_fetcher import FeedError, FeedFetcher, fetch_feed_titles

__all__ = [
    "__version__",
    "LOOKBACK",
    "LOOP_SIZE",
    "Suffix",
    "MarkovChain",
    "MarkovTrainer",
    "GenerationStatus",
    "GenerationCounts",
    "TitleGenerator",
    "build_markov_chain",
    "generate_title",
    "sample",
    "has_loop",
    "save_chain",
    "load_chain",
    "OriginalityChecker",
    "is_known",
    "FeedError",
    "FeedFetcher",
    "fetch_feed_titles",
]
