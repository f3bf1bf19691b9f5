#!/usr/bin/env python3
"""
Markov Chain Title Generator
============================
Generates titles using a word-level Markov chain trained on a list of
existing titles (one title per line).

Key features:
- Fixed two-word lookback as the chain key
- Probability-weighted random walk from the empty start state
- Loop detection on the trailing words of a title being generated
- Originality filtering against the training titles
- JSON persistence of trained chains

Theory:
-------
The chain models P(next_word | previous_words). Every title contributes one
transition per word: the key is the canonical join of up to LOOKBACK words
before it, so the first word of each title hangs off the empty prefix "".
Generation starts at "" and keeps sampling until the current key has no
entry in the chain.

No end-of-title transition is ever recorded. A walk ends when it reaches a
word pair that never appeared as a key, which usually means the pair closed a
training title. A word pair that closes one title but sits in the middle of
another keeps the walk going.
"""

import json
import logging
import random
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from originality_checker import OriginalityChecker
from settings import require_setting


logger = logging.getLogger(__name__)

# How many preceding words form a prefix.
LOOKBACK = 2

# Length of the trailing word window checked for repetition.
LOOP_SIZE = 6

START_STATE = ""
TERMINAL = ""


def join(words: list[str]) -> str:
    """Canonical form of a word sequence."""
    return " ".join(words)


# =============================================================================
# MARKOV CHAIN MODEL
# =============================================================================

@dataclass
class Suffix:
    """A word following some prefix, with its observed frequency."""
    word: str
    occurrences: int = 1
    probability: float = 0.0

    @property
    def is_terminal(self) -> bool:
        return self.word == TERMINAL


class GenerationStatus(Enum):
    """Outcome of a single generation walk."""
    OK = "ok"
    LOOP_DETECTED = "loop_detected"


@dataclass
class MarkovChain:
    """Word-level Markov chain: prefix -> ordered list of suffixes"""
    transitions: dict = field(default_factory=dict)

    def __contains__(self, prefix: str) -> bool:
        return prefix in self.transitions

    def __len__(self) -> int:
        return len(self.transitions)

    def get(self, prefix: str) -> Optional[list[Suffix]]:
        return self.transitions.get(prefix)

    @property
    def has_start_state(self) -> bool:
        return bool(self.transitions.get(START_STATE))

    def add_transition(self, prefix: str, word: str):
        """Count one occurrence of ``word`` after ``prefix``."""
        suffixes = self.transitions.setdefault(prefix, [])
        for suffix in suffixes:
            if suffix.word == word:
                suffix.occurrences += 1
                return
        suffixes.append(Suffix(word=word))

    def calculate_probabilities(self):
        """Set every suffix probability to its share of its prefix's occurrences."""
        for suffixes in self.transitions.values():
            total = sum(s.occurrences for s in suffixes)
            for suffix in suffixes:
                suffix.probability = suffix.occurrences / total

    def to_dict(self) -> dict:
        """Serialize chain to dictionary"""
        return {
            prefix: [[s.word, s.occurrences, s.probability] for s in suffixes]
            for prefix, suffixes in self.transitions.items()
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'MarkovChain':
        """Deserialize chain from dictionary"""
        chain = cls()
        for prefix, suffixes in data.items():
            chain.transitions[prefix] = [
                Suffix(word=word, occurrences=int(occurrences), probability=float(probability))
                for word, occurrences, probability in suffixes
            ]
        return chain


# =============================================================================
# TRAINING
# =============================================================================

class MarkovTrainer:
    """Builds a MarkovChain from titles, one title per line"""

    def __init__(self, lookback: int = LOOKBACK):
        self.lookback = lookback

    def add_title(self, chain: MarkovChain, title: str) -> str:
        """
        Record the transitions of a single title.

        Titles with ``lookback`` words or fewer are too short to contribute
        and are left out of the chain.

        Returns:
            The normalized title
        """
        words = title.split()
        if len(words) <= self.lookback:
            return join(words)

        for i, word in enumerate(words):
            prefix = join(words[max(0, i - self.lookback):i])
            chain.add_transition(prefix, word)

        return join(words)

    def train(self, lines: Iterable[str]) -> tuple[MarkovChain, list[str]]:
        """
        Train a chain on a sequence of titles.

        Args:
            lines: Titles, e.g. an open text file or a list of strings

        Returns:
            Tuple of (chain, normalized original titles)
        """
        chain = MarkovChain()
        originals = []
        for line in lines:
            originals.append(self.add_title(chain, line))
        chain.calculate_probabilities()
        return chain, originals


def build_markov_chain(lines: Iterable[str]) -> tuple[MarkovChain, list[str]]:
    """Build a chain and the list of normalized original titles."""
    return MarkovTrainer().train(lines)


# =============================================================================
# GENERATION
# =============================================================================

def sample(suffixes: list[Suffix], rng: random.Random) -> Suffix:
    """
    Pick a suffix with probability proportional to its stored probability.

    Rejection sampling: a uniformly chosen suffix is accepted when a uniform
    draw falls below its probability. A list whose probabilities are all zero
    never returns.
    """
    if not suffixes:
        raise ValueError("cannot sample from an empty suffix list")
    while True:
        candidate = suffixes[rng.randrange(len(suffixes))]
        if rng.random() < candidate.probability:
            return candidate


def has_loop(words: list[str], loop_size: int = LOOP_SIZE) -> bool:
    """Check whether the last ``loop_size`` words already occur earlier in the title."""
    if len(words) <= loop_size:
        return False
    window = join(words[-loop_size:])
    return window in join(words[:-loop_size])


def generate_title(chain: MarkovChain, rng: random.Random) -> tuple[str, GenerationStatus]:
    """
    Generate one title by walking the chain from the start state.

    Args:
        chain: Trained chain, read only
        rng: Random source; each concurrent caller needs its own

    Returns:
        Tuple of (title, status). On LOOP_DETECTED the title is the partial
        walk up to the point the repetition was found.

    Raises:
        ValueError: If the chain has no start state (nothing was trained)
    """
    start = chain.get(START_STATE)
    if not start:
        raise ValueError("chain has no start state; train it on titles longer than "
                         f"{LOOKBACK} words first")

    title = []
    current = sample(start, rng)
    while not current.is_terminal:
        title.append(current.word)
        candidates = chain.get(join(title[-LOOKBACK:]))
        if candidates is None:
            break
        if has_loop(title):
            return join(title), GenerationStatus.LOOP_DETECTED
        current = sample(candidates, rng)

    return join(title), GenerationStatus.OK


# =============================================================================
# BATCH GENERATION
# =============================================================================

@dataclass
class GenerationCounts:
    """Bookkeeping of a batch run."""
    attempts: int = 0
    generated: int = 0
    loops: int = 0
    original_matches: int = 0


class TitleGenerator:
    """
    Generates titles that survive loop detection and the originality filter.

    Usage:
        chain, originals = build_markov_chain(lines)
        generator = TitleGenerator(chain, originals, rng=random.Random(42))
        for title in generator.generate(10):
            print(title)
    """

    def __init__(self,
                 chain: MarkovChain,
                 originals: Iterable[str],
                 rng: random.Random = None,
                 max_attempts_per_title: Optional[int] = None):
        """
        Initialize the generator.

        Args:
            chain: Trained chain
            originals: Normalized training titles
            rng: Random source (default: unseeded random.Random)
            max_attempts_per_title: Attempt budget per requested title
                (default: generation.max_attempts_per_title from app.yaml)
        """
        if not chain.has_start_state:
            raise ValueError("chain has no start state; no input title is long enough")

        if max_attempts_per_title is None:
            max_attempts_per_title = require_setting("generation.max_attempts_per_title")
        if max_attempts_per_title < 1:
            raise ValueError("max_attempts_per_title must be positive")

        self.chain = chain
        self.checker = OriginalityChecker(originals)
        self.rng = rng or random.Random()
        self.max_attempts_per_title = max_attempts_per_title
        self.counts = GenerationCounts()

    def iter_titles(self, count: int) -> Iterator[str]:
        """Yield up to ``count`` accepted titles as they are found."""
        max_attempts = count * self.max_attempts_per_title
        accepted = 0
        attempts = 0

        while accepted < count and attempts < max_attempts:
            attempts += 1
            self.counts.attempts += 1

            title, status = generate_title(self.chain, self.rng)
            if status is GenerationStatus.LOOP_DETECTED:
                self.counts.loops += 1
                logger.debug(f"Loop detected: {title!r}")
                continue
            if self.checker.is_known(title):
                self.counts.original_matches += 1
                logger.debug(f"Matches an original: {title!r}")
                continue

            accepted += 1
            self.counts.generated += 1
            yield title

        if accepted < count:
            logger.warning(
                f"Gave up after {attempts} attempts: {accepted}/{count} titles generated"
            )

    def generate(self, count: int) -> list[str]:
        """Generate up to ``count`` titles (duplicates allowed)."""
        return list(self.iter_titles(count))


# =============================================================================
# PERSISTENCE
# =============================================================================

def save_chain(chain: MarkovChain, filepath, originals: list[str] = None):
    """Save a trained chain (and optionally its originals) to a JSON file"""
    data = {
        'lookback': LOOKBACK,
        'loop_size': LOOP_SIZE,
        'transitions': chain.to_dict(),
        'originals': list(originals or []),
    }
    Path(filepath).write_text(json.dumps(data, indent=2, ensure_ascii=False))


def load_chain(filepath) -> tuple[MarkovChain, list[str]]:
    """Load a chain and its originals from a JSON file"""
    data = json.loads(Path(filepath).read_text())
    if data.get('lookback') != LOOKBACK:
        raise ValueError(
            f"{filepath}: chain was built with lookback {data.get('lookback')}, expected {LOOKBACK}"
        )
    return MarkovChain.from_dict(data['transitions']), list(data.get('originals', []))
