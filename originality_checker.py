#!/usr/bin/env python3
"""
Originality Checker
===================
Rejects generated titles that are too close to the training titles.

A generated title counts as "known" when any original title contains it as a
contiguous substring. Only that direction is checked: a generated title that
merely contains an original is still considered new.
"""

from typing import Iterable


def is_known(originals: Iterable[str], title: str) -> bool:
    """Check whether any original title contains ``title``."""
    for original in originals:
        if title in original:
            return True
    return False


class OriginalityChecker:
    """
    Substring-based originality filter over a fixed list of originals.

    Usage:
        checker = OriginalityChecker(["hello world foo"])
        checker.is_known("hello world")   # True
        checker.is_known("world hello")   # False
    """

    def __init__(self, originals: Iterable[str]):
        self.originals = list(originals)

    def __len__(self) -> int:
        return len(self.originals)

    def is_known(self, title: str) -> bool:
        return is_known(self.originals, title)


__all__ = [
    "is_known",
    "OriginalityChecker",
]
