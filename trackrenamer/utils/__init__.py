"""Utility modules for filename normalization and similarity scoring."""

from .similarity import sorensen_dice
from .text import has_token_overlap, normalize_for_match

__all__ = [
    "has_token_overlap",
    "normalize_for_match",
    "sorensen_dice",
]
