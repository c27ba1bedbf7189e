"""
Lexical Normalization Layer

RESPONSIBILITY: Turn raw fragment or corpus text into a filtered token sequence
ALLOWED INPUTS: Arbitrary text
OUTPUTS: Tuple of lowercase alphanumeric tokens

WHAT THIS LAYER MUST NOT DO:
============================
- Count, rank or score tokens (that's the core layer's job)
- Hold session state
- Fail on any input (empty text yields an empty tuple)

ALGORITHM:
==========
lowercase → every non [a-z0-9] character becomes a space → split on
whitespace → drop tokens shorter than the minimum length → drop stop words.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple
import re


STOP_WORDS: FrozenSet[str] = frozenset({
    'the', 'and', 'that', 'have', 'this', 'with', 'from', 'your', 'about',
    'there', 'what', 'when', 'will', 'would', 'could', 'should', 'which',
    'into', 'over', 'under', 'while', 'where', 'been', 'were', 'them',
    'they', 'then', 'than', 'just', 'like', 'really', 'maybe', 'know',
    'want', 'need', 'please',
})

_NON_ALPHANUMERIC = re.compile(r'[^a-z0-9]')


@dataclass(frozen=True)
class NormalizationConfig:
    """Configuration for the lexical normalizer."""
    stop_words: FrozenSet[str] = field(default=STOP_WORDS)
    min_token_length: int = 3

    def __post_init__(self):
        if self.min_token_length < 1:
            raise ValueError("min_token_length must be at least 1")


class LexicalNormalizer:
    """
    Deterministic tokenizer.

    Same text always produces the same token tuple; no state is kept
    between calls.
    """

    def __init__(self, config: Optional[NormalizationConfig] = None):
        self._config = config or NormalizationConfig()

    @property
    def config(self) -> NormalizationConfig:
        return self._config

    def tokenize(self, text: str) -> Tuple[str, ...]:
        """Normalize text into its filtered token sequence."""
        if not text:
            return ()

        spaced = _NON_ALPHANUMERIC.sub(' ', text.lower())
        return tuple(
            token for token in spaced.split()
            if len(token) >= self._config.min_token_length
            and token not in self._config.stop_words
        )


def tokenize(text: str) -> Tuple[str, ...]:
    """Tokenize with the default configuration."""
    return LexicalNormalizer().tokenize(text)


__all__ = [
    'STOP_WORDS',
    'NormalizationConfig',
    'LexicalNormalizer',
    'tokenize',
]
