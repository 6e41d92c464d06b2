"""Word pair catalogue and per-room draw order."""

import random

from .constants import WORD_PAIRS

WordPair = tuple[str, str]


class WordDeck:
    """Shuffled, non-repeating draw order over a catalogue of word pairs.

    Every pair is drawn once per pass. When the pass is exhausted the deck
    reshuffles and starts over, so a draw never fails.
    """

    def __init__(self, pairs: list[WordPair] | None = None, rng: random.Random | None = None):
        """Initialize the deck.

        Args:
            pairs: (majority_word, minority_word) pairs, defaults to WORD_PAIRS
            rng: Random source, defaults to the module-level generator

        Raises:
            ValueError: If the catalogue is empty
        """
        catalogue = pairs if pairs is not None else WORD_PAIRS
        # dict.fromkeys keeps first-seen order while dropping duplicates
        self.pairs: tuple[WordPair, ...] = tuple(dict.fromkeys(tuple(p) for p in catalogue))
        if not self.pairs:
            raise ValueError("Word catalogue cannot be empty")

        self._rng = rng or random.Random()
        self._order: list[WordPair] = []
        self._cursor = 0
        self._reshuffle()

    def _reshuffle(self) -> None:
        self._order = list(self.pairs)
        self._rng.shuffle(self._order)
        self._cursor = 0

    def draw(self) -> WordPair:
        """Draw the next pair, reshuffling when the pass is exhausted.

        Returns:
            Tuple of (majority_word, minority_word)
        """
        if self._cursor >= len(self._order):
            self._reshuffle()
        pair = self._order[self._cursor]
        self._cursor += 1
        return pair

    @property
    def remaining(self) -> int:
        """Number of pairs left in the current pass."""
        return len(self._order) - self._cursor

    def __len__(self) -> int:
        return len(self.pairs)
