"""
Strategies for finding the longest match of the lookahead in the sliding window.

Every finder scans the circular window forward starting at the window head and
keeps the first of several equally long matches, so all of them produce
byte-identical compressed output.
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Dict, Optional, Set

import numpy as np

from lzss_codec.config import DEFAULT_CONFIG, LZSSConfig
from lzss_codec.lzss_utils.lz_token import NO_MATCH, Match
from lzss_codec.lzss_utils.lz_window import LookaheadBuffer, SlidingWindow


class MatchFinder(ABC):
    """
    Interface between the encoder and a search algorithm.
    The encoder only changes the window through replace(), which lets a finder
    keep its own search structures in sync.
    """

    def __init__(self) -> None:
        self.config: LZSSConfig = DEFAULT_CONFIG

    def initialize(self, window: SlidingWindow, config: LZSSConfig) -> None:
        """
        Prepare the search structures for a freshly filled window.
        Called once per stream, before the first find_match().

        Args:
            window: Window the encoder is about to use
            config: Format parameters of the stream
        """
        self.config = config

    def replace(self, window: SlidingWindow, pos: int, value: int) -> None:
        """
        Store value into the window at pos.

        Args:
            window: Window being coded against
            pos: Window position to overwrite
            value: New byte
        """
        window.set(pos, value)

    def release(self) -> None:
        """
        Drop whatever was built from the last stream's window.
        Called once per stream after the last token, also when coding fails.
        """

    @abstractmethod
    def find_match(
        self,
        window: SlidingWindow,
        window_head: int,
        lookahead: LookaheadBuffer,
        lookahead_head: int,
    ) -> Match:
        """
        Find the longest window run equal to a prefix of the lookahead.

        Args:
            window: Sliding window, treated as circular from window_head
            window_head: First window position to try
            lookahead: Buffer of input bytes not coded yet
            lookahead_head: Position of the first uncoded byte

        Returns:
            The match, or NO_MATCH when nothing longer than max_uncoded exists
        """
        pass

    def _limit(self, lookahead: LookaheadBuffer) -> int:
        return min(self.config.max_coded, lookahead.count)

    def _result(self, offset: int, length: int) -> Match:
        if length <= self.config.max_uncoded:
            return NO_MATCH
        return Match(offset, length)


def match_length(
    window: SlidingWindow,
    start: int,
    lookahead: LookaheadBuffer,
    lookahead_head: int,
    limit: int,
) -> int:
    """Count how many bytes from window[start] on equal the lookahead, up to limit."""
    length = 0
    while (
        length < limit
        and window.get(start + length) == lookahead.get(lookahead_head + length)
    ):
        length += 1
    return length


class BruteForceMatchFinder(MatchFinder):
    """Compares the lookahead against every window position, O(W*L) per call."""

    def find_match(self, window, window_head, lookahead, lookahead_head):
        limit = self._limit(lookahead)
        best_offset = 0
        best_length = 0
        first = lookahead.get(lookahead_head)

        for pos in self._positions_of(window, window_head, first):
            length = match_length(window, pos, lookahead, lookahead_head, limit)
            if length > best_length:
                best_offset, best_length = pos, length
                if best_length == limit:
                    break

        return self._result(best_offset, best_length)

    @staticmethod
    def _positions_of(window: SlidingWindow, window_head: int, value: int):
        """Window positions holding value, from the head to the end, then from 0."""
        head = window_head & window.mask
        for lo, hi in ((head, window.size), (0, head)):
            pos = window.data.find(value, lo, hi)
            while pos != -1:
                yield pos
                pos = window.data.find(value, pos + 1, hi)


class HashChainMatchFinder(MatchFinder):
    """
    Keeps, for every prefix of max_uncoded + 1 bytes, the set of window
    positions it starts at. Only positions sharing the lookahead's prefix can
    produce an encodable match, and they are visited in the same order as the
    brute force scan.
    """

    def __init__(self) -> None:
        super().__init__()
        self.key_length = DEFAULT_CONFIG.min_coded
        self.table: Dict[bytes, Set[int]] = defaultdict(set)

    def initialize(self, window, config):
        super().initialize(window, config)
        self.key_length = config.min_coded
        self.table = defaultdict(set)
        for pos in range(window.size):
            self.table[self._key(window, pos)].add(pos)

    def replace(self, window, pos, value):
        pos &= window.mask
        if window.data[pos] == value:
            return
        # every key that covers pos changes
        touched = {(pos - k) & window.mask for k in range(self.key_length)}
        for start in touched:
            self._discard(self._key(window, start), start)
        window.set(pos, value)
        for start in touched:
            self.table[self._key(window, start)].add(start)

    def release(self):
        self.table = defaultdict(set)

    def find_match(self, window, window_head, lookahead, lookahead_head):
        limit = self._limit(lookahead)
        if limit < self.key_length:
            return NO_MATCH

        candidates = self.table.get(lookahead.read(lookahead_head, self.key_length))
        if not candidates:
            return NO_MATCH

        best_offset = 0
        best_length = 0
        for pos in sorted(candidates, key=lambda p: (p - window_head) & window.mask):
            length = match_length(window, pos, lookahead, lookahead_head, limit)
            if length > best_length:
                best_offset, best_length = pos, length
                if best_length == limit:
                    break

        return self._result(best_offset, best_length)

    def _key(self, window: SlidingWindow, pos: int) -> bytes:
        return window.read(pos, self.key_length)

    def _discard(self, key: bytes, pos: int) -> None:
        positions = self.table.get(key)
        if positions is None:
            return
        positions.discard(pos)
        if not positions:
            del self.table[key]


class NumpyMatchFinder(MatchFinder):
    """
    Brute force search vectorised over the whole window: column j of the
    comparison tells which window positions still match after j + 1 bytes.
    """

    def find_match(self, window, window_head, lookahead, lookahead_head):
        limit = self._limit(lookahead)
        if limit <= self.config.max_uncoded:
            return NO_MATCH

        pattern = np.frombuffer(lookahead.read(lookahead_head, limit), dtype=np.uint8)
        # window rotated so index 0 is the head, extended cyclically by limit bytes
        rotated = np.roll(np.frombuffer(bytes(window.data), dtype=np.uint8), -window_head)
        extended = np.resize(rotated, window.size + limit)

        alive = np.ones(window.size, dtype=bool)
        lengths = np.zeros(window.size, dtype=np.int64)
        for j in range(limit):
            alive &= extended[j : j + window.size] == pattern[j]
            if not alive.any():
                break
            lengths += alive

        best = int(lengths.argmax())
        return self._result((window_head + best) & window.mask, int(lengths[best]))


MATCH_FINDERS = {
    "brute": BruteForceMatchFinder,
    "hash": HashChainMatchFinder,
    "numpy": NumpyMatchFinder,
}


def get_match_finder(name: Optional[str] = None) -> MatchFinder:
    """
    Create a match finder by name.

    Args:
        name: One of MATCH_FINDERS, brute force when None

    Returns:
        A new finder instance

    Raises:
        ValueError: If the name is unknown
    """
    if name is None:
        name = "brute"
    try:
        return MATCH_FINDERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown match finder {name!r}, expected one of {', '.join(MATCH_FINDERS)}"
        ) from None
