# lz_token.py

from dataclasses import dataclass

UNCODED = 0  # flag bit of a literal token
ENCODED = 1  # flag bit of a match token


@dataclass(frozen=True)
class Literal:
    """One raw byte."""

    value: int

    def __repr__(self):
        shown = chr(self.value) if 0x20 <= self.value < 0x7F else f"0x{self.value:02x}"
        return f"<Literal {shown}>"


@dataclass(frozen=True)
class Match:
    """
    Back reference into the sliding window:
    - offset: absolute window index where the match begins
    - length: number of bytes copied
    On the wire the length is stored minus (max_uncoded + 1).
    """

    offset: int
    length: int

    def __repr__(self):
        return f"<Match offset={self.offset} length={self.length}>"


NO_MATCH = Match(0, 0)

Token = Literal | Match
