"""
Fixed format parameters of an LZSS stream.

The parameters are never written into the stream, so the encoder and the
decoder of a given stream have to be built from the same configuration.
"""

from dataclasses import dataclass

from lzss_codec.errors import ConfigError

OFFSET_BITS = 12
LENGTH_BITS = 4
MAX_UNCODED = 2
FIELD_WIDTH = 4  # bytes of the integer multi-bit fields are packed from

SPACE = 0x20  # initial window contents


@dataclass(frozen=True)
class LZSSConfig:
    """
    Parameters of the wire format.

    Attributes:
        offset_bits: Width of the offset field, the window holds 2**offset_bits bytes
        length_bits: Width of the length field
        max_uncoded: Longest match that is still written as literals
        field_width: Size in bytes of the integer the multi-bit fields are packed from
    """

    offset_bits: int = OFFSET_BITS
    length_bits: int = LENGTH_BITS
    max_uncoded: int = MAX_UNCODED
    field_width: int = FIELD_WIDTH

    def __post_init__(self) -> None:
        if not 1 <= self.offset_bits <= 24:
            raise ConfigError(f"offset_bits must be in 1..24, got {self.offset_bits}")
        if not 1 <= self.length_bits <= 16:
            raise ConfigError(f"length_bits must be in 1..16, got {self.length_bits}")
        if not 0 <= self.max_uncoded <= 255:
            raise ConfigError(f"max_uncoded must be in 0..255, got {self.max_uncoded}")
        if self.field_width < 1:
            raise ConfigError(f"field_width must be positive, got {self.field_width}")
        if max(self.offset_bits, self.length_bits) > 8 * self.field_width:
            raise ConfigError(
                f"{self.field_width}-byte fields cannot hold "
                f"{max(self.offset_bits, self.length_bits)} bits"
            )

    @property
    def window_size(self) -> int:
        return 1 << self.offset_bits

    @property
    def max_coded(self) -> int:
        """Longest match a single token can describe, also the lookahead size."""
        return (1 << self.length_bits) + self.max_uncoded

    @property
    def min_coded(self) -> int:
        return self.max_uncoded + 1

    def __str__(self) -> str:
        return (
            f"offset_bits={self.offset_bits}, length_bits={self.length_bits}, "
            f"max_uncoded={self.max_uncoded} "
            f"(window {self.window_size}, matches {self.min_coded}..{self.max_coded})"
        )


DEFAULT_CONFIG = LZSSConfig()
