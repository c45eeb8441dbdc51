"""
LZSS encoder: turns a byte stream into a stream of literal and match tokens.
"""

from typing import BinaryIO, Optional

from lzss_codec.config import DEFAULT_CONFIG, LZSSConfig
from lzss_codec.errors import CodecIOError
from lzss_codec.lzss_utils.bit_writer import BitWriter
from lzss_codec.lzss_utils.lz_token import ENCODED, UNCODED, Match
from lzss_codec.lzss_utils.lz_window import LookaheadBuffer, SlidingWindow
from lzss_codec.lzss_utils.match_finder import BruteForceMatchFinder, MatchFinder


class LZSSEncoder:
    """
    Encodes a byte stream with a sliding window and a lookahead buffer.
    A new window, lookahead and bit writer are created for every call.
    """

    def __init__(
        self,
        config: Optional[LZSSConfig] = None,
        match_finder: Optional[MatchFinder] = None,
        byteorder: Optional[str] = None,
        verbose: bool = False,
    ) -> None:
        """
        Args:
            config: Format parameters, the defaults when None
            match_finder: Search strategy, brute force when None
            byteorder: Byte order convention of the bit writer, host order when None
            verbose: Print every token as it is written
        """
        self.config = config or DEFAULT_CONFIG
        self.match_finder = match_finder or BruteForceMatchFinder()
        self.byteorder = byteorder
        self.verbose = verbose
        self.bytes_in = 0
        self.bytes_out = 0
        self.bits_out = 0
        self.literals = 0
        self.matches = 0

    def encode(self, source: BinaryIO, sink: BinaryIO) -> int:
        """
        Read source until EOF and write the encoded stream to sink.
        Neither stream is closed.

        Args:
            source: Readable binary stream with the data to compress
            sink: Writable binary stream for the compressed data

        Returns:
            Number of bytes written to sink

        Raises:
            CodecIOError: If reading source or writing sink fails
        """
        cfg = self.config
        self.bytes_in = self.bytes_out = self.bits_out = 0
        self.literals = self.matches = 0
        self._eof = False
        self._position = 0

        window = SlidingWindow(cfg.window_size)
        lookahead = LookaheadBuffer(cfg.max_coded)
        if lookahead.fill(source) == 0:
            # empty input, empty output
            return 0
        self.bytes_in = lookahead.count
        self._eof = lookahead.count < lookahead.capacity

        if self.byteorder is None:
            writer = BitWriter(sink)
        else:
            writer = BitWriter(sink, self.byteorder)
        finder = self.match_finder
        finder.initialize(window, cfg)

        try:
            window_head = 0
            lookahead_head = 0
            while lookahead.count > 0:
                match = finder.find_match(window, window_head, lookahead, lookahead_head)
                length = min(match.length, lookahead.count)

                if length <= cfg.max_uncoded:
                    self._put_literal(writer, lookahead.get(lookahead_head))
                    length = 1
                else:
                    self._put_match(writer, Match(match.offset, length))

                for _ in range(length):
                    finder.replace(window, window_head, lookahead.get(lookahead_head))
                    c = self._next_byte(source)
                    if c is None:
                        lookahead.count -= 1
                    else:
                        lookahead.set(lookahead_head, c)
                    window_head = (window_head + 1) % cfg.window_size
                    lookahead_head = (lookahead_head + 1) % cfg.max_coded
                self._position += length

            # token bits only, before the zero padding
            self.bits_out = writer.bits_written
            writer.flush()
        finally:
            finder.release()
        self.bytes_out = writer.bytes_written
        return self.bytes_out

    def _put_literal(self, writer: BitWriter, value: int) -> None:
        writer.put_bit(UNCODED)
        writer.put_byte(value)
        self.literals += 1
        if self.verbose:
            print(f"Literal at position {self._position}: {value}")

    def _put_match(self, writer: BitWriter, match: Match) -> None:
        cfg = self.config
        writer.put_bit(ENCODED)
        writer.put_bits(match.offset, cfg.offset_bits, cfg.field_width)
        writer.put_bits(match.length - cfg.min_coded, cfg.length_bits, cfg.field_width)
        self.matches += 1
        if self.verbose:
            print(
                f"Match at position {self._position}: "
                f"offset={match.offset}, length={match.length}"
            )

    def _next_byte(self, source: BinaryIO) -> Optional[int]:
        if self._eof:
            return None
        try:
            data = source.read(1)
        except OSError as exc:
            raise CodecIOError(f"Reading input failed: {exc}") from exc
        if not data:
            self._eof = True
            return None
        self.bytes_in += 1
        return data[0]


def encode(
    source: BinaryIO,
    sink: BinaryIO,
    config: Optional[LZSSConfig] = None,
    match_finder: Optional[MatchFinder] = None,
) -> int:
    """Encode source into sink, returns the number of bytes written."""
    return LZSSEncoder(config, match_finder).encode(source, sink)

