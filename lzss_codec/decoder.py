"""
LZSS decoder: rebuilds the original bytes from a token stream.

The stream carries no end marker. Decoding stops when the bit source runs out,
including in the middle of a token, which is how the padding bits of the last
byte are skipped.
"""

import warnings
from typing import BinaryIO, Iterator, Optional

from lzss_codec.config import DEFAULT_CONFIG, LZSSConfig
from lzss_codec.errors import CodecIOError, EndOfStream, TruncatedStreamWarning
from lzss_codec.lzss_utils.bit_reader import BitReader
from lzss_codec.lzss_utils.lz_token import UNCODED, Literal, Match, Token
from lzss_codec.lzss_utils.lz_window import SlidingWindow


class LZSSDecoder:
    """Decodes a stream written by LZSSEncoder with the same configuration."""

    def __init__(
        self,
        config: Optional[LZSSConfig] = None,
        byteorder: Optional[str] = None,
        verbose: bool = False,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.byteorder = byteorder
        self.verbose = verbose
        self.bytes_in = 0
        self.bytes_out = 0
        self.literals = 0
        self.matches = 0

    def _reader(self, source: BinaryIO) -> BitReader:
        if self.byteorder is None:
            return BitReader(source)
        return BitReader(source, self.byteorder)

    def iter_tokens(self, reader: BitReader) -> Iterator[Token]:
        """
        Read tokens until the stream is exhausted.

        Args:
            reader: Bit reader positioned at the start of a token

        Yields:
            Literal and Match tokens, match lengths already adjusted
        """
        cfg = self.config
        while True:
            start = reader.bits_read
            try:
                flag = reader.get_bit()
            except EndOfStream:
                return

            try:
                if flag == UNCODED:
                    token = Literal(reader.get_byte())
                else:
                    offset = reader.get_bits(cfg.offset_bits, cfg.field_width)
                    length = reader.get_bits(cfg.length_bits, cfg.field_width)
                    token = Match(offset, length + cfg.min_coded)
            except EndOfStream:
                left = reader.bits_read - start + reader.bits_available()
                if left >= 8:
                    # more than a byte of padding can't be there
                    warnings.warn(
                        f"Compressed stream ends inside a token ({left} bits left)",
                        TruncatedStreamWarning,
                        stacklevel=2,
                    )
                return

            yield token

    def tokens(self, source: BinaryIO) -> Iterator[Token]:
        """Iterate over the tokens of a compressed stream without decoding it."""
        return self.iter_tokens(self._reader(source))

    def decode(self, source: BinaryIO, sink: BinaryIO) -> int:
        """
        Decode source into sink. Neither stream is closed.

        Args:
            source: Readable binary stream with compressed data
            sink: Writable binary stream for the decoded bytes

        Returns:
            Number of bytes written to sink

        Raises:
            CodecIOError: If reading source or writing sink fails
        """
        self.bytes_out = self.literals = self.matches = 0
        window = SlidingWindow(self.config.window_size)
        next_char = 0
        reader = self._reader(source)

        for token in self.iter_tokens(reader):
            if isinstance(token, Literal):
                data = bytes((token.value,))
                window.set(next_char, token.value)
                self.literals += 1
            else:
                # copy out first, the destination run may overlap the source run
                data = window.read(token.offset, token.length)
                window.write(next_char, data)
                self.matches += 1
            if self.verbose:
                print(f"{token!r} at position {self.bytes_out}")

            self._write(sink, data)
            next_char = (next_char + len(data)) & window.mask

        self.bytes_in = (reader.bits_read + reader.bits_available() + 7) // 8
        return self.bytes_out

    def _write(self, sink: BinaryIO, data: bytes) -> None:
        try:
            sink.write(data)
        except OSError as exc:
            raise CodecIOError(f"Writing decoded data failed: {exc}") from exc
        self.bytes_out += len(data)


def decode(source: BinaryIO, sink: BinaryIO, config: Optional[LZSSConfig] = None) -> int:
    """Decode source into sink, returns the number of bytes written."""
    return LZSSDecoder(config).decode(source, sink)
