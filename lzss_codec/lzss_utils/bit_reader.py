import sys
from typing import BinaryIO

from bitarray import bitarray
from bitarray.util import ba2int

from lzss_codec.errors import CodecIOError, EndOfStream


class BitReader:
    """
    A class for reading bits MSB-first from a byte source.
    The source is pulled in chunks into a bitarray as bits are requested.
    """

    CHUNK_SIZE = 4096

    def __init__(self, source: BinaryIO, byteorder: str = sys.byteorder) -> None:
        """
        Initialize a new BitReader on top of an open binary stream.

        Args:
            source: Readable binary stream
            byteorder: Memory layout ("little" or "big") used by get_bits to
                address the bytes of a multi-byte value
        """
        if byteorder not in ("little", "big"):
            raise ValueError(f"Unknown byte order: {byteorder!r}")
        self.source = source
        self.byteorder = byteorder
        self.bits = bitarray(endian="big")
        self.pos = 0
        self.bits_read = 0
        self.exhausted = False

    def get_bit(self) -> int:
        """
        Read one bit from the stream.

        Returns:
            The bit value (0 or 1)

        Raises:
            EndOfStream: If the source is exhausted
        """
        self._require(1)
        val = self.bits[self.pos]
        self.pos += 1
        self.bits_read += 1
        return val

    def get_byte(self) -> int:
        """
        Read 8 bits, MSB first.

        Returns:
            The byte value

        Raises:
            EndOfStream: If fewer than 8 bits are left
        """
        self._require(8)
        val = ba2int(self.bits[self.pos : self.pos + 8])
        self.pos += 8
        self.bits_read += 8
        return val

    def get_bits(self, count: int, width: int = 4) -> int:
        """
        Read count bits written by BitWriter.put_bits.

        The bits fill a width-byte integer the same way they were taken out of
        it: whole bytes first starting from the least significant one, then
        the remaining count % 8 bits in the low end of the next byte.

        Args:
            count: Number of bits to read
            width: Size in bytes of the integer being filled

        Returns:
            The value as an integer

        Raises:
            ValueError: If count does not fit in width bytes
            EndOfStream: If fewer than count bits are left
        """
        if count < 0:
            raise ValueError("Length cannot be negative")
        if count > 8 * width:
            raise ValueError(f"Cannot read {count} bits into a {width}-byte value")
        self._require(count)

        memory = bytearray(width)
        if self.byteorder == "little":
            offset, step = 0, 1
        else:
            offset, step = width - 1, -1

        remaining = count
        while remaining >= 8:
            memory[offset] = self.get_byte()
            remaining -= 8
            offset += step

        if remaining:
            memory[offset] = ba2int(self.bits[self.pos : self.pos + remaining])
            self.pos += remaining
            self.bits_read += remaining

        return int.from_bytes(memory, self.byteorder)

    def bits_available(self) -> int:
        """
        Number of bits buffered but not read yet.
        Once the source is exhausted this is everything that is left.
        """
        return len(self.bits) - self.pos

    def _require(self, n: int) -> None:
        """Make sure at least n unread bits are buffered."""
        while len(self.bits) - self.pos < n:
            if self.exhausted or not self._refill():
                raise EndOfStream(f"Needed {n} bits, {len(self.bits) - self.pos} left")

    def _refill(self) -> bool:
        try:
            chunk = self.source.read(self.CHUNK_SIZE)
        except OSError as exc:
            raise CodecIOError(f"Reading compressed data failed: {exc}") from exc
        if not chunk:
            self.exhausted = True
            return False
        # drop consumed bits before appending
        del self.bits[: self.pos]
        self.pos = 0
        self.bits.frombytes(chunk)
        return True
