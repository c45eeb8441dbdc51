import sys
from typing import BinaryIO

from bitarray import bitarray
from bitarray.util import int2ba

from lzss_codec.errors import CodecIOError


class BitWriter:
    """
    A class for writing bits MSB-first into a byte sink.
    Pending bits are kept in a bitarray, every complete byte is written out.
    """

    def __init__(self, sink: BinaryIO, byteorder: str = sys.byteorder) -> None:
        """
        Initialize a new BitWriter on top of an open binary stream.

        Args:
            sink: Writable binary stream
            byteorder: Memory layout ("little" or "big") used by put_bits to
                address the bytes of a multi-byte value
        """
        if byteorder not in ("little", "big"):
            raise ValueError(f"Unknown byte order: {byteorder!r}")
        self.sink = sink
        self.byteorder = byteorder
        self.bits = bitarray(endian="big")
        self.bytes_written = 0
        self.bits_written = 0

    def put_bit(self, bit: int) -> None:
        """
        Write one bit.

        Args:
            bit: Any value, written as 1 when truthy
        """
        self.bits.append(1 if bit else 0)
        self.bits_written += 1
        if len(self.bits) == 8:
            self._emit()

    def put_byte(self, value: int) -> None:
        """
        Write 8 bits of value, MSB first.

        Args:
            value: Byte value (0-255)
        """
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Not a byte value: {value}")
        self.bits_written += 8
        if not self.bits:
            # byte aligned, nothing to merge with
            self._write(bytes((value,)))
            return
        self.bits.extend(int2ba(value, length=8, endian="big"))
        self._emit()

    def put_bits(self, value: int, count: int, width: int = 4) -> None:
        """
        Write count bits of value.

        The value is laid out as a width-byte unsigned integer in the stream's
        byte order. Whole bytes are written starting from the least significant
        one, then the remaining count % 8 bits of the next byte. "little" walks
        the memory from the lowest address up, "big" from the highest down, so
        both conventions give the same bits for the same number.

        Args:
            value: Non-negative integer to write
            count: Number of bits to write
            width: Size in bytes of the integer holding value

        Raises:
            ValueError: If count does not fit in width bytes or value does not
                fit in width bytes
        """
        if count < 0:
            raise ValueError("Length cannot be negative")
        if count > 8 * width:
            raise ValueError(f"Cannot write {count} bits from a {width}-byte value")
        try:
            memory = value.to_bytes(width, self.byteorder)
        except OverflowError as exc:
            raise ValueError(f"Value {value} does not fit in {width} bytes") from exc

        if self.byteorder == "little":
            offset, step = 0, 1
        else:
            offset, step = width - 1, -1

        remaining = count
        while remaining >= 8:
            self.put_byte(memory[offset])
            remaining -= 8
            offset += step

        if remaining:
            self.bits.extend(int2ba(memory[offset] & ((1 << remaining) - 1),
                                    length=remaining, endian="big"))
            self.bits_written += remaining
            if len(self.bits) >= 8:
                self._emit()

    def flush(self, pad_with_ones: bool = False) -> int | None:
        """
        Left-justify the pending bits and write them out as a full byte.

        Args:
            pad_with_ones: Fill spare low bits with ones instead of zeros

        Returns:
            The byte written, or None if no bits were pending
        """
        if not self.bits:
            return None
        self.bits.extend([1 if pad_with_ones else 0] * (8 - len(self.bits)))
        value = self.bits[:8].tobytes()[0]
        self._emit()
        return value

    def _emit(self) -> None:
        """Write every complete byte held in the bit buffer."""
        whole = len(self.bits) // 8 * 8
        if not whole:
            return
        data = self.bits[:whole].tobytes()
        del self.bits[:whole]
        self._write(data)

    def _write(self, data: bytes) -> None:
        try:
            self.sink.write(data)
        except OSError as exc:
            raise CodecIOError(f"Writing compressed data failed: {exc}") from exc
        self.bytes_written += len(data)
