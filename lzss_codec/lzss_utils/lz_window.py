# lz_window.py

from typing import BinaryIO

from lzss_codec.config import SPACE
from lzss_codec.errors import CodecIOError


class SlidingWindow:
    """
    Circular dictionary of the last `size` bytes of the uncompressed stream.
    Every position is wrapped, so any integer is a valid index.
    """

    def __init__(self, size: int, fill: int = SPACE):
        """
        :param size: window size (must be a power of two)
        :param fill: byte every slot holds before coding starts
        """
        if size <= 0 or size & (size - 1) != 0:
            raise ValueError("Window size must be a power of two")
        self.size = size
        self.mask = size - 1
        self.data = bytearray([fill]) * size

    def get(self, pos: int) -> int:
        return self.data[pos & self.mask]

    def set(self, pos: int, value: int):
        self.data[pos & self.mask] = value

    def read(self, pos: int, length: int) -> bytes:
        """
        Copies `length` bytes starting at `pos` into a new buffer,
        wrapping around the end of the window as often as needed.
        """
        result = bytearray(length)
        x = pos & self.mask
        for i in range(length):
            result[i] = self.data[x]
            x = (x + 1) & self.mask
        return bytes(result)

    def write(self, pos: int, data: bytes):
        """Stores a run of bytes starting at `pos`."""
        x = pos & self.mask
        for b in data:
            self.data[x] = b
            x = (x + 1) & self.mask

    def __len__(self):
        return self.size


class LookaheadBuffer:
    """
    Fixed array of not yet encoded input bytes.
    `count` tells how many of the slots still hold valid input.
    """

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError("Lookahead capacity must be positive")
        self.capacity = capacity
        self.data = bytearray(capacity)
        self.count = 0

    def fill(self, source: BinaryIO) -> int:
        """
        Reads up to `capacity` bytes from the source into the buffer.
        Returns the number of bytes actually read (less than capacity at EOF).
        """
        self.count = 0
        while self.count < self.capacity:
            try:
                chunk = source.read(self.capacity - self.count)
            except OSError as exc:
                raise CodecIOError(f"Reading input failed: {exc}") from exc
            if not chunk:
                break
            self.data[self.count : self.count + len(chunk)] = chunk
            self.count += len(chunk)
        return self.count

    def get(self, pos: int) -> int:
        return self.data[pos % self.capacity]

    def set(self, pos: int, value: int):
        self.data[pos % self.capacity] = value

    def read(self, pos: int, length: int) -> bytes:
        """Copies `length` bytes starting at `pos`, wrapping around."""
        return bytes(self.data[(pos + i) % self.capacity] for i in range(length))

    def __len__(self):
        return self.count
