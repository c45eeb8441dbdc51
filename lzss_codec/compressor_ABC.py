from abc import ABC, abstractmethod
import io
from typing import BinaryIO, Tuple


class Compressor(ABC):
    """
    Interface of the LZSS codec front-end. An implementation is built once
    with its format parameters (offset bits, length bits, max_uncoded) and a
    match finder, and every method below codes with those settings. The
    compressed stream carries no header, so data is only restored by an
    instance configured like the one that compressed it.
    """

    @abstractmethod
    def compress(self, input_stream: BinaryIO, output_stream: BinaryIO) -> str:
        """
        Reads bytes from the input stream until EOF, compresses them and
        writes the compressed data to the output stream.

        Args:
            input_stream: Stream with the data to compress
            output_stream: Stream receiving the compressed data

        Returns:
            A line of information for logging
        """
        pass

    @abstractmethod
    def decompress(self, input_stream: BinaryIO, output_stream: BinaryIO) -> str:
        """
        Reads compressed bytes from the input stream until EOF, decompresses
        them and writes the result to the output stream.

        Args:
            input_stream: Stream with the compressed data
            output_stream: Stream receiving the decompressed data

        Returns:
            A line of information for logging
        """
        pass

    def compress_file(self, input_file: str, output_file: str) -> str:
        """
        Compress a file into a headerless LZSS stream, using this instance's
        format parameters and match finder. The output file is overwritten.

        Args:
            input_file: Path of the file to compress
            output_file: Path of the compressed file

        Returns:
            Compression information: bytes in and out, ratio, token counts
        """
        with open(input_file, 'rb') as in_file, open(output_file, 'wb') as out_file:
            return self.compress(in_file, out_file)

    def decompress_file(self, input_file: str, output_file: str) -> str:
        """
        Decompress an LZSS file written with the same format parameters. The
        match finder plays no part here. A file cut inside a token is restored
        up to the last whole token.

        Args:
            input_file: Path of the compressed file
            output_file: Path of the decompressed file

        Returns:
            Decompression information: bytes in and out, token counts
        """
        with open(input_file, 'rb') as in_file, open(output_file, 'wb') as out_file:
            return self.decompress(in_file, out_file)

    def compress_bytes(self, data: bytes) -> Tuple[bytes, str]:
        """
        Compress a buffer with this instance's format parameters. Empty input
        gives empty output. Otherwise the last byte is padded with zero bits.

        Args:
            data: Data to compress

        Returns:
            Tuple (compressed data, compression information)
        """
        in_buffer = io.BytesIO(data)
        out_buffer = io.BytesIO()
        log_info = self.compress(in_buffer, out_buffer)
        return out_buffer.getvalue(), log_info

    def decompress_bytes(self, data: bytes) -> Tuple[bytes, str]:
        """
        Decompress a buffer produced with the same format parameters.

        Args:
            data: Compressed data

        Returns:
            Tuple (decompressed data, decompression information)
        """
        in_buffer = io.BytesIO(data)
        out_buffer = io.BytesIO()
        log_info = self.decompress(in_buffer, out_buffer)
        return out_buffer.getvalue(), log_info
