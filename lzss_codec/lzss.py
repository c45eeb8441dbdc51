"""
LZSS compressor with a 12-bit offset and 4-bit length by default.
"""

from typing import BinaryIO, Optional, Union

from lzss_codec.compressor_ABC import Compressor
from lzss_codec.config import LZSSConfig
from lzss_codec.decoder import LZSSDecoder
from lzss_codec.encoder import LZSSEncoder
from lzss_codec.lzss_utils.match_finder import MatchFinder, get_match_finder


class LZSS(Compressor):
    """
    LZSS compression algorithm implementation.
    Wraps LZSSEncoder and LZSSDecoder behind the Compressor interface.
    """

    def __init__(
        self,
        config: Optional[LZSSConfig] = None,
        match_finder: Union[MatchFinder, str, None] = None,
        verbose: bool = False,
    ) -> None:
        """
        Args:
            config: Format parameters, shared by compression and decompression
            match_finder: Finder instance or its name ("brute", "hash", "numpy")
            verbose: Print every token and a summary line
        """
        if match_finder is None or isinstance(match_finder, str):
            match_finder = get_match_finder(match_finder)
        self.encoder = LZSSEncoder(config, match_finder, verbose=verbose)
        self.decoder = LZSSDecoder(config, verbose=verbose)
        self.config = self.encoder.config
        self.verbose = verbose

    def compress(self, input_stream: BinaryIO, output_stream: BinaryIO) -> str:
        enc = self.encoder
        enc.encode(input_stream, output_stream)
        ratio = enc.bytes_out / enc.bytes_in * 100 if enc.bytes_in else 0.0
        info = (
            f"LZSS compressed {enc.bytes_in} bytes into {enc.bytes_out} bytes "
            f"({ratio:.2f}%): {enc.literals} literals, {enc.matches} matches, "
            f"{enc.bits_out} token bits"
        )
        if self.verbose:
            print(info)
        return info

    def decompress(self, input_stream: BinaryIO, output_stream: BinaryIO) -> str:
        dec = self.decoder
        dec.decode(input_stream, output_stream)
        info = (
            f"LZSS decompressed {dec.bytes_in} bytes into {dec.bytes_out} bytes: "
            f"{dec.literals} literals, {dec.matches} matches"
        )
        if self.verbose:
            print(info)
        return info
