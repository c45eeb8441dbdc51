"""
Example script comparing the LZSS match finders and format parameters on a file.
"""

import os
import sys
import time
from pathlib import Path

# Add the parent directory to Python path
sys.path.append(str(Path(__file__).parent.parent))

from lzss_codec.config import LZSSConfig
from lzss_codec.lzss import LZSS


def main():
    input_path = sys.argv[1] if len(sys.argv) > 1 else __file__
    original_size = os.path.getsize(input_path)
    print(f"\nCompressing {input_path} ({original_size} bytes)")

    configs = [
        LZSSConfig(),
        LZSSConfig(offset_bits=10, length_bits=4),
        LZSSConfig(offset_bits=14, length_bits=6, max_uncoded=2),
    ]
    for config in configs:
        for finder in ["hash", "numpy"]:
            print(f"\nUsing {finder} finder, {config}")
            lzss = LZSS(config, finder)
            output = f"{input_path}.{finder}.lzss"
            restored = f"{input_path}.{finder}.out"

            start = time.time()
            print(lzss.compress_file(input_path, output))
            print(f"Compression time: {time.time() - start:.2f} seconds")

            start = time.time()
            print(lzss.decompress_file(output, restored))
            print(f"Decompression time: {time.time() - start:.2f} seconds")

            with open(input_path, "rb") as a, open(restored, "rb") as b:
                status = "Files match" if a.read() == b.read() else "Files don't match"
            compressed_size = os.path.getsize(output)
            print(f"{status}, ratio {original_size / max(compressed_size, 1):.2f}x")

            # Clean up
            os.remove(output)
            os.remove(restored)


if __name__ == "__main__":
    main()
