import sys

from lzss_codec.cli import main

sys.exit(main())
