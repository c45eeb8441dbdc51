"""
Exceptions and warnings raised by the LZSS codec.
"""


class LZSSError(Exception):
    """Base class for all LZSS codec errors."""


class CodecIOError(LZSSError, OSError):
    """The underlying byte source or sink failed. Always fatal."""


class EndOfStream(LZSSError, EOFError):
    """
    The bit source ran out before the requested bits could be read.
    Used to terminate decoding, not a failure by itself.
    """


class ConfigError(LZSSError, ValueError):
    """Invalid codec parameters."""


class TruncatedStreamWarning(UserWarning):
    """The compressed stream ended in the middle of a token."""
