import io
import random
import warnings

import pytest

from lzss_codec.config import DEFAULT_CONFIG, LZSSConfig
from lzss_codec.decoder import LZSSDecoder, decode
from lzss_codec.encoder import LZSSEncoder, encode
from lzss_codec.errors import CodecIOError, ConfigError, TruncatedStreamWarning
from lzss_codec.lzss import LZSS
from lzss_codec.lzss_utils.bit_writer import BitWriter
from lzss_codec.lzss_utils.lz_token import NO_MATCH, Literal, Match
from lzss_codec.lzss_utils.match_finder import (
    MATCH_FINDERS,
    HashChainMatchFinder,
    MatchFinder,
    get_match_finder,
)

TEXT = (
    b"It was the best of times, it was the worst of times, it was the age of "
    b"wisdom, it was the age of foolishness, it was the epoch of belief, it was "
    b"the epoch of incredulity, it was the season of Light, it was the season "
    b"of Darkness, it was the spring of hope, it was the winter of despair."
)

SAMPLES = {
    "empty": b"",
    "one byte": b"x",
    "spaces": b" " * 50,
    "text": TEXT,
    "repeats": b"abcabcabd" * 40,
    "random": random.Random(1234).randbytes(600),
    "all bytes": bytes(range(256)) * 2,
}

CONFIGS = {
    "default": DEFAULT_CONFIG,
    "tiny window": LZSSConfig(offset_bits=4, length_bits=2, max_uncoded=2),
    "short matches": LZSSConfig(offset_bits=8, length_bits=3, max_uncoded=1),
    "no uncoded": LZSSConfig(offset_bits=6, length_bits=5, max_uncoded=0),
    "long matches": LZSSConfig(offset_bits=10, length_bits=8, max_uncoded=3),
}


def compress(data, config=None, finder=None):
    sink = io.BytesIO()
    encode(io.BytesIO(data), sink, config, finder)
    return sink.getvalue()


def decompress(data, config=None):
    sink = io.BytesIO()
    decode(io.BytesIO(data), sink, config)
    return sink.getvalue()


def tokens_of(data, config=None):
    return list(LZSSDecoder(config).tokens(io.BytesIO(data)))


class NeverMatch(MatchFinder):
    def find_match(self, window, window_head, lookahead, lookahead_head):
        return NO_MATCH


@pytest.mark.parametrize("config_name", list(CONFIGS))
@pytest.mark.parametrize("sample", list(SAMPLES))
def test_round_trip(sample, config_name):
    data = SAMPLES[sample]
    config = CONFIGS[config_name]
    assert decompress(compress(data, config), config) == data


@pytest.mark.parametrize("name", list(MATCH_FINDERS))
def test_finders_give_identical_output(name):
    for config in (DEFAULT_CONFIG, CONFIGS["tiny window"], CONFIGS["no uncoded"]):
        data = TEXT + b"   " + SAMPLES["repeats"][:120]
        expected = compress(data, config, get_match_finder("brute"))
        assert compress(data, config, get_match_finder(name)) == expected


def test_encoding_is_deterministic():
    data = TEXT * 3
    assert compress(data) == compress(data)
    # the same encoder instance can be reused
    encoder = LZSSEncoder()
    first, second = io.BytesIO(), io.BytesIO()
    encoder.encode(io.BytesIO(data), first)
    encoder.encode(io.BytesIO(data), second)
    assert first.getvalue() == second.getvalue()


def test_compresses_repetitive_input():
    data = b"abcabcabd" * 40
    assert len(compress(data)) < len(data) // 3


def test_empty_input_gives_empty_output():
    assert compress(b"") == b""
    assert decompress(b"") == b""


def test_run_of_one_byte():
    data = b"AAAAAAAAAA"
    encoded = compress(data)
    assert tokens_of(encoded) == [
        Literal(0x41),
        Literal(0x41),
        Literal(0x41),
        Match(0, 3),
        Match(0, 4),
    ]
    # 3 * 9 + 2 * 17 bits
    assert len(encoded) == 8
    assert decompress(encoded) == data


def test_short_input_without_repeats_is_all_literals():
    data = b"abcdefghijklmnop"
    encoded = compress(data)
    assert tokens_of(encoded) == [Literal(b) for b in data]
    assert len(encoded) == (9 * len(data) + 7) // 8


def test_no_match_finder_gives_literal_stream():
    data = TEXT
    expected = io.BytesIO()
    writer = BitWriter(expected)
    for b in data:
        writer.put_bit(0)
        writer.put_byte(b)
    writer.flush()

    assert compress(data, finder=NeverMatch()) == expected.getvalue()
    assert decompress(expected.getvalue()) == data


@pytest.mark.parametrize("config_name", list(CONFIGS))
def test_decoded_tokens_stay_in_bounds(config_name):
    config = CONFIGS[config_name]
    data = TEXT + SAMPLES["repeats"] + b" " * 30
    tokens = tokens_of(compress(data, config), config)
    matches = [t for t in tokens if isinstance(t, Match)]
    assert matches
    for match in matches:
        assert 0 <= match.offset < config.window_size
        assert config.max_uncoded < match.length <= config.max_coded
    decoded_length = sum(t.length if isinstance(t, Match) else 1 for t in tokens)
    assert decoded_length == len(data)


class TestOverlappingCopy:
    config = LZSSConfig(offset_bits=4, length_bits=2, max_uncoded=2)  # 16 byte window

    def stream(self, literals, *matches):
        sink = io.BytesIO()
        writer = BitWriter(sink)
        for b in literals:
            writer.put_bit(0)
            writer.put_byte(b)
        for offset, length in matches:
            writer.put_bit(1)
            writer.put_bits(offset, self.config.offset_bits)
            writer.put_bits(length - self.config.min_coded, self.config.length_bits)
        writer.flush()
        return sink.getvalue()

    def test_source_read_before_destination_written(self):
        # next char is 10, the copy of 8..13 writes over 10..13
        data = self.stream(b"ABCDEFGHIJ", (8, 6))
        assert decompress(data, self.config) == b"ABCDEFGHIJ" + b"IJ    "

    def test_copy_wrapping_around_window_end(self):
        # next char is 14: copy 12..1 into 14..3, then read back 0..3
        data = self.stream(b"ABCDEFGHIJKLMN", (12, 6), (0, 4))
        assert decompress(data, self.config) == b"ABCDEFGHIJKLMN" + b"MN  AB" + b"  AB"

    def test_round_trip_with_overlapping_matches(self):
        data = b"ab" * 30 + b"abcabcabc" * 10 + b"z" * 25
        assert decompress(compress(data, self.config), self.config) == data


def test_truncated_stream_warns():
    sink = io.BytesIO()
    writer = BitWriter(sink)
    writer.put_bit(0)
    writer.put_byte(ord("X"))
    writer.put_bit(1)
    writer.put_bits(5, 12)  # length field missing
    writer.flush()

    with pytest.warns(TruncatedStreamWarning):
        assert decompress(sink.getvalue()) == b"X"


def test_padding_does_not_warn():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        for data in SAMPLES.values():
            assert decompress(compress(data)) == data


def test_padding_with_ones_is_ignored():
    sink = io.BytesIO()
    writer = BitWriter(sink)
    for b in b"hi":
        writer.put_bit(0)
        writer.put_byte(b)
    writer.flush(pad_with_ones=True)
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert decompress(sink.getvalue()) == b"hi"


class BrokenSink:
    def write(self, data):
        raise OSError("disk full")


def test_sink_failure_aborts_encoding():
    with pytest.raises(CodecIOError):
        encode(io.BytesIO(TEXT), BrokenSink())


def test_sink_failure_aborts_decoding():
    with pytest.raises(CodecIOError):
        decode(io.BytesIO(compress(TEXT)), BrokenSink())


class BrokenSource:
    def read(self, size=-1):
        raise OSError("device lost")


class FailsAfterFirstRead:
    """Serves one chunk, then every read fails."""

    def __init__(self, data):
        self.data = data
        self.reads = 0

    def read(self, size=-1):
        self.reads += 1
        if self.reads > 1:
            raise OSError("device lost")
        return self.data[:size]


def test_source_failure_during_fill():
    with pytest.raises(CodecIOError):
        encode(BrokenSource(), io.BytesIO())


def test_source_failure_while_coding():
    source = FailsAfterFirstRead(TEXT)
    with pytest.raises(CodecIOError):
        encode(source, io.BytesIO())
    # the lookahead was full, the failing read came from the coding loop
    assert source.reads == 2


def test_encoder_drops_stream_state_when_done():
    finder = HashChainMatchFinder()
    encoder = LZSSEncoder(match_finder=finder)
    source = io.BytesIO(TEXT)
    encoder.encode(source, io.BytesIO())
    assert source not in vars(encoder).values()
    assert not finder.table


def test_encoder_drops_index_after_failure():
    finder = HashChainMatchFinder()
    with pytest.raises(CodecIOError):
        LZSSEncoder(match_finder=finder).encode(FailsAfterFirstRead(TEXT), io.BytesIO())
    assert not finder.table


def test_encoder_statistics():
    encoder = LZSSEncoder()
    sink = io.BytesIO()
    written = encoder.encode(io.BytesIO(b"AAAAAAAAAA"), sink)
    assert written == len(sink.getvalue()) == encoder.bytes_out
    assert encoder.bytes_in == 10
    assert (encoder.literals, encoder.matches) == (3, 2)
    # 3 literals of 9 bits and 2 matches of 17 bits, padding not counted
    assert encoder.bits_out == 61


@pytest.mark.parametrize(
    "kwargs",
    [
        {"offset_bits": 0},
        {"offset_bits": 25},
        {"length_bits": 0},
        {"max_uncoded": -1},
        {"offset_bits": 12, "field_width": 1},
    ],
)
def test_invalid_config(kwargs):
    with pytest.raises(ConfigError):
        LZSSConfig(**kwargs)


def test_default_config_values():
    assert DEFAULT_CONFIG.window_size == 4096
    assert DEFAULT_CONFIG.max_coded == 18
    assert DEFAULT_CONFIG.min_coded == 3


class TestLZSSCompressor:
    def test_bytes_helpers(self):
        lzss = LZSS()
        compressed, info = lzss.compress_bytes(TEXT)
        assert "literals" in info
        restored, info = lzss.decompress_bytes(compressed)
        assert restored == TEXT
        assert f"into {len(TEXT)} bytes" in info

    def test_file_helpers(self, tmp_path):
        source = tmp_path / "input.txt"
        source.write_bytes(TEXT)
        lzss = LZSS(CONFIGS["short matches"], "hash")
        lzss.compress_file(str(source), str(tmp_path / "input.lzss"))
        lzss.decompress_file(str(tmp_path / "input.lzss"), str(tmp_path / "output.txt"))
        assert (tmp_path / "output.txt").read_bytes() == TEXT

    def test_verbose_prints_tokens(self, capsys):
        LZSS(verbose=True).compress_bytes(b"AAAAAAAAAA")
        out = capsys.readouterr().out
        assert "Match at position 3: offset=0, length=3" in out
        assert "LZSS compressed 10 bytes" in out
        assert "61 token bits" in out
