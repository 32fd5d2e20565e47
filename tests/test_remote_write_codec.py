"""Tests for the remote write wire codec."""

import struct

import pytest
from continuoustest.core.errors import SerializationError
from continuoustest.remote_write import (
    Label,
    Sample,
    TimeSeries,
    compress,
    decode_write_request,
    decompress,
    encode_write_request,
    make_series,
)
from continuoustest.remote_write.codec import encode_label, encode_sample, encode_varint


class TestVarint:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (0, b"\x00"),
            (1, b"\x01"),
            (127, b"\x7f"),
            (128, b"\x80\x01"),
            (300, b"\xac\x02"),
        ],
    )
    def test_encode_varint(self, value, expected):
        assert encode_varint(value) == expected

    def test_negative_uses_ten_bytes(self):
        assert encode_varint(-1) == b"\xff" * 9 + b"\x01"


class TestEncode:
    def test_encode_label(self):
        assert encode_label(Label("a", "b")) == b"\x0a\x01a\x12\x01b"

    def test_encode_sample(self):
        encoded = encode_sample(Sample(timestamp_ms=1, value=2.5))
        assert encoded == b"\x09" + struct.pack("<d", 2.5) + b"\x10\x01"

    def test_write_request_wraps_each_series(self):
        series = TimeSeries(labels=(Label("a", "b"),), samples=())

        encoded = encode_write_request([series, series])

        # 8-byte series message holding one 6-byte label message
        single = b"\x0a\x08\x0a\x06\x0a\x01a\x12\x01b"
        assert encoded == single + single

    def test_empty_request(self):
        assert encode_write_request([]) == b""

    @pytest.mark.parametrize(
        "series",
        [
            TimeSeries(labels=(Label("__name__", None),), samples=()),
            TimeSeries(labels=(Label("__name__", "\ud800"),), samples=()),
            TimeSeries(labels=(), samples=(Sample(1.5, 1.0),)),
            TimeSeries(labels=(), samples=(Sample(1, "not-a-number"),)),
        ],
    )
    def test_unencodable_series_raise_serialization_error(self, series):
        with pytest.raises(SerializationError) as exc_info:
            encode_write_request([series])

        assert exc_info.value.status_code == 0


class TestDecode:
    def test_decodes_what_was_encoded(self):
        series = [
            make_series("up", 1.0, {"job": "mimir", "instance": "a:9090"}, timestamp_ms=1_700_000_000_000),
            TimeSeries(
                labels=(Label("__name__", "temperature"),),
                samples=(Sample(-5000, -273.15), Sample(0, float("inf"))),
            ),
        ]

        assert decode_write_request(encode_write_request(series)) == series

    def test_skips_unknown_fields(self):
        series = make_series("up", 1.0, timestamp_ms=1000)
        # field 3 (metadata) is not part of the series payload
        unknown = b"\x1a\x02\x08\x01"

        decoded = decode_write_request(unknown + encode_write_request([series]))

        assert decoded == [series]

    def test_truncated_payload(self):
        encoded = encode_write_request([make_series("up", 1.0, timestamp_ms=1000)])

        with pytest.raises(SerializationError):
            decode_write_request(encoded[:-3])


class TestCompression:
    def test_snappy_block_compression(self):
        data = encode_write_request([make_series("up", 1.0, timestamp_ms=1000)] * 50)

        compressed = compress(data)

        assert len(compressed) < len(data)
        assert decompress(compressed) == data


class TestModels:
    def test_make_series_sorts_labels(self):
        series = make_series("up", 1.0, {"zone": "b", "job": "api"}, timestamp_ms=42)

        assert series.labels == (
            Label("__name__", "up"),
            Label("job", "api"),
            Label("zone", "b"),
        )
        assert series.samples == (Sample(42, 1.0),)
        assert series.metric_name == "up"
        assert series.label_dict() == {"__name__": "up", "job": "api", "zone": "b"}

    def test_make_series_defaults_to_now(self):
        series = make_series("up", 1.0)

        assert series.samples[0].timestamp_ms > 1_600_000_000_000

    def test_metric_name_missing(self):
        assert TimeSeries(labels=(Label("job", "api"),), samples=()).metric_name is None
