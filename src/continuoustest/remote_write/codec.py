"""
Prometheus remote write wire format.

Encodes and decodes the ``prometheus.WriteRequest`` protobuf message
directly, without a protobuf runtime dependency, and applies the Snappy
block compression the push endpoint requires.

Message layout:
    WriteRequest  { repeated TimeSeries timeseries = 1; }
    TimeSeries    { repeated Label labels = 1; repeated Sample samples = 2; }
    Label         { string name = 1; string value = 2; }
    Sample        { double value = 1; int64 timestamp = 2; }
"""

from __future__ import annotations

import struct
from typing import Iterator, Sequence

import snappy

from continuoustest.core.errors import SerializationError
from continuoustest.remote_write.models import Label, Sample, TimeSeries

CONTENT_TYPE = "application/x-protobuf"
CONTENT_ENCODING = "snappy"
REMOTE_WRITE_VERSION = "0.1.0"

WIRE_VARINT = 0
WIRE_FIXED64 = 1
WIRE_LENGTH_DELIMITED = 2
WIRE_FIXED32 = 5

_UINT64_MASK = (1 << 64) - 1


def encode_varint(value: int) -> bytes:
    """Encode an integer as a protobuf varint (negative values as 64-bit two's complement)."""
    value &= _UINT64_MASK
    parts = bytearray()
    while value > 127:
        parts.append((value & 0x7F) | 0x80)
        value >>= 7
    parts.append(value)
    return bytes(parts)


def _tag(field_num: int, wire_type: int) -> bytes:
    return encode_varint(field_num << 3 | wire_type)


def _length_delimited(field_num: int, payload: bytes) -> bytes:
    return _tag(field_num, WIRE_LENGTH_DELIMITED) + encode_varint(len(payload)) + payload


def encode_string(field_num: int, s: str) -> bytes:
    """Encode a string field in protobuf format."""
    if not isinstance(s, str):
        raise TypeError(f"expected str for field {field_num}, got {type(s).__name__}")
    return _length_delimited(field_num, s.encode("utf-8"))


def encode_label(label: Label) -> bytes:
    """Encode a Label message."""
    return encode_string(1, label.name) + encode_string(2, label.value)


def encode_sample(sample: Sample) -> bytes:
    """Encode a Sample message."""
    if isinstance(sample.timestamp_ms, bool) or not isinstance(sample.timestamp_ms, int):
        raise TypeError(f"sample timestamp must be an int, got {type(sample.timestamp_ms).__name__}")
    value_bytes = _tag(1, WIRE_FIXED64) + struct.pack("<d", sample.value)
    ts_bytes = _tag(2, WIRE_VARINT) + encode_varint(sample.timestamp_ms)
    return value_bytes + ts_bytes


def encode_timeseries(ts: TimeSeries) -> bytes:
    """Encode a TimeSeries message."""
    result = bytearray()
    for label in ts.labels:
        result += _length_delimited(1, encode_label(label))
    for sample in ts.samples:
        result += _length_delimited(2, encode_sample(sample))
    return bytes(result)


def encode_write_request(timeseries_list: Sequence[TimeSeries]) -> bytes:
    """Encode a WriteRequest message.

    Raises:
        SerializationError: If any series holds a value that cannot be encoded
    """
    result = bytearray()
    try:
        for ts in timeseries_list:
            result += _length_delimited(1, encode_timeseries(ts))
    except (TypeError, ValueError, AttributeError, struct.error) as exc:
        raise SerializationError(f"failed to encode write request: {exc}") from exc
    return bytes(result)


def compress(data: bytes) -> bytes:
    """Snappy block-compress a serialized write request."""
    return snappy.compress(data)


def decompress(data: bytes) -> bytes:
    return snappy.decompress(data)


# Decoding


def _read_varint(buf: bytes, pos: int) -> tuple[int, int]:
    result = 0
    shift = 0
    while True:
        if pos >= len(buf):
            raise ValueError("truncated varint")
        byte = buf[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result, pos
        shift += 7
        if shift >= 70:
            raise ValueError("varint too long")


def _iter_fields(buf: bytes) -> Iterator[tuple[int, int, int | bytes]]:
    """Yield (field number, wire type, raw value) for each field in a message."""
    pos = 0
    while pos < len(buf):
        key, pos = _read_varint(buf, pos)
        field_num, wire_type = key >> 3, key & 0x07
        if wire_type == WIRE_VARINT:
            value, pos = _read_varint(buf, pos)
            yield field_num, wire_type, value
        elif wire_type == WIRE_FIXED64:
            if pos + 8 > len(buf):
                raise ValueError("truncated fixed64 field")
            yield field_num, wire_type, buf[pos : pos + 8]
            pos += 8
        elif wire_type == WIRE_LENGTH_DELIMITED:
            length, pos = _read_varint(buf, pos)
            if pos + length > len(buf):
                raise ValueError("truncated length-delimited field")
            yield field_num, wire_type, buf[pos : pos + length]
            pos += length
        elif wire_type == WIRE_FIXED32:
            if pos + 4 > len(buf):
                raise ValueError("truncated fixed32 field")
            yield field_num, wire_type, buf[pos : pos + 4]
            pos += 4
        else:
            raise ValueError(f"unsupported wire type {wire_type}")


def _decode_label(buf: bytes) -> Label:
    name, value = "", ""
    for field_num, wire_type, raw in _iter_fields(buf):
        if wire_type != WIRE_LENGTH_DELIMITED:
            continue
        if field_num == 1:
            name = raw.decode("utf-8")  # type: ignore[union-attr]
        elif field_num == 2:
            value = raw.decode("utf-8")  # type: ignore[union-attr]
    return Label(name, value)


def _decode_sample(buf: bytes) -> Sample:
    value, timestamp = 0.0, 0
    for field_num, wire_type, raw in _iter_fields(buf):
        if field_num == 1 and wire_type == WIRE_FIXED64:
            (value,) = struct.unpack("<d", raw)
        elif field_num == 2 and wire_type == WIRE_VARINT:
            timestamp = raw  # type: ignore[assignment]
            if timestamp >= 1 << 63:
                timestamp -= 1 << 64
    return Sample(timestamp, value)


def _decode_timeseries(buf: bytes) -> TimeSeries:
    labels: list[Label] = []
    samples: list[Sample] = []
    for field_num, wire_type, raw in _iter_fields(buf):
        if wire_type != WIRE_LENGTH_DELIMITED:
            continue
        if field_num == 1:
            labels.append(_decode_label(raw))  # type: ignore[arg-type]
        elif field_num == 2:
            samples.append(_decode_sample(raw))  # type: ignore[arg-type]
    return TimeSeries(labels=tuple(labels), samples=tuple(samples))


def decode_write_request(data: bytes) -> list[TimeSeries]:
    """Decode an uncompressed WriteRequest message.

    Unknown fields (metadata, exemplars, histograms) are skipped.

    Raises:
        SerializationError: If the payload is not a valid WriteRequest
    """
    try:
        return [
            _decode_timeseries(raw)  # type: ignore[arg-type]
            for field_num, wire_type, raw in _iter_fields(data)
            if field_num == 1 and wire_type == WIRE_LENGTH_DELIMITED
        ]
    except (ValueError, struct.error) as exc:
        raise SerializationError(f"failed to decode write request: {exc}") from exc
