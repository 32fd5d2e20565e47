"""Prometheus remote write data model and wire codec."""

from continuoustest.remote_write.codec import (
    CONTENT_ENCODING,
    CONTENT_TYPE,
    REMOTE_WRITE_VERSION,
    compress,
    decode_write_request,
    decompress,
    encode_write_request,
)
from continuoustest.remote_write.models import Label, Sample, TimeSeries, make_series

__all__ = [
    "Label",
    "Sample",
    "TimeSeries",
    "make_series",
    "encode_write_request",
    "decode_write_request",
    "compress",
    "decompress",
    "CONTENT_TYPE",
    "CONTENT_ENCODING",
    "REMOTE_WRITE_VERSION",
]
