"""Range query result model and response decoding."""

from continuoustest.query.models import Matrix, SamplePair, SampleStream, ValueType
from continuoustest.query.parser import to_matrix, unwrap_envelope

__all__ = [
    "Matrix",
    "SamplePair",
    "SampleStream",
    "ValueType",
    "to_matrix",
    "unwrap_envelope",
]
