from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ValueType(str, Enum):
    """Result types declared by the Prometheus query API."""

    MATRIX = "matrix"
    VECTOR = "vector"
    SCALAR = "scalar"
    STRING = "string"


@dataclass(frozen=True, slots=True)
class SamplePair:
    """One (timestamp, value) point; timestamp is in unix seconds."""

    timestamp: float
    value: float


@dataclass(frozen=True, slots=True)
class SampleStream:
    """A labeled series with its values over the queried range."""

    metric: dict[str, str]
    values: list[SamplePair] = field(default_factory=list)


# A range query result: one SampleStream per matching series.
Matrix = list[SampleStream]
