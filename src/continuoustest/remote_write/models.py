"""
Series data model for the remote write path.

Instances are immutable and owned by the caller; the client only reads them
for the duration of the call that submits them.
"""

from __future__ import annotations

import time
from typing import Mapping, NamedTuple

METRIC_NAME_LABEL = "__name__"


class Label(NamedTuple):
    name: str
    value: str


class Sample(NamedTuple):
    timestamp_ms: int
    value: float


class TimeSeries(NamedTuple):
    """A label set with its ordered samples."""

    labels: tuple[Label, ...]
    samples: tuple[Sample, ...]

    @property
    def metric_name(self) -> str | None:
        for label in self.labels:
            if label.name == METRIC_NAME_LABEL:
                return label.value
        return None

    def label_dict(self) -> dict[str, str]:
        return {label.name: label.value for label in self.labels}


def make_series(
    name: str,
    value: float,
    labels: Mapping[str, str] | None = None,
    timestamp_ms: int | None = None,
) -> TimeSeries:
    """Create a TimeSeries with a single sample (defaults to the current time)."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    all_labels = [Label(METRIC_NAME_LABEL, name)]
    if labels:
        all_labels.extend(Label(k, v) for k, v in sorted(labels.items()))
    return TimeSeries(labels=tuple(all_labels), samples=(Sample(timestamp_ms, value),))
