"""
Decoding of Prometheus query API responses.

The API wraps every result in an envelope::

    {"status": "success", "data": {"resultType": "matrix", "result": [...]}, "warnings": [...]}
    {"status": "error", "errorType": "bad_data", "error": "..."}

Only the matrix shape is accepted for range queries. Anything else is
reported as a ShapeError rather than coerced.
"""

from __future__ import annotations

from typing import Any

from continuoustest.core.errors import QueryError, ShapeError
from continuoustest.query.models import Matrix, SamplePair, SampleStream, ValueType


def unwrap_envelope(payload: Any, status_code: int) -> tuple[dict[str, Any], list[str]]:
    """
    Return the ``data`` object and any warnings from an API response.

    Args:
        payload: Decoded JSON body
        status_code: HTTP status of the response

    Returns:
        Tuple of (data, warnings)

    Raises:
        QueryError: If the API reported an error
        ShapeError: If the envelope itself is malformed
    """
    if not isinstance(payload, dict):
        raise ShapeError("query response is not a JSON object")

    status = payload.get("status")
    if status == "error":
        error_type = str(payload.get("errorType") or "unknown")
        message = str(payload.get("error") or "unknown error")
        raise QueryError(
            f"{error_type}: {message}",
            error_type=error_type,
            status_code=status_code,
        )
    if status != "success":
        raise ShapeError(f"unexpected query response status {status!r}")

    data = payload.get("data")
    if not isinstance(data, dict):
        raise ShapeError("query response has no data object")

    # Some servers send null for an empty warnings list.
    warnings = payload.get("warnings")
    if warnings is None:
        warnings = []
    if not isinstance(warnings, list) or not all(isinstance(w, str) for w in warnings):
        raise ShapeError("query response warnings is not a list of strings")
    return data, warnings


def to_matrix(data: dict[str, Any]) -> Matrix:
    """Narrow a query ``data`` object to a Matrix.

    Raises:
        ShapeError: If the declared type is not matrix, or the result does
            not match the matrix representation
    """
    result_type = data.get("resultType")
    if result_type != ValueType.MATRIX.value:
        raise ShapeError(
            "was expecting to get a Matrix",
            details={"result_type": result_type},
        )

    try:
        result = data["result"]
        if not isinstance(result, list):
            raise TypeError("result is not a list")
        return [_to_sample_stream(item) for item in result]
    except (TypeError, ValueError, KeyError, AttributeError) as exc:
        raise ShapeError(f"failed to cast type to Matrix: {exc}") from exc


def _to_sample_stream(item: dict[str, Any]) -> SampleStream:
    metric = item["metric"]
    if not isinstance(metric, dict):
        raise TypeError("series metric is not an object")
    for name, value in metric.items():
        if not isinstance(value, str):
            raise TypeError(f"label {name!r} value must be a string, got {type(value).__name__}")
    values = item["values"]
    if not isinstance(values, list):
        raise TypeError("series values is not a list")
    return SampleStream(
        metric=dict(metric),
        values=[_to_sample_pair(pair) for pair in values],
    )


def _to_sample_pair(pair: list[Any]) -> SamplePair:
    timestamp, value = pair
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        raise TypeError(f"sample timestamp must be a number, got {type(timestamp).__name__}")
    # Values are transmitted as strings, including "NaN" and "+Inf".
    if not isinstance(value, str):
        raise TypeError(f"sample value must be a string, got {type(value).__name__}")
    return SamplePair(timestamp=float(timestamp), value=float(value))
