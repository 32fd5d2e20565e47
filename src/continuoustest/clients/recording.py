from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Sequence

from continuoustest.query.models import Matrix
from continuoustest.remote_write.models import TimeSeries


@dataclass(frozen=True, slots=True)
class QueryRangeCall:
    query: str
    start: datetime
    end: datetime
    step: timedelta


@dataclass
class RecordingMimirClient:
    """In-memory MimirClient that records calls without network I/O.

    Set ``write_error`` or ``query_error`` to make the next calls raise.
    """

    status_code: int = 200
    matrix: Matrix = field(default_factory=list)
    write_error: Exception | None = None
    query_error: Exception | None = None
    writes: list[list[TimeSeries]] = field(default_factory=list)
    queries: list[QueryRangeCall] = field(default_factory=list)

    async def write_series(self, series: Sequence[TimeSeries]) -> int:
        self.writes.append(list(series))
        if self.write_error is not None:
            raise self.write_error
        return self.status_code if series else 0

    async def query_range(
        self,
        query: str,
        start: datetime,
        end: datetime,
        step: timedelta,
    ) -> Matrix:
        self.queries.append(QueryRangeCall(query, start, end, step))
        if self.query_error is not None:
            raise self.query_error
        return list(self.matrix)

    @property
    def written_series(self) -> list[TimeSeries]:
        """All series written so far, flattened in call order."""
        return [ts for call in self.writes for ts in call]

    def reset(self) -> None:
        self.writes.clear()
        self.queries.clear()
