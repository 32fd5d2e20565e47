from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol, Sequence

from continuoustest.query.models import Matrix
from continuoustest.remote_write.models import TimeSeries


class MimirClient(Protocol):
    """Contract for clients used to interact with Mimir."""

    async def write_series(self, series: Sequence[TimeSeries]) -> int:
        """
        Write input series to Mimir.

        Returns:
            The HTTP status code of the last request sent

        Raises:
            RequestError: If any request was not successful (eg. a 4xx or 5xx
                response); its ``status_code`` is that request's status, or 0
                when no response was received
        """
        ...

    async def query_range(
        self,
        query: str,
        start: datetime,
        end: datetime,
        step: timedelta,
    ) -> Matrix:
        """Perform a query for the given range."""
        ...
