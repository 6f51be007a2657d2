"""Time window presentation for samples and volume buckets."""
import datetime
import enum

import pandas as pd
from pandas.tseries.frequencies import to_offset


class TimeBucket(enum.Enum):
    """Supported sampling windows for liquidity samples and volume buckets.

    The collection process writes one record per time bucket.
    The record timestamp is the opening time of the bucket.

    All time windows are in UTC, and timestamps are naive.

    Python labels are reserved from the actual values, because Python symbol cannot start with a number.
    """

    #: Five minute buckets
    m5 = "5m"

    #: Quarter buckets
    m15 = "15m"

    #: Hourly buckets
    h1 = "1h"

    #: Four hour buckets
    h4 = "4h"

    #: Daily buckets
    d1 = "1d"

    def to_timedelta(self) -> datetime.timedelta:
        """Get delta object for a TimeBucket definition."""
        return _DELTAS[self]

    def to_frequency(self) -> pd.DateOffset:
        """Get frequency input for Pandas fuctions."""
        return to_offset(self.to_timedelta())

    def floor(self, timestamp: pd.Timestamp) -> pd.Timestamp:
        """Floor the timestamp to the opening of its bucket."""
        return timestamp.floor(self.to_frequency())

    def floor_datetime(self, timestamp: datetime.datetime) -> datetime.datetime:
        """Floor the time bucket to the nearest value.

        - See :py:meth:`floor` for details.

        - Timezone aware datetimes are converted to naive UTC first
        """
        if timestamp.tzinfo is not None:
            timestamp = timestamp.astimezone(datetime.timezone.utc).replace(tzinfo=None)
        return self.floor(pd.Timestamp(timestamp)).to_pydatetime()

    def __lt__(self, other: "TimeBucket") -> bool:
        """Compare two time buckets."""
        return self.to_timedelta() < other.to_timedelta()


# datetime.timedelta equivalents of different time buckets
_DELTAS = {
    TimeBucket.m5: datetime.timedelta(minutes=5),
    TimeBucket.m15: datetime.timedelta(minutes=15),
    TimeBucket.h1: datetime.timedelta(hours=1),
    TimeBucket.h4: datetime.timedelta(hours=4),
    TimeBucket.d1: datetime.timedelta(days=1),
}
