import datetime

import pandas as pd

from ammstats.timebucket import TimeBucket


def test_floor_datetime():
    ts = datetime.datetime(2021, 6, 1, 12, 34, 56)
    assert TimeBucket.m5.floor_datetime(ts) == datetime.datetime(2021, 6, 1, 12, 30)
    assert TimeBucket.m15.floor_datetime(ts) == datetime.datetime(2021, 6, 1, 12, 30)
    assert TimeBucket.h1.floor_datetime(ts) == datetime.datetime(2021, 6, 1, 12, 0)
    assert TimeBucket.h4.floor_datetime(ts) == datetime.datetime(2021, 6, 1, 12, 0)
    assert TimeBucket.d1.floor_datetime(ts) == datetime.datetime(2021, 6, 1)


def test_floor_timezone_aware():
    """Aware timestamps become naive UTC."""
    tz = datetime.timezone(datetime.timedelta(hours=3))
    ts = datetime.datetime(2021, 6, 1, 15, 34, 56, tzinfo=tz)
    floored = TimeBucket.h1.floor_datetime(ts)
    assert floored == datetime.datetime(2021, 6, 1, 12, 0)
    assert floored.tzinfo is None


def test_floor_pandas():
    assert TimeBucket.h4.floor(pd.Timestamp("2021-06-01 03:59:59")) == pd.Timestamp("2021-06-01 00:00")


def test_compare():
    assert TimeBucket.m5 < TimeBucket.h1
    assert TimeBucket.h1.to_timedelta() == datetime.timedelta(hours=1)
    assert max(TimeBucket.h4, TimeBucket.d1, TimeBucket.m15) == TimeBucket.d1
