"""Helpers to timestamp format and value conformity.

- We are operating on naive Python datetimes, all in UTC timezone

"""
import calendar
import datetime

from ammstats.types import UNIXTimestamp


def to_int_unix_timestamp(dt: datetime.datetime) -> UNIXTimestamp:
    """Get datetime as UTC seconds since epoch.

    Used in storage keys of time bucketed records.
    """
    # https://stackoverflow.com/a/5499906/315168
    return int(calendar.timegm(dt.utctimetuple()))
