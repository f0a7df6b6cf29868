"""Small helpers with no internal dependencies.
"""
import datetime

DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def format_date(when: datetime.datetime | None = None) -> str:
    """Format a timestamp as `YYYY-MM-DD HH:MM:SS` in UTC.

    Naive datetimes are taken to already be in UTC; aware datetimes are
    converted. Without an argument the current UTC time is used.

    >>> format_date(datetime.datetime(2024, 1, 2, 3, 4, 5))
    '2024-01-02 03:04:05'
    """
    if when is None:
        when = datetime.datetime.now(datetime.timezone.utc)
    elif when.tzinfo is not None:
        when = when.astimezone(datetime.timezone.utc)
    return when.strftime(DATE_FORMAT)
