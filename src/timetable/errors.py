"""Error hierarchy for timetable refresh failure classification.

Transient failures may succeed on the next scheduled refresh cycle; permanent
failures will not go away until the input or the calling code changes.
Nothing in the refresh path retries immediately.

Example usage:
    try:
        schedule = parse_schedule(html)
    except MalformedDocumentError:
        # Don't cache a partial result
        ...
"""


class TimetableError(Exception):
    """Base exception for all timetable errors."""

    pass


class TransientError(TimetableError):
    """Temporary failure that may succeed on the next refresh cycle.

    Examples: network timeouts, 503 Service Unavailable, locked database.
    """

    pass


class UpstreamUnavailableError(TransientError):
    """Fetching the raw schedule document failed.

    Covers connection errors, timeouts and non-success HTTP statuses. The
    previously cached snapshot for the group stays valid.
    """

    pass


class CacheUnavailableError(TransientError):
    """Snapshot cache storage or (de)serialization failure."""

    pass


class PermanentError(TimetableError):
    """Failure that won't succeed on retry.

    Examples: malformed document markup, invalid caller arguments.
    """

    pass


class MalformedDocumentError(PermanentError):
    """A day-header cell carries a label outside the weekday table.

    The whole document is unusable; callers must not cache a partial result.
    """

    pass


class OutOfRangeDayIndexError(PermanentError, ValueError):
    """Day index (or the following day) falls outside the 7-day week."""

    pass
