"""Common utilities and exception classes."""


class HeatscoreError(Exception):
    """Base exception for heatscore."""


class InputError(HeatscoreError):
    """Invalid bout input supplied by the caller."""


class RankParseError(InputError):
    """Rank label that does not resolve to a known rank."""


class DayParseError(InputError):
    """Day label that does not resolve to a tournament day."""


class FetchError(HeatscoreError):
    """HTTP fetch failure after retries."""
