from __future__ import annotations

# Key of the single persisted record: the most recent date released for booking.
LAST_DATE_KEY = "last"

# Body the booking site returns when a date is on sale.
OPEN_SENTINEL = '{"code":200}'


class BalikBotError(RuntimeError):
    """Base class for failures of a single check run."""


class NotFoundError(BalikBotError):
    """No last date has been stored yet.

    The table (or state file) has to be seeded once with the date the first
    check should advance from.
    """


class StorageError(BalikBotError):
    pass


class RequestError(BalikBotError):
    """Transport failure or non-200 answer from the booking site."""


class NotifyError(BalikBotError):
    pass
