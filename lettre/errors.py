"""Exceptions raised by the navigation and message-state engine.

Empty results (no folders, no messages, a search without a match) are not
errors and are returned as empty lists, ``None`` or ``False`` instead.
"""


class LettreError(Exception):
    """Base class for all lettre errors."""

    pass


class InvalidInputError(LettreError, ValueError):
    """A required argument is missing or a value is out of its domain.

    Raised before any state is mutated.
    """

    pass


class NoMessageError(LettreError):
    """An operation on "the current message" found no messages selected."""

    pass


class MaildirError(LettreError):
    """A filesystem operation on a Maildir failed.

    The underlying ``OSError`` is chained as ``__cause__``. In-memory state
    is left at its last known good value and nothing is retried.
    """

    pass
