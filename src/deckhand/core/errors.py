"""Exceptions raised by deckhand operations and stores."""


class DeckhandError(Exception):
    """Base class for all deckhand errors."""


class PreconditionError(DeckhandError):
    """
    A caller handed an operation something it cannot act on.

    These abort the whole operation; nothing is retried and changes already
    handed to the store are not rolled back.
    """


class NotetypeNotFoundError(PreconditionError, LookupError):
    def __init__(self, notetype_id: int):
        super().__init__(f"Note type {notetype_id} not found")
        self.notetype_id = notetype_id


class TemplateOrdinalError(PreconditionError, IndexError):
    def __init__(self, ordinal: int, count: int, which: str):
        super().__init__(
            f"Template ordinal {ordinal} out of range for {which} note type "
            f"({count} templates)"
        )
        self.ordinal = ordinal
        self.count = count
        self.which = which


class UnknownChangeError(PreconditionError, ValueError):
    def __init__(self, kind: object):
        super().__init__(f"Unknown template change kind: {kind!r}")
        self.kind = kind


class InvalidOrdinalError(PreconditionError, ValueError):
    def __init__(self, ordinal: object):
        super().__init__(f"Template ordinal must be a whole number, got {ordinal!r}")
        self.ordinal = ordinal


# Store-level errors


class ModTimeError(DeckhandError):
    """Raised when a save would move a note type's modification time backwards."""

    def __init__(self, notetype_id: int, stored: int, given: int):
        super().__init__(
            f"Note type {notetype_id}: modification time {given} is older than "
            f"stored {stored}"
        )
        self.notetype_id = notetype_id
        self.stored = stored
        self.given = given


class DuplicateTemplateError(DeckhandError, ValueError):
    pass


class LastTemplateError(DeckhandError, ValueError):
    pass


class TemplateNotFoundError(DeckhandError, LookupError):
    pass
