"""deckhand: note type and media maintenance for spaced-repetition collections."""

__version__ = "0.1.0"
