from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .document import Document
from .errors import InvalidOrdinalError, UnknownChangeError

NotetypeId = int


class Template(Document):
    """One card template: {"name", "ord", "qfmt", "afmt", ...}."""

    @property
    def name(self) -> str | None:
        return self.get_str_or_none("name")


class Notetype(Document):
    """
    A note type definition as stored in the collection. Templates are kept
    as Template instances so that identity checks on them work.
    """

    def __init__(self, initial: dict | None = None):
        super().__init__(initial)
        self._d["tmpls"] = [
            t if isinstance(t, Template) else Template(t)
            for t in self._d.get("tmpls") or []
        ]
        self._d.setdefault("flds", [])

    @property
    def id(self) -> NotetypeId:
        return int(self._d["id"])

    @property
    def name(self) -> str | None:
        return self.get_str_or_none("name")

    @property
    def mod(self) -> int:
        return int(self._d.get("mod") or 0)

    @property
    def tmpls(self) -> list[Template]:
        return self._d["tmpls"]

    @property
    def flds(self) -> list[dict[str, Any]]:
        return self._d["flds"]


class ChangeType(Enum):
    ADD = "add"
    DELETE = "delete"


@dataclass(frozen=True)
class TemplateChange:
    ordinal: int  # index into the new (ADD) or old (DELETE) template list
    kind: ChangeType

    @classmethod
    def parse(cls, value: Any) -> TemplateChange:
        """Build from an ``[ordinal, "add"|"delete"]`` pair as found in files."""
        ordinal, kind = value
        if isinstance(kind, str):
            try:
                kind = ChangeType(kind.lower())
            except ValueError:
                raise UnknownChangeError(kind) from None
        return cls(ordinal=_parse_ordinal(ordinal), kind=kind)

    def to_pair(self) -> list[Any]:
        return [self.ordinal, self.kind.value]


def _parse_ordinal(value: Any) -> int:
    # bool is an int subclass; floats would truncate
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        return int(value)
    raise InvalidOrdinalError(value)


class OrdinalMode(Enum):
    """
    How DELETE ordinals are read against the old note type.

    LIVE re-reads the old template list before every change, so earlier
    changes in the batch shift later ordinals. SNAPSHOT resolves every
    ordinal against the list as it was before the batch started.
    """

    LIVE = "live"
    SNAPSHOT = "snapshot"
