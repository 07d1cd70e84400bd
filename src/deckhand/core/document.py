from typing import MutableMapping, Iterator, Any

from .utils import get_str_or_none


class Document(MutableMapping[str, Any]):
    """
    JSON-shaped record, e.g. a note type or one of its templates:
    - "name": "Basic (and reversed card)"
    - "mod": 1700000000
    - "tmpls": [{...}, {...}]
    No key is required at this level; typed accessors live on subclasses.
    """

    def __init__(self, initial: dict | None = None):
        self._d = dict(initial or {})

    # MutableMapping interface
    def __getitem__(self, k: str) -> Any:
        return self._d[k]

    def __setitem__(self, k: str, v: Any) -> None:
        self._d[k] = v

    def __delitem__(self, k: str) -> None:
        del self._d[k]

    def __iter__(self) -> Iterator[str]:
        return iter(self._d)

    def __len__(self) -> int:
        return len(self._d)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._d!r})"

    # Convenience
    def get_str_or_none(self, key: str) -> str | None:
        return get_str_or_none(self._d, key)

    def to_dict(self) -> dict[str, Any]:
        """Plain, JSON-serialisable copy (nested Documents included)."""
        return _plain(self._d)


def _plain(value: Any) -> Any:
    if isinstance(value, Document):
        value = value._d
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value
