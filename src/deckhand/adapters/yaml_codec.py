import io
import yaml
from typing import Any

from ..core.model import Notetype, TemplateChange


class NotetypeFileCodec:
    """
    YAML files holding an edited note type plus the template changes that
    produced it:

        notetype:
          id: 1700000000000
          name: Basic
          tmpls: [...]
        changes:
          - [1, add]
          - [0, delete]
    """

    def decode(
        self, text: str, require_id: bool = True
    ) -> tuple[Notetype, list[TemplateChange]]:
        try:
            data = yaml.safe_load(io.StringIO(text)) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid note type file: {e}") from e
        if not isinstance(data, dict) or not isinstance(data.get("notetype"), dict):
            raise ValueError("Expected a mapping with a 'notetype' key")
        nt_id = data["notetype"].get("id")
        missing_ok = nt_id is None and not require_id
        if not missing_ok and (isinstance(nt_id, bool) or not isinstance(nt_id, int)):
            raise ValueError(f"Note type file needs an integer 'id', got {nt_id!r}")
        notetype = Notetype(data["notetype"])
        changes = [TemplateChange.parse(c) for c in data.get("changes") or []]
        return notetype, changes

    def encode(self, notetype: Notetype, changes: list[TemplateChange] | None = None) -> str:
        doc: dict[str, Any] = {"notetype": notetype.to_dict()}
        if changes:
            doc["changes"] = [c.to_pair() for c in changes]
        buf = io.StringIO()
        yaml.safe_dump(doc, buf, sort_keys=False, allow_unicode=True)
        return buf.getvalue()
