"""Shared fixtures: an in-memory collection and note type builders."""

import copy

import pytest

from deckhand.core.model import Notetype, Template


def make_notetype(id=1, mod=100, names=("Card 1", "Card 2")) -> Notetype:
    return Notetype({
        "id": id,
        "name": "Basic",
        "mod": mod,
        "usn": 0,
        "flds": [{"name": "Front", "ord": 0}, {"name": "Back", "ord": 1}],
        "tmpls": [
            {"name": n, "ord": i, "qfmt": "{{Front}}", "afmt": "{{Back}}"}
            for i, n in enumerate(names)
        ],
    })


class FakeCollection:
    """Records every call; keeps stored note types as deep copies."""

    def __init__(self, *notetypes: Notetype):
        self.stored = {nt.id: copy.deepcopy(nt) for nt in notetypes}
        self.calls: list[tuple] = []
        self.media = set()
        self.old: Notetype | None = None

    def get_notetype_by_id(self, id):
        self.calls.append(("get", id))
        nt = self.stored.get(id)
        self.old = copy.deepcopy(nt) if nt is not None else None
        return self.old

    def add_template(self, notetype, template):
        self.calls.append(("add", template.name))
        notetype.tmpls.append(Template(template.to_dict()))

    def remove_template(self, notetype, template):
        self.calls.append(("remove", template.name))
        notetype.tmpls.remove(template)

    def save_notetype(self, notetype):
        self.calls.append(("save", notetype.id))
        self.stored[notetype.id] = copy.deepcopy(notetype)

    def update_notetype(self, notetype):
        self.calls.append(("update", notetype.id))

    def remove_media_files(self, names):
        self.calls.append(("remove_media", list(names)))
        self.media.difference_update(names)

    def list_media(self):
        return sorted(self.media)


@pytest.fixture
def fake_col():
    return FakeCollection(make_notetype())
