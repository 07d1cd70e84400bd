"""Tests for note type YAML files."""

import pytest

from deckhand.adapters.yaml_codec import NotetypeFileCodec
from deckhand.core.errors import UnknownChangeError
from deckhand.core.model import ChangeType, TemplateChange

from conftest import make_notetype


def test_decode_notetype_and_changes():
    """A file yields the note type and its ordered changes."""
    text = """
notetype:
  id: 1
  name: Basic
  mod: 100
  tmpls:
    - name: Card 1
      qfmt: "{{Front}}"
      afmt: "{{Back}}"
changes:
  - [0, add]
  - [1, delete]
"""
    notetype, changes = NotetypeFileCodec().decode(text)

    assert notetype.id == 1
    assert notetype.tmpls[0].name == "Card 1"
    assert changes == [
        TemplateChange(0, ChangeType.ADD),
        TemplateChange(1, ChangeType.DELETE),
    ]


def test_encode_decode_keeps_changes():
    """Encoded files decode back to the same definition."""
    codec = NotetypeFileCodec()
    nt = make_notetype()

    notetype, changes = codec.decode(codec.encode(nt, [TemplateChange(1, ChangeType.ADD)]))

    assert notetype.to_dict() == nt.to_dict()
    assert changes == [TemplateChange(1, ChangeType.ADD)]


def test_encode_without_changes_omits_key():
    """Exports without changes have no 'changes' key."""
    assert "changes" not in NotetypeFileCodec().encode(make_notetype())


@pytest.mark.parametrize(
    "text",
    [
        "",
        "- just a list",
        "notetype: 3",
        "notetype: [unclosed",
        "notetype: {name: Basic}",
        "notetype: {id: true}",
        "notetype: {id: '1'}",
    ],
)
def test_decode_rejects_bad_files(text):
    """Files without a note type mapping or an integer id are rejected."""
    with pytest.raises(ValueError):
        NotetypeFileCodec().decode(text)


def test_decode_unknown_change_kind():
    """An unknown change kind is reported as such."""
    with pytest.raises(UnknownChangeError):
        NotetypeFileCodec().decode("notetype: {id: 1}\nchanges: [[0, rename]]\n")


def test_decode_without_id_when_allowed():
    """New note types may omit the id."""
    notetype, changes = NotetypeFileCodec().decode(
        "notetype: {name: Basic, tmpls: [{name: Card 1}]}\n", require_id=False
    )

    assert "id" not in notetype
    assert changes == []
