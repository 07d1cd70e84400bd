"""Tests for the deck CLI."""

import json
import subprocess
import tempfile
from pathlib import Path

import pytest

from deckhand.adapters.sqlite_collection import SQLiteCollection

from conftest import make_notetype


@pytest.fixture
def col_dir():
    """Collection directory with one note type and a little media."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        media = root / "media"
        media.mkdir()
        (media / "used.png").write_bytes(b"x")
        (media / "old.mp3").write_bytes(b"x")

        col = SQLiteCollection(db_path=root / "collection.sqlite", media_dir=media)
        col.add_notetype(make_notetype(id=1, mod=100))
        col.add_note(1, ['<img src="used.png">', ""])
        col.close()

        yield root


def deck(root: Path, *args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        ["deck", "--collection", str(root), *args],
        capture_output=True,
        text=True,
        cwd=root,
    )


def test_notetype_ls_and_get(col_dir):
    """List note types and read single values."""
    result = deck(col_dir, "--json", "notetype", "ls")
    assert result.returncode == 0
    assert json.loads(result.stdout) == [{"id": 1, "name": "Basic", "templates": 2}]

    result = deck(col_dir, "notetype", "get", "1", "name")
    assert result.returncode == 0
    assert result.stdout.strip() == "Basic"

    result = deck(col_dir, "notetype", "get", "1", "tmpls")
    assert result.returncode == 1


def test_notetype_export_edit_save(col_dir):
    """Export, add a template in the file, and save it back."""
    out = col_dir / "basic.yaml"
    assert deck(col_dir, "notetype", "export", "1", "-o", str(out)).returncode == 0

    text = out.read_text()
    text += """changes:
- [1, add]
"""
    text = text.replace("  - name: Card 2", "  - name: Card 3\n    ord: 2\n    qfmt: '{{Back}}'\n    afmt: '{{Front}}'\n  - name: Card 2", 1)
    out.write_text(text)

    result = deck(col_dir, "notetype", "save", str(out))
    assert result.returncode == 0, result.stderr

    shown = json.loads(deck(col_dir, "notetype", "show", "1").stdout)
    assert [t["name"] for t in shown["tmpls"]] == ["Card 1", "Card 3", "Card 2"]
    assert shown["mod"] == 100


def test_notetype_save_bad_ordinal(col_dir):
    """A bad ordinal fails the command and changes nothing."""
    nt_file = col_dir / "nt.yaml"
    nt_file.write_text("""notetype:
  id: 1
  name: Basic
  tmpls:
  - name: Card 1
changes:
- [4, delete]
""")

    result = deck(col_dir, "notetype", "save", str(nt_file))

    assert result.returncode == 1
    assert "Error:" in result.stderr
    shown = json.loads(deck(col_dir, "notetype", "show", "1").stdout)
    assert len(shown["tmpls"]) == 2


def test_media_check_and_delete(col_dir):
    """media check --delete removes only unused files."""
    result = deck(col_dir, "--json", "media", "check")
    assert result.returncode == 0
    assert json.loads(result.stdout)["unused"] == ["old.mp3"]

    assert deck(col_dir, "media", "check", "--delete").returncode == 1

    result = deck(col_dir, "-q", "media", "check", "--delete", "--yes")
    assert result.returncode == 0
    assert sorted(p.name for p in (col_dir / "media").iterdir()) == ["used.png"]


def test_media_rm(col_dir):
    """media rm reports the requested count."""
    result = deck(col_dir, "media", "rm", "used.png", "nothing.png", "--yes")

    assert result.returncode == 0
    assert "2 file(s)" in result.stdout
    assert not (col_dir / "media" / "used.png").exists()


@pytest.mark.parametrize("id_line", ["", "  id: basic\n", "  id: 1.5\n"])
def test_notetype_save_requires_integer_id(col_dir, id_line):
    """A file without a usable id is reported as an error, not a traceback."""
    nt_file = col_dir / "nt.yaml"
    nt_file.write_text(f"""notetype:
{id_line}  name: Basic
  tmpls:
  - name: Card 1
""")

    result = deck(col_dir, "notetype", "save", str(nt_file))

    assert result.returncode == 1
    assert result.stderr.startswith("Error:")
    assert "Traceback" not in result.stderr


def test_notetype_import_assigns_id(col_dir):
    """Importing a file without an id creates a new note type."""
    nt_file = col_dir / "new.yaml"
    nt_file.write_text("""notetype:
  name: Cloze
  tmpls:
  - name: Cloze
    qfmt: '{{cloze:Text}}'
    afmt: '{{cloze:Text}}'
""")

    result = deck(col_dir, "-q", "notetype", "import", str(nt_file))

    assert result.returncode == 0, result.stderr
    listing = json.loads(deck(col_dir, "--json", "notetype", "ls").stdout)
    assert sorted(nt["name"] for nt in listing) == ["Basic", "Cloze"]
