"""SQLite-backed collection: note types, notes and a flat media folder."""

import json
import logging
import os
import sqlite3
import time
from collections.abc import Iterable, Iterator
from pathlib import Path

from ..core.errors import (
    DuplicateTemplateError,
    LastTemplateError,
    ModTimeError,
    TemplateNotFoundError,
)
from ..core.model import Notetype, NotetypeId, Template
from ..core.ports import Collection

log = logging.getLogger(__name__)

SCHEMA_VERSION = "1"
FIELD_SEPARATOR = "\x1f"


class SQLiteCollection(Collection):
    """
    Note types live in the `notetypes` table as JSON config; media files live
    in a folder next to the database.

    save_notetype writes inside the open transaction and update_notetype
    commits it, so a failure between the two leaves nothing on disk.
    """

    def __init__(self, db_path: Path, media_dir: Path):
        self.db_path = db_path
        self.media_dir = media_dir
        self._ensure_schema()
        self._db = self._conn()

    def _conn(self) -> sqlite3.Connection:
        """Get a connection to the SQLite database."""
        conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA synchronous=NORMAL")
        conn.execute("PRAGMA foreign_keys=ON")
        return conn

    def _init_schema(self) -> None:
        """Create tables if they don't exist."""
        conn = self._conn()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS meta (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS notetypes (
                    id INTEGER PRIMARY KEY,
                    name TEXT NOT NULL,
                    mtime_secs INTEGER NOT NULL,
                    usn INTEGER NOT NULL,
                    config TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS notes (
                    id INTEGER PRIMARY KEY,
                    mid INTEGER NOT NULL,
                    mod INTEGER NOT NULL,
                    flds TEXT NOT NULL,
                    FOREIGN KEY (mid) REFERENCES notetypes(id) ON DELETE CASCADE
                )
            """)

            # Removed media, kept so a sync layer can propagate deletions
            conn.execute("""
                CREATE TABLE IF NOT EXISTS media_graves (
                    fname TEXT NOT NULL,
                    deleted_at INTEGER NOT NULL
                )
            """)

            conn.execute("CREATE INDEX IF NOT EXISTS notes_mid_idx ON notes(mid)")

            conn.execute("""
                INSERT INTO meta(key, value) VALUES('schema_version', ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value
            """, (SCHEMA_VERSION,))

            conn.commit()
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        """Ensure DB exists and schema is initialized."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        if self.db_path.exists():
            try:
                conn = self._conn()
                try:
                    conn.execute("SELECT 1").fetchone()
                finally:
                    conn.close()
            except sqlite3.DatabaseError:
                # DB is corrupt, backup and recreate
                timestamp = int(time.time())
                backup_path = self.db_path.with_suffix(f".bad-{timestamp}.sqlite")
                self.db_path.rename(backup_path)
                log.warning("Corrupt collection backed up to %s", backup_path)

        self._init_schema()

    def close(self) -> None:
        self._db.close()

    # Note types

    def _row_to_notetype(self, row: tuple) -> Notetype:
        nid, name, mtime, usn, config = row
        data = json.loads(config)
        data.update({"id": nid, "name": name, "mod": mtime, "usn": usn})
        return Notetype(data)

    def get_notetype_by_id(self, id: NotetypeId) -> Notetype | None:
        row = self._db.execute(
            "SELECT id, name, mtime_secs, usn, config FROM notetypes WHERE id = ?",
            (id,),
        ).fetchone()
        return self._row_to_notetype(row) if row else None

    def all_notetypes(self) -> list[Notetype]:
        rows = self._db.execute(
            "SELECT id, name, mtime_secs, usn, config FROM notetypes ORDER BY id"
        ).fetchall()
        return [self._row_to_notetype(r) for r in rows]

    def add_notetype(self, notetype: Notetype) -> NotetypeId:
        """Insert a brand-new note type, assigning an id if it has none."""
        if not notetype.tmpls:
            raise LastTemplateError("A note type needs at least one template")
        if "id" not in notetype or not notetype["id"]:
            notetype["id"] = int(time.time() * 1000)
        if not notetype.get("mod"):
            notetype["mod"] = int(time.time())
        _renumber(notetype)
        self._write_row(notetype, usn=-1)
        self._db.commit()
        log.info("Added note type %s (%s)", notetype.id, notetype.name)
        return notetype.id

    def add_template(self, notetype: Notetype, template: Template) -> None:
        """Append a copy of `template` to `notetype`; not durable until saved."""
        name = template.name
        if name is not None and any(t.name == name for t in notetype.tmpls):
            raise DuplicateTemplateError(
                f"Note type {notetype.id} already has a template named {name!r}"
            )
        notetype.tmpls.append(Template(template.to_dict()))
        _renumber(notetype)
        log.debug("Note type %s: added template %r", notetype.id, name)

    def remove_template(self, notetype: Notetype, template: Template) -> None:
        """Remove `template` (matched by identity, then by name) from `notetype`."""
        templates = notetype.tmpls
        index = next((i for i, t in enumerate(templates) if t is template), None)
        if index is None:
            index = next(
                (i for i, t in enumerate(templates)
                 if template.name is not None and t.name == template.name),
                None,
            )
        if index is None:
            raise TemplateNotFoundError(
                f"Note type {notetype.id} has no template {template.name!r}"
            )
        if len(templates) == 1:
            raise LastTemplateError(
                f"Note type {notetype.id}: cannot remove the last template"
            )
        del templates[index]
        _renumber(notetype)
        log.debug("Note type %s: removed template %r", notetype.id, template.name)

    def save_notetype(self, notetype: Notetype) -> None:
        """Write field and template changes; update_notetype commits them."""
        row = self._db.execute(
            "SELECT mtime_secs FROM notetypes WHERE id = ?", (notetype.id,)
        ).fetchone()
        if row is not None and notetype.mod < row[0]:
            raise ModTimeError(notetype.id, row[0], notetype.mod)
        _renumber(notetype)
        self._write_row(notetype, usn=-1)

    def update_notetype(self, notetype: Notetype) -> None:
        self._db.commit()
        notetype["usn"] = -1
        log.info("Updated note type %s (%s)", notetype.id, notetype.name)

    def _write_row(self, notetype: Notetype, usn: int) -> None:
        config = {
            k: v for k, v in notetype.to_dict().items()
            if k not in ("id", "name", "mod", "usn")
        }
        self._db.execute(
            """
            INSERT INTO notetypes(id, name, mtime_secs, usn, config)
            VALUES(?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                name=excluded.name,
                mtime_secs=excluded.mtime_secs,
                usn=excluded.usn,
                config=excluded.config
            """,
            (
                notetype.id,
                notetype.name or "",
                notetype.mod,
                usn,
                json.dumps(config, ensure_ascii=False),
            ),
        )

    # Notes

    def add_note(self, mid: NotetypeId, fields: list[str]) -> int:
        note_id = int(time.time() * 1000)
        # Keep ids unique when called in quick succession
        row = self._db.execute("SELECT MAX(id) FROM notes").fetchone()
        if row[0] is not None and row[0] >= note_id:
            note_id = row[0] + 1
        self._db.execute(
            "INSERT INTO notes(id, mid, mod, flds) VALUES(?, ?, ?, ?)",
            (note_id, mid, int(time.time()), FIELD_SEPARATOR.join(fields)),
        )
        self._db.commit()
        return note_id

    def iter_note_fields(self) -> Iterator[tuple[int, list[str]]]:
        for note_id, flds in self._db.execute("SELECT id, flds FROM notes ORDER BY id"):
            yield note_id, flds.split(FIELD_SEPARATOR)

    # Media

    def _media_path(self, name: str) -> Path:
        # Lexical check only: symlinked media files are still media files
        full = os.path.normpath(os.path.join(self.media_dir, name))
        if os.path.dirname(full) != os.path.normpath(self.media_dir):
            raise ValueError(f"Invalid media file name: {name!r}")
        return Path(full)

    def list_media(self) -> Iterable[str]:
        if not self.media_dir.exists():
            return []
        return sorted(p.name for p in self.media_dir.iterdir() if p.is_file())

    def remove_media_files(self, names: list[str]) -> None:
        """Unlink the named files and record a grave for each one removed.

        Every name is checked before anything is unlinked; names that are
        already gone are skipped.
        """
        paths = []
        for name in names:
            path = self._media_path(name)
            if path.is_dir() and not path.is_symlink():
                raise ValueError(f"Media name {name!r} is a directory")
            paths.append((name, path))

        now = int(time.time())
        removed = 0
        try:
            for name, path in paths:
                if not (path.exists() or path.is_symlink()):
                    log.debug("Media file %s already absent", name)
                    continue
                path.unlink()
                self._db.execute(
                    "INSERT INTO media_graves(fname, deleted_at) VALUES(?, ?)", (name, now)
                )
                removed += 1
        finally:
            # Graves for files already unlinked must survive a later failure
            self._db.commit()
        log.info("Removed %d of %d media file(s)", removed, len(names))

    def media_graves(self) -> list[str]:
        return [r[0] for r in self._db.execute("SELECT fname FROM media_graves ORDER BY rowid")]


def _renumber(notetype: Notetype) -> None:
    for i, template in enumerate(notetype.tmpls):
        template["ord"] = i
