"""Find media files that nothing references, and references to missing files."""

import json
from dataclasses import dataclass, field

from ..adapters.sqlite_collection import SQLiteCollection
from .scanner import scan_media_refs


@dataclass
class MediaReport:
    """Report of a media check."""

    referenced: set[str] = field(default_factory=set)
    missing: dict[str, list[int]] = field(default_factory=dict)  # name -> note ids
    unused: list[str] = field(default_factory=list)


def check_media(col: SQLiteCollection) -> MediaReport:
    """Compare the media folder against every note field and template.

    Template references count as used even though no note names them.
    Note id 0 in `missing` stands for a template reference.
    """
    report = MediaReport()
    on_disk = set(col.list_media())

    for notetype in col.all_notetypes():
        for template in notetype.tmpls:
            for key in ("qfmt", "afmt"):
                for name in scan_media_refs(template.get_str_or_none(key) or ""):
                    _record(report, name, 0, on_disk)

    for note_id, fields in col.iter_note_fields():
        for value in fields:
            for name in scan_media_refs(value):
                _record(report, name, note_id, on_disk)

    report.unused = sorted(on_disk - report.referenced)
    return report


def _record(report: MediaReport, name: str, note_id: int, on_disk: set[str]) -> None:
    report.referenced.add(name)
    if name not in on_disk:
        notes = report.missing.setdefault(name, [])
        if note_id not in notes:
            notes.append(note_id)


def format_report(report: MediaReport, json_output: bool = False) -> str:
    """Format a media report for display."""
    if json_output:
        return json.dumps({
            "referenced_count": len(report.referenced),
            "missing_count": len(report.missing),
            "missing": report.missing,
            "unused_count": len(report.unused),
            "unused": report.unused,
        }, indent=2)

    lines = []
    lines.append("Media Check")
    lines.append("===========")
    lines.append(f"Referenced files: {len(report.referenced)}")
    lines.append(f"Missing files: {len(report.missing)}")
    lines.append(f"Unused files: {len(report.unused)}")

    if report.missing:
        lines.append("")
        lines.append("Missing:")
        for name, notes in sorted(report.missing.items()):
            where = ", ".join("template" if n == 0 else str(n) for n in notes)
            lines.append(f"  {name} (used by {where})")

    if report.unused:
        lines.append("")
        lines.append("Unused:")
        for name in report.unused:
            lines.append(f"  {name}")

    return "\n".join(lines)
