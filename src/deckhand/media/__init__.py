"""Media reference scanning and unused-file checks."""

from .check import MediaReport, check_media, format_report
from .scanner import scan_media_refs

__all__ = [
    "scan_media_refs",
    "check_media",
    "format_report",
    "MediaReport",
]
