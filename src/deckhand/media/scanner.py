"""Media reference scanner for note fields and card templates."""

import html
import re
from urllib.parse import unquote

_SOUND = re.compile(r"\[sound:(.+?)\]")
_HTML_SRC = re.compile(
    r"<(?:img|audio|video|source)\b[^>]*?\bsrc\s*=\s*(?:\"([^\"]+)\"|'([^']+)'|([^\s>]+))",
    re.IGNORECASE,
)

_REMOTE_PREFIXES = ("http://", "https://", "ftp://", "//", "data:")


def scan_media_refs(text: str) -> list[str]:
    """Return the local media file names referenced in `text`, in order.

    Recognises `[sound:name]` tags and the src of img/audio/video/source
    elements. Remote URLs and data URIs are skipped; each name is reported
    once.
    """
    found: list[str] = []
    seen: set[str] = set()

    candidates = [m.group(1) for m in _SOUND.finditer(text)]
    for match in _HTML_SRC.finditer(text):
        candidates.append(next(g for g in match.groups() if g is not None))

    for raw in candidates:
        name = _normalize(raw)
        if not name or name.lower().startswith(_REMOTE_PREFIXES):
            continue
        # Template field references like {{Front}} are not files
        if "{{" in name:
            continue
        if name not in seen:
            seen.add(name)
            found.append(name)
    return found


def _normalize(raw: str) -> str:
    name = html.unescape(raw.strip())
    # Fragment/query strings never belong to the file name
    name = name.split("#")[0].split("?")[0]
    return unquote(name)
