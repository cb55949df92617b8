from __future__ import annotations

import re
from urllib.parse import parse_qs, urlparse

_BARE_ID = re.compile(r"^[A-Za-z0-9_-]{11}$")


def extract_youtube_id(url: str) -> str:
    """
    Pull the video id out of the usual YouTube link shapes:
    watch?v=, youtu.be/, /embed/, /shorts/, /live/ or a bare 11-char id.
    Returns '' when nothing matches.
    """
    val = (url or "").strip()
    if not val:
        return ""
    if _BARE_ID.match(val):
        return val

    u = urlparse(val)
    host = (u.netloc or "").lower()
    path = u.path or ""

    if host.endswith("youtu.be"):
        return path.lstrip("/").split("/")[0]

    if not (host.endswith("youtube.com") or host.endswith("youtube-nocookie.com")):
        return ""

    if path.startswith("/watch"):
        return (parse_qs(u.query or "").get("v") or [""])[0]

    parts = [p for p in path.split("/") if p]
    for marker in ("embed", "shorts", "live", "v"):
        if marker in parts:
            i = parts.index(marker)
            if i + 1 < len(parts):
                return parts[i + 1]
    return ""


def youtube_embed_url(url: str) -> str:
    video_id = extract_youtube_id(url)
    if not video_id:
        return ""
    return f"https://www.youtube-nocookie.com/embed/{video_id}"
