"""Content identity and short-form URL recognition."""

import re
from typing import Optional
from urllib.parse import parse_qs, urlsplit

# Continuous feed-style content: (host fragment, path pattern with the item id in group 1)
SHORT_FORM_PATTERNS: list[tuple[str, re.Pattern]] = [
    ("youtube.com", re.compile(r"^/shorts/([\w-]+)")),
    ("instagram.com", re.compile(r"^/reels?/([\w-]+)")),
    ("tiktok.com", re.compile(r"^/@[\w.-]+/video/(\d+)")),
    ("facebook.com", re.compile(r"^/reel/(\d+)")),
    ("clips.twitch.tv", re.compile(r"^/([\w-]+)")),
    ("twitch.tv", re.compile(r"^/[\w-]+/clip/([\w-]+)")),
]


def _host(url: str) -> str:
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""


def _host_matches(host: str, fragment: str) -> bool:
    return host == fragment or host.endswith("." + fragment)


def short_form_id(url: str) -> Optional[str]:
    """Return the item id if URL is a short-form item, else None."""
    host = _host(url)
    path = urlsplit(url).path if host else ""
    for fragment, pattern in SHORT_FORM_PATTERNS:
        if not _host_matches(host, fragment):
            continue
        match = pattern.match(path)
        if match:
            return match.group(1)
    return None


def is_short_form(url: str) -> bool:
    """Check if URL points at continuous short-form content."""
    return short_form_id(url) is not None


def content_identity(url: str) -> str:
    """Derive the key that distinguishes one piece of content from another.

    Video and post ids are used when the URL shape is recognised so that
    tracking parameters or timestamps don't count as new content.
    Everything else is identified by the raw URL.
    """
    item_id = short_form_id(url)
    if item_id:
        return f"short:{item_id}"

    host = _host(url)
    if _host_matches(host, "youtube.com"):
        parts = urlsplit(url)
        if parts.path == "/watch":
            video_id = parse_qs(parts.query).get("v", [""])[0]
            if video_id:
                return f"youtube:{video_id}"
    elif host == "youtu.be":
        video_id = urlsplit(url).path.strip("/")
        if video_id:
            return f"youtube:{video_id}"

    return url
