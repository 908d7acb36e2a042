"""Site-specific knowledge: search engines and watch-page selectors.

Markup changes on these sites only ever need edits here.
"""

from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import parse_qs, urlsplit


@dataclass(frozen=True)
class SearchEngine:
    """Where a site keeps the search query."""

    host: str
    param: str
    path: Optional[str] = None


@dataclass(frozen=True)
class WatchPage:
    """Detail page whose title is rendered late by scripts."""

    host: str
    path_prefix: str
    title_selectors: list[str]
    placeholders: set[str] = field(default_factory=set)


SEARCH_ENGINES: list[SearchEngine] = [
    SearchEngine(host="google.", param="q"),
    SearchEngine(host="bing.", param="q"),
    SearchEngine(host="duckduckgo.com", param="q"),
    SearchEngine(host="youtube.com", param="search_query", path="/results"),
    # Any other site search using the conventional parameter
    SearchEngine(host="", param="q"),
]

WATCH_PAGES: list[WatchPage] = [
    WatchPage(
        host="youtube.com",
        path_prefix="/watch",
        title_selectors=[
            "h1 yt-formatted-string.style-scope.ytd-watch-metadata",
            "ytd-watch-metadata h1",
            "#video-title",
            'meta[itemprop="name"]',
        ],
        placeholders={"YouTube", "- YouTube", "(1) YouTube"},
    ),
]

# Hosts where the generic <h1> is page chrome rather than content
H1_EXCLUDED_HOSTS = ("youtube.com",)


def hostname(url: str) -> str:
    try:
        return (urlsplit(url).hostname or "").lower()
    except ValueError:
        return ""


def search_query(url: str) -> Optional[str]:
    """Return the search query if URL is a search results page."""
    host = hostname(url)
    if not host:
        return None

    parts = urlsplit(url)
    params = parse_qs(parts.query)
    for engine in SEARCH_ENGINES:
        if engine.host not in host:
            continue
        if engine.path and parts.path != engine.path:
            continue
        values = params.get(engine.param)
        if values and values[0].strip():
            return values[0].strip()
    return None


def watch_page(url: str) -> Optional[WatchPage]:
    """Return the watch page profile matching URL."""
    host = hostname(url)
    path = urlsplit(url).path if host else ""
    for page in WATCH_PAGES:
        if page.host in host and path.startswith(page.path_prefix):
            return page
    return None
