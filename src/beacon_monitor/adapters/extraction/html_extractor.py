"""Extract a classifiable summary from an HTML snapshot."""

import logging
import re
from dataclasses import replace
from typing import Optional

from bs4 import BeautifulSoup

from beacon_monitor.adapters.extraction.sites import (
    H1_EXCLUDED_HOSTS,
    WatchPage,
    hostname,
    search_query,
    watch_page,
)
from beacon_monitor.core.entities import PageData, PageSnapshot, PageSummary, ShortFormFlag
from beacon_monitor.core.identity import content_identity, is_short_form
from beacon_monitor.core.interfaces import PageExtractor
from beacon_monitor.core.search_context import SearchContextCache

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")

NON_CONTENT_TAGS = ["script", "style", "noscript", "svg", "iframe", "template"]


def normalize_text(text: Optional[str]) -> str:
    """Collapse whitespace runs and strip."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


class HtmlPageExtractor(PageExtractor):
    """Build page summaries with BeautifulSoup."""

    def __init__(
        self,
        search_context: Optional[SearchContextCache] = None,
        body_text_limit: int = 500,
    ) -> None:
        self.search_context = search_context
        self.body_text_limit = body_text_limit
        self._last_identity: Optional[str] = None

    async def extract(self, snapshot: PageSnapshot) -> Optional[PageData]:
        """Return page data, a short-form marker, or None."""
        url = snapshot.url
        if is_short_form(url):
            return ShortFormFlag(url=url)

        identity = content_identity(url)
        new_page = identity != self._last_identity
        self._last_identity = identity

        query = search_query(url)
        if query and new_page and self.search_context:
            # Saved once per page view; rescans keep the original timestamp
            await self.search_context.remember(query)

        soup = BeautifulSoup(snapshot.html or "", "html.parser")

        profile = watch_page(url)
        if profile:
            summary = self._extract_watch_page(url, soup, profile, query)
        else:
            summary = self._extract_generic(url, soup, query)

        if summary is None:
            return None

        if summary.search_query is None and self.search_context:
            inherited = await self.search_context.recall()
            if inherited:
                summary = replace(summary, search_query=inherited)

        if not summary.is_submittable:
            logger.debug("Not enough useful data for %s", url)
            return None
        return summary

    def _extract_watch_page(
        self,
        url: str,
        soup: BeautifulSoup,
        profile: WatchPage,
        query: Optional[str],
    ) -> Optional[PageSummary]:
        title = ""
        for selector in profile.title_selectors:
            element = soup.select_one(selector)
            if element is None:
                continue
            text = normalize_text(element.get("content") if element.name == "meta" else element.get_text())
            if text and text not in profile.placeholders:
                title = text
                break

        if not title:
            # Only page chrome so far; the real title has not rendered yet
            return None

        return PageSummary(
            url=url,
            title=title,
            description=self._description(soup),
            h1=title,
            keywords=self._meta(soup, name="keywords"),
            search_query=query,
        )

    def _extract_generic(
        self,
        url: str,
        soup: BeautifulSoup,
        query: Optional[str],
    ) -> PageSummary:
        title_tag = soup.find("title")
        title = normalize_text(title_tag.get_text()) if title_tag else ""

        h1 = ""
        host = hostname(url)
        if not query and not any(excluded in host for excluded in H1_EXCLUDED_HOSTS):
            h1_tag = soup.find("h1")
            h1 = normalize_text(h1_tag.get_text()) if h1_tag else ""

        description = self._description(soup)
        keywords = self._meta(soup, name="keywords")

        # Search pages are described by their query, not their result listing
        body_text = "" if query else self._body_text(soup)

        return PageSummary(
            url=url,
            title=title,
            description=description,
            h1=h1,
            keywords=keywords,
            body_text=body_text,
            search_query=query,
        )

    def _description(self, soup: BeautifulSoup) -> str:
        return self._meta(soup, name="description") or self._meta(soup, prop="og:description")

    def _meta(self, soup: BeautifulSoup, name: Optional[str] = None, prop: Optional[str] = None) -> str:
        attrs = {"name": name} if name else {"property": prop}
        tag = soup.find("meta", attrs=attrs)
        if tag and tag.get("content"):
            return normalize_text(tag["content"])
        return ""

    def _body_text(self, soup: BeautifulSoup) -> str:
        body = soup.body
        if body is None:
            return ""
        for tag in body(NON_CONTENT_TAGS):
            tag.decompose()
        text = normalize_text(" ".join(body.stripped_strings))
        return text[: self.body_text_limit]
