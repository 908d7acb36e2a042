"""Page sources backed by a static or mutable HTML document."""

from pathlib import Path

from beacon_monitor.core.entities import PageSnapshot
from beacon_monitor.core.interfaces import PageSource


class StaticPage(PageSource):
    """A page whose URL and document are set from the outside.

    Assigning `url` or `html` simulates navigation and DOM mutation.
    """

    def __init__(self, url: str, html: str = "") -> None:
        self.url = url
        self.html = html

    @classmethod
    def from_file(cls, url: str, path: Path) -> "StaticPage":
        return cls(url, path.read_text(encoding="utf-8"))

    async def snapshot(self) -> PageSnapshot:
        return PageSnapshot(url=self.url, html=self.html)
