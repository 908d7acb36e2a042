"""Core domain entities."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

SHORT_FORM_TITLE = "Short-form content"


class Decision(str, Enum):
    """Verdict returned by the classification service."""

    ALLOW = "ALLOW"
    BLOCK = "BLOCK"


class MessageKind(str, Enum):
    """Kinds of messages sent from a page context to the coordinator."""

    PAGE_DATA_RECEIVED = "PAGE_DATA_RECEIVED"
    SESSION_SIGNAL = "SESSION_SIGNAL"


def is_network_url(url: str) -> bool:
    """Check that URL uses an http(s) scheme."""
    return url.startswith(("http://", "https://"))


@dataclass(frozen=True)
class PageSummary:
    """Semantic summary of a page, sent to the classifier."""

    url: str
    title: str = ""
    description: str = ""
    h1: str = ""
    keywords: str = ""
    body_text: str = ""
    search_query: Optional[str] = None

    @property
    def is_submittable(self) -> bool:
        """Whether the summary carries enough data to be classified."""
        if not is_network_url(self.url):
            return False
        return any([self.title, self.h1, self.description, self.search_query])

    def to_payload(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "h1": self.h1,
            "url": self.url,
            "keywords": self.keywords,
            "bodyText": self.body_text,
            "searchQuery": self.search_query,
        }


@dataclass(frozen=True)
class ShortFormFlag:
    """Marker for continuous short-form content; the page is not scraped."""

    url: str
    title: str = SHORT_FORM_TITLE

    def to_payload(self) -> dict[str, Any]:
        return {"title": self.title, "url": self.url}


PageData = Union[PageSummary, ShortFormFlag]


@dataclass(frozen=True)
class PageSnapshot:
    """Observable state of a page at one instant."""

    url: str
    html: str = ""


@dataclass
class ShortsSession:
    """Aggregate record of continuous short-form viewing.

    Absence of the record in storage means no session is active.
    """

    count: int
    start_time: float
    active: bool = True

    def to_record(self) -> dict[str, Any]:
        return {"active": self.active, "count": self.count, "startTime": self.start_time}

    @classmethod
    def from_record(cls, record: Optional[dict]) -> Optional["ShortsSession"]:
        if not record or not record.get("active"):
            return None
        return cls(
            count=int(record.get("count", 0)),
            start_time=float(record.get("startTime", 0.0)),
            active=True,
        )


@dataclass(frozen=True)
class SearchContext:
    """Most recent search query with the time it was seen (epoch seconds)."""

    query: str
    timestamp: float

    def is_valid(self, now: float, ttl: float) -> bool:
        return now - self.timestamp <= ttl

    def to_record(self) -> dict[str, Any]:
        return {"query": self.query, "timestamp": self.timestamp}

    @classmethod
    def from_record(cls, record: Optional[dict]) -> Optional["SearchContext"]:
        if not record or not record.get("query"):
            return None
        return cls(query=str(record["query"]), timestamp=float(record.get("timestamp", 0.0)))


@dataclass(frozen=True)
class LogEvent:
    """Audit event posted to the log endpoint."""

    title: str
    reason: str
    decision: Decision
    url: str

    def to_payload(self) -> dict[str, str]:
        return {
            "title": self.title,
            "reason": self.reason,
            "decision": self.decision.value,
            "url": self.url,
        }


@dataclass(frozen=True)
class Sender:
    """Origin of a message: the tab hosting the page context."""

    tab_id: Optional[int]
    url: str = ""


@dataclass(frozen=True)
class PageDataReceived:
    """Request to classify page data."""

    data: PageData
    kind: MessageKind = field(default=MessageKind.PAGE_DATA_RECEIVED, init=False)


@dataclass(frozen=True)
class SessionSignal:
    """Signal raised on each navigation: entering short-form content or not."""

    entering: bool
    url: str = ""
    kind: MessageKind = field(default=MessageKind.SESSION_SIGNAL, init=False)


Message = Union[PageDataReceived, SessionSignal]
