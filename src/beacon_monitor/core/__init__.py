"""Core domain layer."""

from beacon_monitor.core.change_detector import (
    ChangeDetector,
    DetectionAction,
    DetectionPhase,
    DetectionState,
    DetectionStep,
)
from beacon_monitor.core.credentials import CredentialStore
from beacon_monitor.core.enforcer import DecisionEnforcer
from beacon_monitor.core.entities import (
    SHORT_FORM_TITLE,
    Decision,
    LogEvent,
    Message,
    MessageKind,
    PageData,
    PageDataReceived,
    PageSnapshot,
    PageSummary,
    SearchContext,
    Sender,
    SessionSignal,
    ShortFormFlag,
    ShortsSession,
)
from beacon_monitor.core.heartbeat import HeartbeatScheduler
from beacon_monitor.core.identity import content_identity, is_short_form
from beacon_monitor.core.interfaces import (
    BackendClient,
    KeyValueStore,
    PageExtractor,
    PageSource,
    RepeatingTimer,
    TabController,
)
from beacon_monitor.core.router import MessageRouter, RouteResult
from beacon_monitor.core.search_context import SearchContextCache
from beacon_monitor.core.session_tracker import SessionTracker

__all__ = [
    "SHORT_FORM_TITLE",
    "BackendClient",
    "ChangeDetector",
    "CredentialStore",
    "Decision",
    "DecisionEnforcer",
    "DetectionAction",
    "DetectionPhase",
    "DetectionState",
    "DetectionStep",
    "HeartbeatScheduler",
    "KeyValueStore",
    "LogEvent",
    "Message",
    "MessageKind",
    "MessageRouter",
    "PageData",
    "PageDataReceived",
    "PageExtractor",
    "PageSnapshot",
    "PageSource",
    "PageSummary",
    "RepeatingTimer",
    "RouteResult",
    "SearchContext",
    "SearchContextCache",
    "Sender",
    "SessionSignal",
    "SessionTracker",
    "ShortFormFlag",
    "ShortsSession",
    "TabController",
    "content_identity",
    "is_short_form",
]
