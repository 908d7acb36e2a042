"""Change detection for continuously mutating pages.

Turns a stream of extraction attempts into at most one submission per
stable content change. The detector is a plain state machine: it never
sleeps itself, it tells the caller how long to wait before the next read.
That keeps the lockout and flicker rules testable without real timers.

Phases:
    IDLE       nothing in progress (initial state, or the attempt budget ran
               out without usable data or while the title kept flickering)
    SCANNING   reading repeatedly until a fresh title shows up
    VERIFYING  a candidate was found; one more read must agree with it
    COMMITTED  submitted for the current identity; further triggers for the
               same identity are ignored
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from beacon_monitor.core.entities import PageData, ShortFormFlag


class DetectionPhase(str, Enum):
    """Phase of the per-page detection state machine."""

    IDLE = "idle"
    SCANNING = "scanning"
    VERIFYING = "verifying"
    COMMITTED = "committed"


class DetectionAction(str, Enum):
    """What the caller should do after feeding an extraction result."""

    RETRY = "retry"
    VERIFY = "verify"
    SUBMIT = "submit"
    GIVE_UP = "give_up"
    IGNORE = "ignore"


@dataclass
class DetectionState:
    """Mutable detection state owned by one page context."""

    last_processed_id: str = ""
    last_sent_title: str = ""
    pending_retry_count: int = 0
    phase: DetectionPhase = DetectionPhase.IDLE
    identity: str = ""
    candidate: Optional[PageData] = None


@dataclass(frozen=True)
class DetectionStep:
    """Outcome of one observation."""

    action: DetectionAction
    data: Optional[PageData] = None
    delay: float = 0.0


class ChangeDetector:
    """Debounce-with-confirmation state machine for one page context."""

    def __init__(
        self,
        max_attempts: int = 20,
        retry_interval: float = 0.5,
        verify_delay: float = 0.25,
    ) -> None:
        self.max_attempts = max_attempts
        self.retry_interval = retry_interval
        self.verify_delay = verify_delay
        self.state = DetectionState()

    @property
    def phase(self) -> DetectionPhase:
        return self.state.phase

    @property
    def in_progress(self) -> bool:
        return self.state.phase in (DetectionPhase.SCANNING, DetectionPhase.VERIFYING)

    def is_locked(self, identity: str) -> bool:
        """Check if identity was already submitted."""
        return bool(self.state.last_processed_id) and identity == self.state.last_processed_id

    def begin(self, identity: str) -> bool:
        """Handle a trigger for the page currently showing `identity`.

        Returns True if a new scan was started and the caller must (re)start
        its read loop, False if the trigger is a no-op.
        """
        if self.is_locked(identity):
            return False

        if self.in_progress and identity == self.state.identity:
            # The running scan already covers this identity
            return False

        self.state.identity = identity
        self.state.phase = DetectionPhase.SCANNING
        self.state.pending_retry_count = 0
        self.state.candidate = None
        return True

    def abandon(self) -> None:
        """Drop an unfinished scan so the next trigger starts over."""
        if self.in_progress:
            self._reset(DetectionPhase.IDLE)

    def observe(self, data: Optional[PageData]) -> DetectionStep:
        """Feed one extraction result and get the next step."""
        if not self.in_progress:
            return DetectionStep(DetectionAction.IGNORE)

        if isinstance(data, ShortFormFlag):
            return self._commit(data)

        if self.state.phase == DetectionPhase.VERIFYING:
            return self._verify(data)

        return self._scan(data)

    @property
    def _budget_spent(self) -> bool:
        return self.state.pending_retry_count >= self.max_attempts

    def _scan(self, data: Optional[PageData]) -> DetectionStep:
        self.state.pending_retry_count += 1

        if self._is_fresh(data):
            self.state.candidate = data
            self.state.phase = DetectionPhase.VERIFYING
            return DetectionStep(DetectionAction.VERIFY, delay=self.verify_delay)

        if self._budget_spent:
            # Nothing fresh turned up: accept what is there rather than starve
            if data is not None:
                return self._commit(data)
            return self._give_up()

        return DetectionStep(DetectionAction.RETRY, delay=self.retry_interval)

    def _verify(self, data: Optional[PageData]) -> DetectionStep:
        candidate = self.state.candidate
        if data is not None and candidate is not None and _same_content(data, candidate):
            return self._commit(data)

        # Flicker: the candidate was a transient read
        if self._budget_spent:
            return self._give_up()
        self.state.candidate = None
        self.state.phase = DetectionPhase.SCANNING
        return DetectionStep(DetectionAction.RETRY, delay=self.retry_interval)

    def _is_fresh(self, data: Optional[PageData]) -> bool:
        if data is None or not data.title:
            return False
        return data.title != self.state.last_sent_title

    def _commit(self, data: PageData) -> DetectionStep:
        self.state.last_processed_id = self.state.identity
        self.state.last_sent_title = data.title
        self._reset(DetectionPhase.COMMITTED)
        return DetectionStep(DetectionAction.SUBMIT, data=data)

    def _give_up(self) -> DetectionStep:
        self._reset(DetectionPhase.IDLE)
        return DetectionStep(DetectionAction.GIVE_UP)

    def _reset(self, phase: DetectionPhase) -> None:
        self.state.phase = phase
        self.state.pending_retry_count = 0
        self.state.candidate = None


def _same_content(left: PageData, right: PageData) -> bool:
    return left.url == right.url and left.title == right.title
