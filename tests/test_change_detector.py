"""Tests for the change detection state machine."""

from beacon_monitor.core import (
    SHORT_FORM_TITLE,
    ChangeDetector,
    DetectionAction,
    DetectionPhase,
    PageSummary,
    ShortFormFlag,
)


def summary(title: str, url: str = "https://example.com/a") -> PageSummary:
    return PageSummary(url=url, title=title)


def commit(detector: ChangeDetector, identity: str, data: PageSummary) -> None:
    """Drive the detector through a clean scan and verify."""
    assert detector.begin(identity)
    assert detector.observe(data).action == DetectionAction.VERIFY
    assert detector.observe(data).action == DetectionAction.SUBMIT


def test_stable_read_is_submitted_after_verification() -> None:
    """Test fresh title goes to verification, then submission."""
    detector = ChangeDetector(retry_interval=0.5, verify_delay=0.25)
    detector.begin("a")

    step = detector.observe(summary("Title A"))
    assert step.action == DetectionAction.VERIFY
    assert step.delay == 0.25
    assert detector.phase == DetectionPhase.VERIFYING

    step = detector.observe(summary("Title A"))
    assert step.action == DetectionAction.SUBMIT
    assert step.data == summary("Title A")
    assert detector.phase == DetectionPhase.COMMITTED
    assert detector.state.last_processed_id == "a"
    assert detector.state.last_sent_title == "Title A"


def test_lockout_after_commit() -> None:
    """Test repeated triggers for a committed identity are no-ops."""
    detector = ChangeDetector()
    commit(detector, "a", summary("Title A"))

    for _ in range(10):
        assert detector.is_locked("a")
        assert not detector.begin("a")
        assert detector.observe(summary("Title A changed")).action == DetectionAction.IGNORE

    # A new identity unlocks
    assert detector.begin("b")
    assert detector.phase == DetectionPhase.SCANNING


def test_flicker_is_not_submitted() -> None:
    """Test a candidate that changes during verification is dropped."""
    detector = ChangeDetector(retry_interval=0.5)
    detector.begin("a")

    assert detector.observe(summary("Loadi")).action == DetectionAction.VERIFY

    step = detector.observe(summary("Loading complete"))
    assert step.action == DetectionAction.RETRY
    assert step.delay == 0.5
    assert detector.phase == DetectionPhase.SCANNING
    assert detector.state.candidate is None

    assert detector.observe(summary("Loading complete")).action == DetectionAction.VERIFY
    step = detector.observe(summary("Loading complete"))
    assert step.action == DetectionAction.SUBMIT
    assert step.data.title == "Loading complete"
    assert detector.state.last_sent_title == "Loading complete"


def test_stale_title_is_not_fresh() -> None:
    """Test the previous page's title is retried, not submitted."""
    detector = ChangeDetector()
    commit(detector, "a", summary("Video One"))

    detector.begin("b")
    assert detector.observe(summary("Video One", url="https://example.com/b")).action == DetectionAction.RETRY
    assert detector.observe(None).action == DetectionAction.RETRY
    assert detector.observe(summary("", url="https://example.com/b")).action == DetectionAction.RETRY
    assert detector.observe(summary("Video Two", url="https://example.com/b")).action == DetectionAction.VERIFY


def test_identical_title_on_new_identity_submits_when_budget_runs_out() -> None:
    """Test two pages sharing a title still both get submitted."""
    detector = ChangeDetector(max_attempts=3)
    commit(detector, "a", summary("Same"))

    detector.begin("b")
    same_b = summary("Same", url="https://example.com/b")
    assert detector.observe(same_b).action == DetectionAction.RETRY
    assert detector.observe(same_b).action == DetectionAction.RETRY

    step = detector.observe(same_b)
    assert step.action == DetectionAction.SUBMIT
    assert step.data == same_b
    assert detector.state.last_processed_id == "b"


def test_budget_exhausted_without_data_gives_up() -> None:
    """Test nothing is committed when the page never yields data."""
    detector = ChangeDetector(max_attempts=2)
    detector.begin("a")

    assert detector.observe(None).action == DetectionAction.RETRY
    assert detector.observe(None).action == DetectionAction.GIVE_UP
    assert detector.phase == DetectionPhase.IDLE
    assert not detector.is_locked("a")

    # A later trigger for the same page tries again
    assert detector.begin("a")


def test_short_form_bypasses_verification() -> None:
    """Test short-form marker is submitted on first read and locks the item."""
    detector = ChangeDetector()
    detector.begin("short:abc")

    flag = ShortFormFlag(url="https://www.youtube.com/shorts/abc")
    step = detector.observe(flag)

    assert step.action == DetectionAction.SUBMIT
    assert step.data == flag
    assert detector.state.last_sent_title == SHORT_FORM_TITLE
    assert not detector.begin("short:abc")


def test_new_identity_mid_scan_restarts() -> None:
    """Test a trigger for another page resets the scan."""
    detector = ChangeDetector()
    detector.begin("a")
    detector.observe(None)
    detector.observe(None)
    assert detector.state.pending_retry_count == 2

    assert detector.begin("b")
    assert detector.state.identity == "b"
    assert detector.state.pending_retry_count == 0


def test_same_identity_mid_scan_is_noop() -> None:
    """Test a trigger for the page being scanned keeps the running scan."""
    detector = ChangeDetector()
    detector.begin("a")
    detector.observe(None)

    assert not detector.begin("a")
    assert detector.state.pending_retry_count == 1


def test_flicker_loop_terminates() -> None:
    """Test endless flicker ends within the attempt budget without submitting."""
    detector = ChangeDetector(max_attempts=4)
    detector.begin("a")

    actions = []
    for i in range(20):
        step = detector.observe(summary(f"Title {i}"))
        actions.append(step.action)
        if step.action in (DetectionAction.SUBMIT, DetectionAction.GIVE_UP):
            break

    assert actions[-1] == DetectionAction.GIVE_UP
    assert DetectionAction.SUBMIT not in actions
    assert len(actions) == 8
    assert detector.phase == DetectionPhase.IDLE


def test_fresh_read_on_last_attempt_is_verified() -> None:
    """Test a title first seen on the final attempt still needs a second read."""
    detector = ChangeDetector(max_attempts=3)
    detector.begin("a")

    assert detector.observe(None).action == DetectionAction.RETRY
    assert detector.observe(None).action == DetectionAction.RETRY
    assert detector.observe(summary("Hal")).action == DetectionAction.VERIFY

    step = detector.observe(summary("Half-rendered title"))
    assert step.action == DetectionAction.GIVE_UP
    assert detector.state.last_sent_title == ""
    assert not detector.is_locked("a")


def test_fresh_read_on_last_attempt_submits_when_stable() -> None:
    """Test a late candidate that holds still is submitted."""
    detector = ChangeDetector(max_attempts=2)
    detector.begin("a")

    assert detector.observe(None).action == DetectionAction.RETRY
    assert detector.observe(summary("Done")).action == DetectionAction.VERIFY
    assert detector.observe(summary("Done")).action == DetectionAction.SUBMIT


def test_untitled_page_locks_after_commit() -> None:
    """Test a page committed without a title is not scanned again."""
    detector = ChangeDetector(max_attempts=2)
    detector.begin("a")
    untitled = PageSummary(url="https://example.com/a", h1="Only heading")

    assert detector.observe(untitled).action == DetectionAction.RETRY
    step = detector.observe(untitled)
    assert step.action == DetectionAction.SUBMIT
    assert detector.state.last_sent_title == ""

    for _ in range(5):
        assert detector.is_locked("a")
        assert not detector.begin("a")


def test_abandon_allows_restart() -> None:
    """Test an abandoned scan lets the same page be triggered again."""
    detector = ChangeDetector()
    detector.begin("a")
    detector.observe(None)
    assert not detector.begin("a")

    detector.abandon()

    assert detector.phase == DetectionPhase.IDLE
    assert detector.begin("a")


def test_abandon_keeps_commit() -> None:
    """Test abandoning after a commit keeps the lockout."""
    detector = ChangeDetector()
    commit(detector, "a", summary("Title A"))

    detector.abandon()

    assert detector.phase == DetectionPhase.COMMITTED
    assert not detector.begin("a")
