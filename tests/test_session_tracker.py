from __future__ import annotations

from agents.multi.session_tracker import SessionTracker


def test_second_record_overwrites_first() -> None:
    tracker = SessionTracker()
    tracker.record_decision("b1", "0|0|0|0|0", 1)
    tracker.record_decision("b1", "4|1|2|0|1", 3)
    assert len(tracker) == 1

    pending = tracker.consume_decision("b1")
    assert pending is not None
    assert (pending.state_key, pending.action) == ("4|1|2|0|1", 3)
    assert tracker.consume_decision("b1") is None


def test_consume_unknown_bot_is_absent() -> None:
    tracker = SessionTracker()
    tracker.record_decision("b1", "k", 0)
    assert tracker.consume_decision("b2") is None
    assert len(tracker) == 1


def test_bots_are_tracked_independently() -> None:
    tracker = SessionTracker()
    tracker.record_decision("b1", "k1", 0)
    tracker.record_decision("b2", "k2", 5)
    assert tracker.consume_decision("b2").action == 5
    assert tracker.consume_decision("b1").state_key == "k1"


def test_clear_discards_everything() -> None:
    tracker = SessionTracker()
    tracker.record_decision("b1", "k", 0)
    tracker.record_decision("b2", "k", 1)
    assert tracker.clear() == 2
    assert tracker.consume_decision("b1") is None
    assert len(tracker) == 0


def test_decision_records_issue_time() -> None:
    tracker = SessionTracker()
    pending = tracker.record_decision("b1", "k", 2)
    assert pending.issued_at > 0
