"""InMemoryFeedRecorder 테스트"""

from datetime import datetime, timedelta, timezone

import pytest

from tasterank.core.enums import FeedEventType
from tasterank.core.models import FeedEvent
from tasterank.feed.recorder import InMemoryFeedRecorder


def _event(actor_id, item_id, minutes_ago=0, event_type=FeedEventType.ITEM_RANKED):
    return FeedEvent(
        actor_id=actor_id,
        event_type=event_type,
        item_id=item_id,
        category_id="malbec",
        rank_position=1,
        total_in_list=8,
        created_at=datetime.now(timezone.utc) - timedelta(minutes=minutes_ago),
    )


def test_record_newest_first():
    recorder = InMemoryFeedRecorder()

    recorder.record(_event("u1", "A"))
    recorder.record(_event("u1", "B"))

    assert [e.item_id for e in recorder.events()] == ["B", "A"]
    assert len(recorder) == 2


def test_max_events_drops_oldest():
    recorder = InMemoryFeedRecorder(max_events=2)

    for item_id in ["A", "B", "C"]:
        recorder.record(_event("u1", item_id))

    assert [e.item_id for e in recorder.events()] == ["C", "B"]


def test_friend_feed_filters_and_sorts():
    recorder = InMemoryFeedRecorder()
    recorder.record(_event("sarah", "A", minutes_ago=30))
    recorder.record(_event("stranger", "B", minutes_ago=5))
    recorder.record(_event("alex", "C", minutes_ago=60))
    recorder.record(_event("sarah", "D", minutes_ago=1))

    feed = recorder.friend_feed({"sarah", "alex"})

    assert [e.item_id for e in feed] == ["D", "A", "C"]


def test_clear():
    recorder = InMemoryFeedRecorder()
    recorder.record(_event("u1", "A"))

    recorder.clear()

    assert recorder.events() == []


def test_invalid_max_events():
    with pytest.raises(ValueError):
        InMemoryFeedRecorder(max_events=0)


def test_feed_event_display():
    event = _event("u1", "A")

    assert event.position_display == "#1 of 8"
    assert event.vintage_display == "NV"
    assert event.event_type.action_text == "ranked"
