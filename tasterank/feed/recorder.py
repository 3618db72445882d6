"""피드 이벤트 기록"""

import logging
from collections import deque
from typing import Iterable

from ..core.models import FeedEvent, UserId

logger = logging.getLogger(__name__)


class InMemoryFeedRecorder:
    """
    피드 이벤트 메모리 기록기

    최신 이벤트가 앞에 오며, max_events를 넘으면 오래된 이벤트부터 버림
    """

    def __init__(self, max_events: int = 500):
        if max_events < 1:
            raise ValueError(f"max_events must be >= 1, got {max_events}")

        self._events: deque[FeedEvent] = deque(maxlen=max_events)

    def record(self, event: FeedEvent) -> None:
        self._events.appendleft(event)
        logger.debug(
            f"Feed event: {event.actor_id} {event.event_type.action_text} {event.item_id} "
            f"{event.position_display}"
        )

    def events(self) -> list[FeedEvent]:
        return list(self._events)

    def friend_feed(self, friend_ids: Iterable[UserId]) -> list[FeedEvent]:
        """친구 이벤트 (최신순)"""
        friends = set(friend_ids)
        return sorted(
            (e for e in self._events if e.actor_id in friends),
            key=lambda e: e.created_at,
            reverse=True,
        )

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)
