"""Feed 도메인 - 순위 변경 이벤트 기록"""

from .recorder import InMemoryFeedRecorder

__all__ = ["InMemoryFeedRecorder"]
