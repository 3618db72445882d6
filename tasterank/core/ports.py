from typing import Protocol

from .models import CategoryId, FeedEvent, RankedList, UserId


# 피드 이벤트 기록
class FeedEventRecorderPort(Protocol):
    def record(self, event: FeedEvent) -> None:
        """
        순위 변경 이벤트 기록 (fire-and-forget)

        실패해도 이미 커밋된 순위 변경은 되돌리지 않음
        """
        ...


# 랭킹 리스트 저장소
class RankingStorePort(Protocol):
    def get(self, user_id: UserId, category_id: CategoryId) -> RankedList | None:
        """(사용자, 카테고리)의 랭킹 리스트 조회"""
        ...

    def get_or_create(self, user_id: UserId, category_id: CategoryId) -> RankedList:
        """없으면 빈 리스트를 생성해서 반환"""
        ...

    def save(self, ranked_list: RankedList) -> None:
        """id 기준 upsert"""
        ...

    def lists_for_category(self, category_id: CategoryId) -> list[RankedList]:
        """카테고리의 모든 사용자 리스트 (종합 점수 입력용)"""
        ...

    def ranked_categories(self, user_id: UserId) -> list[CategoryId]:
        """사용자가 한 개 이상 순위를 매긴 카테고리"""
        ...
