"""랭킹 리스트 메모리 저장소"""

import logging

from .models import CategoryId, RankedList, UserId

logger = logging.getLogger(__name__)


class InMemoryRankingStore:
    """
    랭킹 리스트 저장소 (프로세스 메모리)

    역할:
    - (사용자, 카테고리)별 리스트 조회/생성
    - 카테고리별 리스트 수집 (종합 점수 입력)
    - 사용자가 순위를 매긴 카테고리 조회

    영속화/동기화는 외부 협력자의 책임
    """

    def __init__(self):
        self._lists: dict[str, RankedList] = {}

    def get(self, user_id: UserId, category_id: CategoryId) -> RankedList | None:
        return next(
            (
                rl
                for rl in self._lists.values()
                if rl.user_id == user_id and rl.category_id == category_id
            ),
            None,
        )

    def get_or_create(self, user_id: UserId, category_id: CategoryId) -> RankedList:
        existing = self.get(user_id, category_id)
        if existing is not None:
            return existing

        ranked_list = RankedList(user_id=user_id, category_id=category_id)
        self._lists[ranked_list.id] = ranked_list
        logger.debug(f"Created ranked list: user={user_id}, category={category_id}")
        return ranked_list

    def save(self, ranked_list: RankedList) -> None:
        self._lists[ranked_list.id] = ranked_list

    def lists_for_category(self, category_id: CategoryId) -> list[RankedList]:
        return [rl for rl in self._lists.values() if rl.category_id == category_id]

    def ranked_categories(self, user_id: UserId) -> list[CategoryId]:
        """엔트리가 하나 이상 있는 카테고리 (정렬된 목록)"""
        return sorted(
            {rl.category_id for rl in self._lists.values() if rl.user_id == user_id and rl.entries}
        )
