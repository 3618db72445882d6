"""랭킹 리스트 변경 (삽입/재번호/시음 기록 추가)"""

import logging

from ..core.models import ItemId, RankedList, RankEntry, TastingInstance
from ..core.enums import Sentiment

logger = logging.getLogger(__name__)


def percentile(position: int, total_items: int) -> float:
    """
    순위 → 백분위

    1위 = 100, 최하위 = 0, 아이템이 하나 이하이면 100
    """
    if total_items <= 1:
        return 100.0
    return (total_items - position) / (total_items - 1) * 100.0


class RankMutator:
    """
    최종 배치 결정을 RankedList에 반영

    상태가 없는 서비스 객체. 리스트는 호출마다 명시적으로 전달받음
    """

    def place_first_item(
        self,
        ranked_list: RankedList,
        item_id: ItemId,
        tasting: TastingInstance,
        sentiment: Sentiment = Sentiment.NONE,
    ) -> RankEntry:
        """빈 리스트의 첫 아이템은 비교 없이 1위"""
        if ranked_list.entries:
            logger.warning(
                f"place_first_item called on non-empty list {ranked_list.id} "
                f"({ranked_list.total_items} entries)"
            )
        return self.insert_at_position(
            ranked_list, item_id, 1, tasting, is_tie=False, sentiment=sentiment
        )

    def insert_at_position(
        self,
        ranked_list: RankedList,
        item_id: ItemId,
        position: int,
        tasting: TastingInstance,
        is_tie: bool = False,
        sentiment: Sentiment = Sentiment.NONE,
    ) -> RankEntry:
        """
        지정한 위치에 새 엔트리 삽입

        Args:
            ranked_list: 대상 리스트 (호출 동안 독점 사용)
            item_id: 새 아이템 ID
            position: 삽입 위치 (1 이상, count + 1 초과 시 맨 뒤로 보정)
            tasting: 첫 시음 기록
            is_tie: True면 기존 엔트리를 밀지 않고 같은 position 공유

        Returns:
            추가된 RankEntry
        """
        position = min(max(position, 1), ranked_list.total_items + 1)

        if not is_tie:
            for entry in ranked_list.entries:
                if entry.position >= position:
                    entry.position += 1
                    entry.touch()

        entry = RankEntry(
            item_id=item_id,
            position=position,
            tastings=[tasting],
            sentiment=sentiment,
            best_tasting_id=tasting.id,
        )
        ranked_list.entries.append(entry)
        ranked_list.touch()

        logger.debug(
            f"Inserted {item_id} at #{position} (tie={is_tie}) "
            f"in list {ranked_list.id}, size={ranked_list.total_items}"
        )
        return entry

    def record_tasting(
        self,
        ranked_list: RankedList,
        item_id: ItemId,
        tasting: TastingInstance,
    ) -> RankEntry | None:
        """
        이미 순위가 있는 아이템에 시음 기록 추가 (position 변화 없음)

        Returns:
            갱신된 RankEntry (아이템이 리스트에 없으면 None)
        """
        entry = ranked_list.entry(item_id)
        if entry is None:
            return None

        if tasting.is_best:
            for existing in entry.tastings:
                existing.is_best = False
            entry.best_tasting_id = tasting.id

        entry.tastings.append(tasting)
        entry.touch()
        ranked_list.touch()
        return entry
