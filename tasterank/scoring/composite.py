"""Cross-user 종합 점수

여러 사용자의 순위(위치 정보만)를 하나의 비교 가능한 백분위로 집계합니다.

공식:
    percentile_i = (N_i - position_i) / (N_i - 1) × 100   (N_i ≤ 1이면 100)
    weight_i = sqrt(N_i)
    composite = Σ (percentile_i × weight_i) / Σ weight_i

    여기서:
    - N_i: 평가자 i의 해당 카테고리 리스트 크기
    - position_i: 평가자 i 리스트에서 아이템의 순위

리스트가 클수록 통계적 신뢰도가 높아 가중치가 커지지만,
제곱근으로 매우 큰 리스트가 작은 리스트를 압도하지 않도록 완화합니다.

예시:
    100개 리스트 → weight 10
    4개 리스트 → weight 2
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable

from ..core.enums import CompositeScope
from ..core.models import CategoryId, CompositeScore, ItemId, RankedList, UserId
from ..ranking.mutator import percentile

logger = logging.getLogger(__name__)

DEFAULT_MIN_RATERS = 3


def rater_weight(total_items: int) -> float:
    """평가자 리스트 크기별 가중치"""
    return math.sqrt(total_items)


@dataclass(frozen=True)
class RaterContribution:
    """평가자 한 명의 기여도 (디버깅용)"""

    user_id: UserId
    list_id: str
    position: int
    total_items: int
    percentile: float
    weight: float

    @property
    def weighted_percentile(self) -> float:
        return self.percentile * self.weight


class CompositeScorer:
    """
    종합 점수 계산기 (읽기 전용, 순수 계산)

    사용 예시:
        scorer = CompositeScorer()
        score = scorer.compute_composite("wine-1", "malbec", lists)
        if score is None:
            ...  # 평가자 3명 미만
    """

    def __init__(self, min_raters: int = DEFAULT_MIN_RATERS):
        """
        Args:
            min_raters: 계산에 필요한 최소 평가자 수 (기본 3)
        """
        if min_raters < 1:
            raise ValueError(f"min_raters must be >= 1, got {min_raters}")

        self.min_raters = min_raters

    def qualifying_lists(
        self,
        item_id: ItemId,
        category_id: CategoryId,
        lists: Iterable[RankedList],
        friend_ids: Iterable[UserId] | None = None,
    ) -> list[RankedList]:
        """카테고리가 같고 아이템을 포함하는 리스트 (friend_ids가 있으면 친구 리스트만)"""
        allowed = set(friend_ids) if friend_ids is not None else None
        return [
            rl
            for rl in lists
            if rl.category_id == category_id
            and rl.contains(item_id)
            and (allowed is None or rl.user_id in allowed)
        ]

    def contributions(
        self,
        item_id: ItemId,
        category_id: CategoryId,
        lists: Iterable[RankedList],
        friend_ids: Iterable[UserId] | None = None,
    ) -> list[RaterContribution]:
        """평가자별 백분위/가중치 상세"""
        result = []
        for rl in self.qualifying_lists(item_id, category_id, lists, friend_ids):
            position = rl.position(item_id)
            total = rl.total_items
            result.append(
                RaterContribution(
                    user_id=rl.user_id,
                    list_id=rl.id,
                    position=position,
                    total_items=total,
                    percentile=percentile(position, total),
                    weight=rater_weight(total),
                )
            )
        return result

    def compute_composite(
        self,
        item_id: ItemId,
        category_id: CategoryId,
        lists: Iterable[RankedList],
        scope: CompositeScope = CompositeScope.GLOBAL,
        friend_ids: Iterable[UserId] | None = None,
    ) -> CompositeScore | None:
        """
        종합 점수 계산

        Args:
            item_id: 대상 아이템
            category_id: 대상 카테고리
            lists: 여러 사용자의 RankedList
            scope: GLOBAL(전체) | FRIENDS(friend_ids 사용자만)
            friend_ids: FRIENDS 범위에서 사용할 사용자 ID

        Returns:
            CompositeScore (평가자가 min_raters 미만이면 None)
        """
        if scope == CompositeScope.FRIENDS:
            if friend_ids is None:
                raise ValueError("friend_ids is required for FRIENDS scope")
        else:
            friend_ids = None

        contributions = self.contributions(item_id, category_id, lists, friend_ids)

        if len(contributions) < self.min_raters:
            logger.debug(
                f"Composite not computable for {item_id} ({category_id}, {scope.value}): "
                f"{len(contributions)} raters < {self.min_raters}"
            )
            return None

        total_weight = sum(c.weight for c in contributions)
        if total_weight <= 0:
            return None

        weighted = sum(c.weighted_percentile for c in contributions) / total_weight

        logger.debug(
            f"Composite for {item_id} ({category_id}, {scope.value}): "
            f"{weighted:.1f} across {len(contributions)} raters"
        )
        return CompositeScore(
            item_id=item_id,
            category_id=category_id,
            scope=scope,
            total_raters=len(contributions),
            weighted_percentile=weighted,
        )

    def compute_friends_composite(
        self,
        item_id: ItemId,
        category_id: CategoryId,
        lists: Iterable[RankedList],
        friend_ids: Iterable[UserId],
    ) -> CompositeScore | None:
        """친구 범위 종합 점수 (가중치 로직은 동일)"""
        return self.compute_composite(
            item_id, category_id, lists, CompositeScope.FRIENDS, friend_ids
        )
