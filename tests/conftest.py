"""공통 테스트 fixture"""

import logging

import pytest

from tasterank.core.enums import ComparisonVerdict
from tasterank.core.models import KnownVintage, RankedList, RankEntry, TastingInstance

logger = logging.getLogger(__name__)


def build_list(
    item_ids: list[str],
    user_id: str = "user-1",
    category_id: str = "malbec",
    positions: list[int] | None = None,
) -> RankedList:
    """item_ids 순서대로 1..n 위치를 가진 리스트 (positions로 동점 지정 가능)"""
    if positions is None:
        positions = list(range(1, len(item_ids) + 1))

    ranked_list = RankedList(user_id=user_id, category_id=category_id)
    for item_id, position in zip(item_ids, positions):
        ranked_list.entries.append(
            RankEntry(item_id=item_id, position=position, tastings=[TastingInstance()])
        )
    return ranked_list


def oracle(true_order: list[str], new_item_id: str):
    """true_order(최고 → 최저) 기준으로 답하는 가상의 사용자"""
    rank = {item_id: i for i, item_id in enumerate(true_order)}

    def answer(compared_item_id: str) -> ComparisonVerdict:
        if rank[new_item_id] < rank[compared_item_id]:
            return ComparisonVerdict.PREFER_FIRST
        return ComparisonVerdict.PREFER_SECOND

    return answer


@pytest.fixture
def make_list():
    """RankedList 생성 함수"""
    return build_list


@pytest.fixture
def make_oracle():
    """가상 사용자 생성 함수"""
    return oracle


@pytest.fixture
def tasting():
    """기본 시음 기록 (2019 빈티지)"""
    return TastingInstance(vintage=KnownVintage(2019), notes="plum, violet")
