"""이진 삽입 기반 비교 계획 (Insertion Planner)

새 아이템이 기존 N개 순위 중 어디에 들어갈지를 최소 횟수의 쌍 비교로 결정합니다.

흐름:
    AWAITING_FIRST_INPUT
        → (감정 입력) AWAITING_COMPARISON_ANSWER(candidate_queue, last_target)
        → (비교 응답 반복) RESOLVED(placement)
        → (RankingEngine.commit_session) COMMITTED

최대 비교 횟수:
    N = 0 → 0 (place_first_item 사용)
    N = 1 → 1
    N ≥ 2 → ceil(log2(N)) + 1
"""

import logging
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Sequence, TypeVar

from ..core.enums import ComparisonVerdict, Sentiment, SessionState
from ..core.errors import SessionStateError
from ..core.models import ComparisonRequest, ItemId, Placement, RankedList, RankEntry

logger = logging.getLogger(__name__)

T = TypeVar("T")


def max_comparisons(size: int) -> int:
    """리스트 크기별 최대 비교 횟수 (UI 진행률 표시용 상한)"""
    if size <= 0:
        return 0
    if size == 1:
        return 1
    return math.ceil(math.log2(size)) + 1


def seed_search_space(sorted_entries: Sequence[RankEntry], sentiment: Sentiment) -> list[RankEntry]:
    """
    감정으로 탐색 범위 좁히기 (비교 시작 전 한 번만 적용)

    - LOVED: 상위 절반 [0, ceil(n/2))
    - DIDNT_LOVE: 하위 절반 [floor(n/2), n)
    - OKAY / NONE: 전체
    """
    if not sentiment.narrows_search():
        return list(sorted_entries)

    n = len(sorted_entries)
    if sentiment == Sentiment.LOVED:
        return list(sorted_entries[: (n + 1) // 2])
    return list(sorted_entries[n // 2 :])


def binary_search_order(items: Sequence[T]) -> list[T]:
    """
    암묵적 이진 탐색 트리의 레벨 순서 (가운데 → 왼쪽 절반 → 오른쪽 절반 ...)

    (low, high) 범위 큐를 사용하며 왼쪽 하위 범위를 먼저 넣음
    """
    result: list[T] = []
    queue: deque[tuple[int, int]] = deque()
    if items:
        queue.append((0, len(items) - 1))

    while queue:
        low, high = queue.popleft()
        mid = (low + high) // 2
        result.append(items[mid])

        if low <= mid - 1:
            queue.append((low, mid - 1))
        if mid + 1 <= high:
            queue.append((mid + 1, high))

    return result


@dataclass
class InsertionSession:
    """
    한 아이템의 삽입 세션 상태

    세션이 진행되는 동안 ranked_list는 이 세션이 독점 사용해야 함 (호출자 규칙)
    """

    ranked_list: RankedList
    new_item_id: ItemId
    sentiment: Sentiment = Sentiment.NONE
    state: SessionState = SessionState.AWAITING_FIRST_INPUT

    candidate_sequence: list[ItemId] = field(default_factory=list)  # 시작 시 계산된 전체 비교 순서
    candidate_queue: list[ItemId] = field(default_factory=list)  # 남은 후보
    last_target: ItemId | None = None
    current_request: ComparisonRequest | None = None
    placement: Placement | None = None

    total_comparisons: int = 0
    comparisons_answered: int = 0
    history: list[tuple[ItemId, ComparisonVerdict]] = field(default_factory=list)

    @property
    def is_resolved(self) -> bool:
        return self.state == SessionState.RESOLVED


class InsertionPlanner:
    """
    이진 삽입 비교 계획기

    상태가 없는 서비스 객체. 진행 상태는 InsertionSession에 저장되므로
    비동기 사용자 입력 사이에 한 단계씩 재개 가능
    """

    def generate_comparison_sequence(
        self,
        existing_entries: Sequence[RankEntry],
        sentiment: Sentiment = Sentiment.NONE,
    ) -> list[ItemId]:
        """전체 비교 대상 순서 (진행률 표시용, 실제로는 앞부분만 소비됨)"""
        sorted_entries = sorted(existing_entries, key=lambda e: e.position)
        candidates = seed_search_space(sorted_entries, sentiment)
        return [e.item_id for e in binary_search_order(candidates)]

    def new_session(self, ranked_list: RankedList, new_item_id: ItemId) -> InsertionSession:
        return InsertionSession(ranked_list=ranked_list, new_item_id=new_item_id)

    def start(
        self,
        session: InsertionSession,
        sentiment: Sentiment = Sentiment.NONE,
    ) -> ComparisonRequest | Placement:
        """
        감정 입력으로 세션 시작

        Returns:
            첫 비교 요청 (빈 리스트이면 즉시 1위 Placement)
        """
        if session.state != SessionState.AWAITING_FIRST_INPUT:
            raise SessionStateError(
                f"Session for {session.new_item_id} already started", state=session.state
            )

        ranked_list = session.ranked_list
        session.sentiment = sentiment
        session.total_comparisons = max_comparisons(ranked_list.total_items)
        session.candidate_sequence = self.generate_comparison_sequence(
            ranked_list.entries, sentiment
        )
        session.candidate_queue = list(session.candidate_sequence)

        if not session.candidate_queue:
            logger.debug(f"Empty list {ranked_list.id}: {session.new_item_id} placed at #1")
            return self._resolve(session, Placement(position=1))

        logger.debug(
            f"Insertion session started: item={session.new_item_id}, "
            f"list_size={ranked_list.total_items}, sentiment={sentiment.value}, "
            f"candidates={len(session.candidate_queue)}"
        )
        return self._request_next(session, session.candidate_queue[0])

    def answer(
        self,
        session: InsertionSession,
        verdict: ComparisonVerdict,
    ) -> ComparisonRequest | Placement:
        """
        비교 응답 반영

        Returns:
            다음 비교 요청 또는 최종 Placement
        """
        if session.state != SessionState.AWAITING_COMPARISON_ANSWER:
            raise SessionStateError(
                f"Session for {session.new_item_id} is not awaiting an answer "
                f"(state={session.state.value})",
                state=session.state,
            )

        compared_item_id = session.last_target
        session.comparisons_answered += 1
        session.history.append((compared_item_id, verdict))

        survivors, placement = self._shrink(
            session.ranked_list,
            compared_item_id,
            verdict,
            [item_id for item_id in session.candidate_queue if item_id != compared_item_id],
        )

        if placement is not None:
            return self._resolve(session, placement)

        session.candidate_queue = survivors
        return self._request_next(session, survivors[0])

    def process_comparison(
        self,
        ranked_list: RankedList,
        compared_item_id: ItemId,
        verdict: ComparisonVerdict,
        remaining: Sequence[ItemId],
    ) -> tuple[ItemId | None, Placement | None]:
        """
        비교 한 번의 결과 처리

        Args:
            ranked_list: 대상 리스트
            compared_item_id: 방금 비교한 기존 아이템
            verdict: PREFER_FIRST(새 아이템 승) | PREFER_SECOND(기존 아이템 승) | TIE
            remaining: 아직 비교하지 않은 후보 (큐 순서)

        Returns:
            (다음 비교 대상, None) 또는 (None, 최종 Placement)
        """
        survivors, placement = self._shrink(ranked_list, compared_item_id, verdict, remaining)
        if placement is not None:
            return None, placement
        return survivors[0], None

    def _shrink(
        self,
        ranked_list: RankedList,
        compared_item_id: ItemId,
        verdict: ComparisonVerdict,
        remaining: Sequence[ItemId],
    ) -> tuple[list[ItemId], Placement | None]:
        """남은 후보를 비교 결과 쪽으로 축소. 후보가 없으면 최종 Placement 반환"""
        compared_entry = ranked_list.entry(compared_item_id)
        if compared_entry is None:
            # 진행 중인 평가를 중단시키지 않도록 1위로 처리
            logger.warning(
                f"Compared item {compared_item_id} not found in list {ranked_list.id}; "
                f"defaulting to position 1"
            )
            return [], Placement(position=1, is_fallback=True)

        if verdict == ComparisonVerdict.TIE:
            return [], Placement(position=compared_entry.position, is_tie=True)

        survivors = [
            item_id
            for item_id in remaining
            if self._is_on_side(ranked_list.entry(item_id), compared_entry.position, verdict)
        ]
        if survivors:
            return survivors, None

        if verdict == ComparisonVerdict.PREFER_FIRST:
            return [], Placement(position=compared_entry.position)
        return [], Placement(position=compared_entry.position + 1)

    @staticmethod
    def _is_on_side(
        entry: RankEntry | None, compared_position: int, verdict: ComparisonVerdict
    ) -> bool:
        if entry is None:
            return False
        if verdict == ComparisonVerdict.PREFER_FIRST:
            return entry.position < compared_position
        return entry.position > compared_position

    def _request_next(self, session: InsertionSession, item_id: ItemId) -> ComparisonRequest:
        request = ComparisonRequest(
            new_item_id=session.new_item_id,
            compared_item_id=item_id,
            comparison_number=session.comparisons_answered + 1,
            total_comparisons=session.total_comparisons,
        )
        session.state = SessionState.AWAITING_COMPARISON_ANSWER
        session.last_target = item_id
        session.current_request = request
        return request

    def _resolve(self, session: InsertionSession, placement: Placement) -> Placement:
        placement = Placement(
            position=placement.position,
            is_tie=placement.is_tie,
            is_fallback=placement.is_fallback,
            comparisons_used=session.comparisons_answered,
        )
        session.state = SessionState.RESOLVED
        session.placement = placement
        session.current_request = None

        logger.debug(
            f"Insertion resolved: item={session.new_item_id}, position=#{placement.position}, "
            f"tie={placement.is_tie}, comparisons={placement.comparisons_used}"
        )
        return placement
