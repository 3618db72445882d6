"""랭킹 엔진 (UI/오케스트레이션 호출자용 진입점)"""

import logging
from typing import Iterable

from ..core.enums import (
    ComparisonVerdict,
    CompositeScope,
    FeedEventType,
    Sentiment,
    SessionState,
)
from ..core.errors import RankingError, SessionStateError
from ..core.models import (
    CategoryId,
    ComparisonRequest,
    CompositeScore,
    FeedEvent,
    ItemId,
    Placement,
    RankedList,
    RankEntry,
    TastingInstance,
    UserId,
)
from ..core.ports import FeedEventRecorderPort
from ..core.telemetry import get_meter, get_tracer
from ..scoring.composite import CompositeScorer
from .mutator import RankMutator
from .planner import InsertionPlanner, InsertionSession

logger = logging.getLogger(__name__)


class RankingEngine:
    """
    랭킹 엔진

    역할:
    - 삽입 세션 시작 / 비교 응답 처리 (InsertionPlanner)
    - 최종 배치 커밋 (RankMutator) + 피드 이벤트 기록
    - 종합 점수 계산 (CompositeScorer)

    전역 상태 없음. 모든 리스트는 호출마다 명시적으로 전달
    """

    def __init__(
        self,
        mutator: RankMutator | None = None,
        planner: InsertionPlanner | None = None,
        scorer: CompositeScorer | None = None,
        feed_recorder: FeedEventRecorderPort | None = None,
        tracer=None,
        meter=None,
    ):
        self.mutator = mutator or RankMutator()
        self.planner = planner or InsertionPlanner()
        self.scorer = scorer or CompositeScorer()
        self.feed_recorder = feed_recorder

        self.tracer = tracer or get_tracer(__name__)
        meter = meter or get_meter(__name__)
        self._comparisons_counter = meter.create_counter(
            "tasterank.comparisons.answered",
            description="Pairwise comparisons answered during insertion sessions",
        )
        self._commits_counter = meter.create_counter(
            "tasterank.placements.committed",
            description="Placements committed to ranked lists",
        )

    # 1) 삽입 세션
    def start_insertion(
        self,
        ranked_list: RankedList,
        item_id: ItemId,
        sentiment: Sentiment = Sentiment.NONE,
    ) -> InsertionSession:
        """
        삽입 세션 시작

        Returns:
            세션 (session.candidate_sequence: 전체 비교 순서,
                  session.current_request: 첫 비교 요청,
                  빈 리스트이면 session.placement에 1위가 이미 결정됨)

        Raises:
            RankingError: 이미 리스트에 있는 아이템 (record_tasting 사용)
        """
        if ranked_list.contains(item_id):
            raise RankingError(
                f"Item {item_id} is already ranked in list {ranked_list.id}; "
                f"use record_tasting for a new tasting"
            )

        session = self.planner.new_session(ranked_list, item_id)
        self.planner.start(session, sentiment)
        return session

    def answer_comparison(
        self,
        session: InsertionSession,
        verdict: ComparisonVerdict,
    ) -> ComparisonRequest | Placement:
        """비교 응답 → 다음 비교 요청 또는 최종 Placement"""
        result = self.planner.answer(session, verdict)
        self._comparisons_counter.add(1, {"verdict": verdict.value})

        if isinstance(result, Placement) and result.is_fallback:
            logger.warning(
                f"Insertion of {session.new_item_id} fell back to position 1 "
                f"after {result.comparisons_used} comparisons"
            )
        return result

    # 2) 커밋
    def commit_placement(
        self,
        ranked_list: RankedList,
        item_id: ItemId,
        placement: Placement,
        tasting: TastingInstance,
        sentiment: Sentiment = Sentiment.NONE,
        actor_id: UserId | None = None,
    ) -> RankEntry:
        """
        최종 배치를 리스트에 반영하고 피드 이벤트 기록

        빈 리스트이면 placement와 관계없이 1위로 배치.
        피드 기록 실패는 로그만 남기고 순위 변경은 유지

        Raises:
            RankingError: 이미 리스트에 있는 아이템 (리스트는 변경되지 않음)
        """
        if ranked_list.contains(item_id):
            raise RankingError(
                f"Item {item_id} is already ranked in list {ranked_list.id}; "
                f"refusing to commit a duplicate entry"
            )

        with self.tracer.start_as_current_span("commit_placement") as span:
            span.set_attribute("list.id", ranked_list.id)
            span.set_attribute("item.id", item_id)
            span.set_attribute("placement.position", placement.position)
            span.set_attribute("placement.is_tie", placement.is_tie)

            if not ranked_list.entries:
                entry = self.mutator.place_first_item(ranked_list, item_id, tasting, sentiment)
            else:
                entry = self.mutator.insert_at_position(
                    ranked_list,
                    item_id,
                    placement.position,
                    tasting,
                    is_tie=placement.is_tie,
                    sentiment=sentiment,
                )
            span.set_attribute("list.size", ranked_list.total_items)

        self._commits_counter.add(1, {"tie": placement.is_tie})
        logger.info(
            f"Committed {item_id} at #{entry.position} of {ranked_list.total_items} "
            f"(category={ranked_list.category_id}, tie={placement.is_tie})"
        )

        self._notify(
            FeedEvent(
                actor_id=actor_id or ranked_list.user_id,
                event_type=FeedEventType.ITEM_RANKED,
                item_id=item_id,
                category_id=ranked_list.category_id,
                rank_position=entry.position,
                total_in_list=ranked_list.total_items,
                vintage=tasting.vintage,
            )
        )
        return entry

    def commit_session(
        self,
        session: InsertionSession,
        tasting: TastingInstance,
        actor_id: UserId | None = None,
    ) -> RankEntry:
        """완료된 세션의 Placement 커밋 (세션당 한 번만 가능)"""
        if session.state == SessionState.COMMITTED:
            raise SessionStateError(
                f"Session for {session.new_item_id} is already committed", state=session.state
            )
        if not session.is_resolved or session.placement is None:
            raise SessionStateError(
                f"Session for {session.new_item_id} is not resolved", state=session.state
            )
        entry = self.commit_placement(
            session.ranked_list,
            session.new_item_id,
            session.placement,
            tasting,
            sentiment=session.sentiment,
            actor_id=actor_id,
        )
        session.state = SessionState.COMMITTED
        return entry

    def record_tasting(
        self,
        ranked_list: RankedList,
        item_id: ItemId,
        tasting: TastingInstance,
        actor_id: UserId | None = None,
    ) -> RankEntry | None:
        """이미 순위가 있는 아이템의 새 시음 기록 (position 변화 없음)"""
        entry = self.mutator.record_tasting(ranked_list, item_id, tasting)
        if entry is None:
            logger.debug(f"record_tasting: {item_id} not in list {ranked_list.id}")
            return None

        self._notify(
            FeedEvent(
                actor_id=actor_id or ranked_list.user_id,
                event_type=FeedEventType.NEW_VINTAGE_TRIED,
                item_id=item_id,
                category_id=ranked_list.category_id,
                rank_position=entry.position,
                total_in_list=ranked_list.total_items,
                vintage=tasting.vintage,
            )
        )
        return entry

    # 3) 종합 점수
    def compute_composite(
        self,
        item_id: ItemId,
        category_id: CategoryId,
        lists: Iterable[RankedList],
        scope: CompositeScope = CompositeScope.GLOBAL,
        friend_ids: Iterable[UserId] | None = None,
    ) -> CompositeScore | None:
        with self.tracer.start_as_current_span("compute_composite") as span:
            span.set_attribute("item.id", item_id)
            span.set_attribute("composite.scope", scope.value)
            score = self.scorer.compute_composite(item_id, category_id, lists, scope, friend_ids)
            span.set_attribute("composite.computable", score is not None)
        return score

    def _notify(self, event: FeedEvent) -> None:
        """피드 이벤트 전달 (fire-and-forget)"""
        if self.feed_recorder is None:
            return
        try:
            self.feed_recorder.record(event)
        except Exception as e:
            logger.warning(
                f"Feed recorder failed for {event.event_type.value} "
                f"{event.item_id}: {e}"
            )
