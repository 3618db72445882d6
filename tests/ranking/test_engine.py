"""RankingEngine 테스트 (세션 → 커밋 → 피드)"""

import pytest

from tasterank.core.enums import (
    ComparisonVerdict,
    CompositeScope,
    FeedEventType,
    Sentiment,
    SessionState,
)
from tasterank.core.errors import RankingError, SessionStateError
from tasterank.core.models import (
    ComparisonRequest,
    KnownVintage,
    Placement,
    RankedList,
    TastingInstance,
)
from tasterank.feed.recorder import InMemoryFeedRecorder
from tasterank.ranking.engine import RankingEngine


class FailingRecorder:
    """항상 실패하는 피드 기록기"""

    def __init__(self):
        self.calls = 0

    def record(self, event):
        self.calls += 1
        raise RuntimeError("feed backend unavailable")


@pytest.fixture
def recorder():
    return InMemoryFeedRecorder()


@pytest.fixture
def engine(recorder):
    return RankingEngine(feed_recorder=recorder)


def _positions(ranked_list):
    return {e.item_id: e.position for e in ranked_list.entries}


def test_end_to_end_scenario(engine, recorder):
    """A 첫 배치 → B 비교 후 1위 → C 동점"""
    ranked_list = RankedList(user_id="me", category_id="malbec")

    # A: 빈 리스트, 비교 없음
    session_a = engine.start_insertion(ranked_list, "A", Sentiment.OKAY)
    assert session_a.is_resolved
    assert session_a.current_request is None
    assert session_a.placement.position == 1
    assert session_a.comparisons_answered == 0
    engine.commit_session(session_a, TastingInstance())
    assert _positions(ranked_list) == {"A": 1}

    # B: 첫 비교 대상은 A, B가 더 좋음 → 1위, A는 2위로 밀림
    session_b = engine.start_insertion(ranked_list, "B")
    assert session_b.current_request.compared_item_id == "A"
    result = engine.answer_comparison(session_b, ComparisonVerdict.PREFER_FIRST)
    assert result == Placement(position=1, comparisons_used=1)
    engine.commit_session(session_b, TastingInstance())
    assert _positions(ranked_list) == {"B": 1, "A": 2}

    # C: LOVED → 상위 절반의 첫 아이템(B)과 비교, 동점 → 재번호 없음
    session_c = engine.start_insertion(ranked_list, "C", Sentiment.LOVED)
    assert session_c.candidate_sequence == ["B"]
    assert session_c.current_request.compared_item_id == "B"
    result = engine.answer_comparison(session_c, ComparisonVerdict.TIE)
    assert result.is_tie
    assert result.position == 1
    engine.commit_session(session_c, TastingInstance())

    assert _positions(ranked_list) == {"B": 1, "C": 1, "A": 2}
    assert ranked_list.distinct_positions == [1, 2]
    assert ranked_list.entry("C").sentiment == Sentiment.LOVED

    events = recorder.events()
    assert [e.item_id for e in events] == ["C", "B", "A"]
    assert all(e.event_type == FeedEventType.ITEM_RANKED for e in events)


def test_commit_notifies_feed(engine, recorder):
    ranked_list = RankedList(user_id="me", category_id="pinot")
    tasting = TastingInstance(vintage=KnownVintage(2018))

    engine.commit_placement(ranked_list, "A", Placement(position=1), tasting, actor_id="actor-9")

    event = recorder.events()[0]
    assert event.actor_id == "actor-9"
    assert event.item_id == "A"
    assert event.category_id == "pinot"
    assert event.rank_position == 1
    assert event.total_in_list == 1
    assert event.vintage_display == "2018"
    assert event.position_display == "#1 of 1"


def test_commit_actor_defaults_to_list_owner(engine, recorder, make_list):
    ranked_list = make_list(["A", "B"], user_id="owner")

    engine.commit_placement(ranked_list, "X", Placement(position=2), TastingInstance())

    event = recorder.events()[0]
    assert event.actor_id == "owner"
    assert event.position_display == "#2 of 3"


def test_feed_failure_does_not_roll_back(make_list):
    """피드 기록 실패는 순위 변경에 영향 없음"""
    failing = FailingRecorder()
    engine = RankingEngine(feed_recorder=failing)
    ranked_list = make_list(["A", "B"])

    entry = engine.commit_placement(ranked_list, "X", Placement(position=1), TastingInstance())

    assert failing.calls == 1
    assert entry.position == 1
    assert _positions(ranked_list) == {"X": 1, "A": 2, "B": 3}


def test_engine_without_recorder(make_list):
    engine = RankingEngine()
    ranked_list = make_list(["A"])

    engine.commit_placement(ranked_list, "X", Placement(position=2), TastingInstance())

    assert _positions(ranked_list) == {"A": 1, "X": 2}


def test_start_insertion_rejects_ranked_item(engine, make_list):
    ranked_list = make_list(["A", "B"])

    with pytest.raises(RankingError):
        engine.start_insertion(ranked_list, "A")


def test_commit_unresolved_session_raises(engine, make_list):
    ranked_list = make_list(["A", "B"])
    session = engine.start_insertion(ranked_list, "X")

    with pytest.raises(SessionStateError):
        engine.commit_session(session, TastingInstance())


def test_commit_session_twice_raises(engine, recorder):
    """커밋된 세션은 다시 커밋할 수 없고 리스트는 그대로"""
    ranked_list = RankedList(user_id="me", category_id="malbec")
    session = engine.start_insertion(ranked_list, "A")
    engine.commit_session(session, TastingInstance())

    with pytest.raises(SessionStateError) as exc_info:
        engine.commit_session(session, TastingInstance())

    assert exc_info.value.state == SessionState.COMMITTED
    assert session.state == SessionState.COMMITTED
    assert [(e.item_id, e.position) for e in ranked_list.entries] == [("A", 1)]
    assert len(recorder) == 1


def test_commit_placement_rejects_ranked_item(engine, recorder, make_list):
    ranked_list = make_list(["A", "B"])

    with pytest.raises(RankingError):
        engine.commit_placement(ranked_list, "A", Placement(position=1), TastingInstance())

    assert _positions(ranked_list) == {"A": 1, "B": 2}
    assert len(recorder) == 0


def test_commit_placement_twice_keeps_single_entry(engine, make_list):
    ranked_list = RankedList(user_id="me", category_id="malbec")
    engine.commit_placement(ranked_list, "A", Placement(position=1), TastingInstance())

    with pytest.raises(RankingError):
        engine.commit_placement(ranked_list, "A", Placement(position=1), TastingInstance())

    assert ranked_list.total_items == 1
    assert ranked_list.position("A") == 1


def test_full_session_keeps_order(engine, make_oracle):
    """일관된 응답으로 여러 아이템을 넣으면 실제 선호 순서가 됨"""
    true_order = ["w3", "w7", "w1", "w9", "w0", "w5", "w2", "w8", "w6", "w4"]
    ranked_list = RankedList(user_id="me", category_id="syrah")

    for item_id in ["w0", "w1", "w2", "w3", "w4", "w5", "w6", "w7", "w8", "w9"]:
        session = engine.start_insertion(ranked_list, item_id)
        answer = make_oracle(true_order, item_id)
        result = session.current_request
        while isinstance(result, ComparisonRequest):
            result = engine.answer_comparison(session, answer(result.compared_item_id))
        engine.commit_session(session, TastingInstance())

    assert [e.item_id for e in ranked_list.sorted_entries] == true_order
    assert sorted(e.position for e in ranked_list.entries) == list(range(1, 11))


def test_fallback_placement_is_committed_at_first(engine, make_list):
    ranked_list = make_list(["A", "B", "C"])
    session = engine.start_insertion(ranked_list, "X")
    ranked_list.entries = [e for e in ranked_list.entries if e.item_id != "B"]

    result = engine.answer_comparison(session, ComparisonVerdict.PREFER_SECOND)
    engine.commit_session(session, TastingInstance())

    assert result.is_fallback
    assert ranked_list.position("X") == 1


def test_record_tasting_emits_new_vintage_event(engine, recorder, make_list):
    ranked_list = make_list(["A", "B"])
    tasting = TastingInstance(vintage=KnownVintage(2020))

    entry = engine.record_tasting(ranked_list, "B", tasting)

    assert entry.position == 2
    assert entry.vintages_tried == 2
    event = recorder.events()[0]
    assert event.event_type == FeedEventType.NEW_VINTAGE_TRIED
    assert event.vintage_display == "2020"
    assert event.event_type.action_text == "tried a new vintage of"


def test_record_tasting_unknown_item(engine, recorder, make_list):
    ranked_list = make_list(["A"])

    assert engine.record_tasting(ranked_list, "ghost", TastingInstance()) is None
    assert len(recorder) == 0


def test_engine_compute_composite(engine, make_list):
    lists = [
        make_list(["A", "B"], user_id="u1"),
        make_list(["B", "A"], user_id="u2"),
        make_list(["A"], user_id="u3"),
    ]

    score = engine.compute_composite("A", "malbec", lists)

    assert score is not None
    assert score.total_raters == 3
    assert score.scope == CompositeScope.GLOBAL
