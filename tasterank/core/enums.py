"""프로젝트 전역 Enum 및 상수 정의"""

from enum import Enum


class Sentiment(str, Enum):
    """시음 직후의 대략적인 선호도 (탐색 범위 시딩용)"""

    LOVED = "loved"
    OKAY = "okay"
    DIDNT_LOVE = "didnt_love"
    NONE = "none"  # 감정 정보 없음

    @property
    def display_text(self) -> str:
        """UI 표시용 문구"""
        return {
            Sentiment.LOVED: "Loved it",
            Sentiment.OKAY: "It was okay",
            Sentiment.DIDNT_LOVE: "Didn't love it",
            Sentiment.NONE: "",
        }[self]

    def narrows_search(self) -> bool:
        """탐색 범위를 절반으로 좁히는 감정인지"""
        return self in {Sentiment.LOVED, Sentiment.DIDNT_LOVE}


class ComparisonVerdict(str, Enum):
    """쌍 비교 결과"""

    PREFER_FIRST = "prefer_first"  # 새 아이템이 더 좋음
    PREFER_SECOND = "prefer_second"  # 비교 대상이 더 좋음
    TIE = "tie"


class SessionState(str, Enum):
    """삽입 세션 상태"""

    AWAITING_FIRST_INPUT = "awaiting_first_input"
    AWAITING_COMPARISON_ANSWER = "awaiting_comparison_answer"
    RESOLVED = "resolved"
    COMMITTED = "committed"  # 리스트에 반영 완료 (재커밋 불가)


class CompositeScope(str, Enum):
    """종합 점수 범위"""

    GLOBAL = "global"
    FRIENDS = "friends"


class FeedEventType(str, Enum):
    """피드 이벤트 타입"""

    ITEM_RANKED = "item_ranked"
    ITEM_RERANKED = "item_reranked"  # 외부 피드 UI의 재평가 흐름에서 기록 (엔진은 발행하지 않음)
    NEW_VINTAGE_TRIED = "new_vintage_tried"

    @property
    def action_text(self) -> str:
        """피드 문장에 쓰이는 동사구"""
        return {
            FeedEventType.ITEM_RANKED: "ranked",
            FeedEventType.ITEM_RERANKED: "re-ranked",
            FeedEventType.NEW_VINTAGE_TRIED: "tried a new vintage of",
        }[self]
