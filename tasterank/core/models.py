import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .enums import CompositeScope, FeedEventType, Sentiment

# 기본 타입 정의
UserId = str
ItemId = str
CategoryId = str  # 예: 포도 품종


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# 1) 빈티지 (합 타입: 연도 지정 | 미지정)
@dataclass(frozen=True)
class KnownVintage:
    year: int

    @property
    def display(self) -> str:
        return str(self.year)


@dataclass(frozen=True)
class UnspecifiedVintage:
    """빈티지 미지정 (NV 또는 모름)"""

    @property
    def display(self) -> str:
        return "NV"


UNSPECIFIED_VINTAGE = UnspecifiedVintage()

Vintage = KnownVintage | UnspecifiedVintage


def vintage_of(year: int | None) -> Vintage:
    """nullable 연도를 Vintage로 변환"""
    if year is None:
        return UNSPECIFIED_VINTAGE
    return KnownVintage(year)


# 2) 랭킹 데이터 모델
@dataclass
class TastingInstance:
    """
    한 아이템에 대한 한 번의 시음 기록

    순위에는 영향을 주지 않음 (순위는 비교/감정 판단으로만 결정)
    """

    vintage: Vintage = UNSPECIFIED_VINTAGE
    notes: str | None = None
    is_best: bool = True
    tasted_at: datetime = field(default_factory=_utcnow)
    id: str = field(default_factory=_new_id)


@dataclass
class RankEntry:
    """랭킹 리스트 내 한 아이템의 위치"""

    item_id: ItemId
    position: int  # 1 = 최고, 동점은 같은 값 공유
    tastings: list[TastingInstance]
    sentiment: Sentiment = Sentiment.NONE
    best_tasting_id: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    id: str = field(default_factory=_new_id)

    def __post_init__(self):
        if not self.tastings:
            raise ValueError(f"RankEntry for {self.item_id} requires at least one tasting")

    @property
    def best_tasting(self) -> TastingInstance:
        """
        대표 시음 기록

        best_tasting_id > is_best 플래그 > 첫 번째 기록 순으로 결정
        """
        if self.best_tasting_id is not None:
            for tasting in self.tastings:
                if tasting.id == self.best_tasting_id:
                    return tasting
        for tasting in self.tastings:
            if tasting.is_best:
                return tasting
        return self.tastings[0]

    @property
    def best_vintage_display(self) -> str:
        return self.best_tasting.vintage.display

    @property
    def vintages_tried(self) -> int:
        return len(self.tastings)

    def touch(self) -> None:
        self.updated_at = _utcnow()


@dataclass
class RankedList:
    """
    (사용자, 카테고리) 한 쌍의 순위 리스트

    불변식:
    - position은 1부터 시작
    - 동점 엔트리는 같은 position 값을 공유
    - 동점 그룹을 한 칸으로 보면 position 사이에 빈 칸이 없음
    """

    user_id: UserId
    category_id: CategoryId
    entries: list[RankEntry] = field(default_factory=list)
    updated_at: datetime = field(default_factory=_utcnow)
    id: str = field(default_factory=_new_id)

    @property
    def total_items(self) -> int:
        return len(self.entries)

    def entry(self, item_id: ItemId) -> RankEntry | None:
        return next((e for e in self.entries if e.item_id == item_id), None)

    def position(self, item_id: ItemId) -> int | None:
        entry = self.entry(item_id)
        return entry.position if entry else None

    def contains(self, item_id: ItemId) -> bool:
        return self.entry(item_id) is not None

    @property
    def sorted_entries(self) -> list[RankEntry]:
        """position 오름차순 (동점 내부는 삽입 순서 유지)"""
        return sorted(self.entries, key=lambda e: e.position)

    @property
    def distinct_positions(self) -> list[int]:
        return sorted({e.position for e in self.entries})

    def touch(self) -> None:
        self.updated_at = _utcnow()


# 3) 삽입 세션용 모델
@dataclass(frozen=True)
class ComparisonRequest:
    """사용자에게 보여줄 쌍 비교 요청"""

    new_item_id: ItemId
    compared_item_id: ItemId
    comparison_number: int  # 1부터 시작
    total_comparisons: int  # 최대 비교 횟수 (진행률 표시용)
    id: str = field(default_factory=_new_id)

    @property
    def progress_display(self) -> str:
        return f"comparison {self.comparison_number} of {self.total_comparisons}"


@dataclass(frozen=True)
class Placement:
    """삽입 위치 최종 결정"""

    position: int
    is_tie: bool = False
    is_fallback: bool = False  # 비교 대상을 찾지 못해 기본값(1)으로 결정된 경우
    comparisons_used: int = 0


# 4) 종합 점수 / 피드 모델
@dataclass(frozen=True)
class CompositeScore:
    """여러 사용자의 순위를 가중 평균한 백분위 (재계산 전용, 수정 불가)"""

    item_id: ItemId
    category_id: CategoryId
    scope: CompositeScope
    total_raters: int
    weighted_percentile: float  # 0~100
    computed_at: datetime = field(default_factory=_utcnow)
    id: str = field(default_factory=_new_id)

    @property
    def display_text(self) -> str:
        """예: "77th percentile across 5 raters" """
        percentile = int(round(self.weighted_percentile))
        return (
            f"{percentile}{ordinal_suffix(percentile)} percentile "
            f"across {self.total_raters} raters"
        )


def ordinal_suffix(number: int) -> str:
    tens = number % 100
    if 11 <= tens <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


@dataclass
class FeedEvent:
    """순위 변경 후 피드로 전달되는 이벤트"""

    actor_id: UserId
    event_type: FeedEventType
    item_id: ItemId
    category_id: CategoryId
    rank_position: int
    total_in_list: int
    vintage: Vintage = UNSPECIFIED_VINTAGE
    created_at: datetime = field(default_factory=_utcnow)
    id: str = field(default_factory=_new_id)

    @property
    def position_display(self) -> str:
        """예: "#2 of 15" """
        return f"#{self.rank_position} of {self.total_in_list}"

    @property
    def vintage_display(self) -> str:
        return self.vintage.display
