"""의존성 주입 및 서비스 초기화"""

import logging
from typing import Any

from .config import Config
from .logging_setup import configure_logging
from .ports import FeedEventRecorderPort, RankingStorePort
from .telemetry import TelemetryManager, init_telemetry

logger = logging.getLogger(__name__)


class Bootstrap:
    """서비스 인스턴스 생성 및 의존성 주입"""

    def __init__(self, config: Config):
        self.config = config

        # 인스턴스 캐시 (lazy loading)
        self._telemetry: TelemetryManager | None = None
        self._ranking_store: Any = None
        self._feed_recorder: Any = None
        self._mutator: Any = None
        self._planner: Any = None
        self._scorer: Any = None
        self._engine: Any = None

    @property
    def telemetry(self) -> TelemetryManager:
        """OpenTelemetry 관리자"""
        if self._telemetry is None:
            self._telemetry = init_telemetry(self.config)
        return self._telemetry

    def setup_logging(self) -> None:
        """애플리케이션 진입점에서 로깅 설정"""
        configure_logging(self.config)

    @property
    def ranking_store(self) -> RankingStorePort:
        """랭킹 리스트 저장소"""
        if self._ranking_store is None:
            from .ranking_store import InMemoryRankingStore

            self._ranking_store = InMemoryRankingStore()
        return self._ranking_store

    @property
    def feed_recorder(self) -> FeedEventRecorderPort | None:
        """피드 이벤트 기록기 (비활성화 시 None)"""
        if not self.config.feed_enabled:
            return None
        if self._feed_recorder is None:
            from ..feed.recorder import InMemoryFeedRecorder

            self._feed_recorder = InMemoryFeedRecorder(max_events=self.config.feed_max_events)
        return self._feed_recorder

    @property
    def mutator(self):
        if self._mutator is None:
            from ..ranking.mutator import RankMutator

            self._mutator = RankMutator()
        return self._mutator

    @property
    def planner(self):
        if self._planner is None:
            from ..ranking.planner import InsertionPlanner

            self._planner = InsertionPlanner()
        return self._planner

    @property
    def scorer(self):
        """종합 점수 계산기"""
        if self._scorer is None:
            from ..scoring.composite import CompositeScorer

            self._scorer = CompositeScorer(min_raters=self.config.composite_min_raters)
        return self._scorer

    @property
    def engine(self):
        """랭킹 엔진"""
        if self._engine is None:
            from ..ranking.engine import RankingEngine

            self._engine = RankingEngine(
                mutator=self.mutator,
                planner=self.planner,
                scorer=self.scorer,
                feed_recorder=self.feed_recorder,
                tracer=self.telemetry.get_tracer("tasterank.ranking.engine"),
                meter=self.telemetry.get_meter("tasterank.ranking.engine"),
            )
            logger.info(
                f"RankingEngine initialized: min_raters={self.config.composite_min_raters}, "
                f"feed_enabled={self.config.feed_enabled}"
            )
        return self._engine


def create_bootstrap(config: Config | None = None) -> Bootstrap:
    """
    Bootstrap 인스턴스 생성

    Args:
        config: 애플리케이션 설정 (None이면 환경변수에서 로드)

    Returns:
        Bootstrap 인스턴스

    Usage:
        >>> bootstrap = create_bootstrap()
        >>> ranked_list = bootstrap.ranking_store.get_or_create("user-1", "malbec")
        >>> session = bootstrap.engine.start_insertion(ranked_list, "wine-1")
    """
    if config is None:
        config = Config.from_env()
    return Bootstrap(config)
