import os
from dataclasses import dataclass

from dotenv import load_dotenv


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class Config:
    """애플리케이션 설정"""

    # 종합 점수 설정
    composite_min_raters: int = 3  # 종합 점수 계산에 필요한 최소 평가자 수

    # 피드 설정
    feed_enabled: bool = True  # 커밋 후 피드 이벤트 기록 여부
    feed_max_events: int = 500  # 메모리 피드에 보관할 최대 이벤트 수

    # 로깅 설정
    log_level: str = "INFO"

    # OpenTelemetry 설정
    otel_enabled: bool = False  # OpenTelemetry 활성화
    otel_sample_rate: float = 1.0  # 샘플링 비율 (0.0~1.0)
    otel_service_name: str = "tasterank"  # 서비스 이름
    environment: str = "development"  # 환경 (development, staging, production)

    def __post_init__(self):
        if self.composite_min_raters < 1:
            raise ValueError(
                f"composite_min_raters must be >= 1, got {self.composite_min_raters}"
            )
        if self.feed_max_events < 1:
            raise ValueError(f"feed_max_events must be >= 1, got {self.feed_max_events}")

    @classmethod
    def from_env(cls) -> "Config":
        """환경변수에서 설정 로드 (.env 파일 자동 로드)"""
        load_dotenv()

        return cls(
            composite_min_raters=int(os.getenv("COMPOSITE_MIN_RATERS", "3")),
            feed_enabled=_env_bool("FEED_ENABLED", "true"),
            feed_max_events=int(os.getenv("FEED_MAX_EVENTS", "500")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            otel_enabled=_env_bool("OTEL_ENABLED", "false"),
            otel_sample_rate=float(os.getenv("OTEL_SAMPLE_RATE", "1.0")),
            otel_service_name=os.getenv("OTEL_SERVICE_NAME", "tasterank"),
            environment=os.getenv("ENVIRONMENT", "development"),
        )
