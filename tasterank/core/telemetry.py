"""OpenTelemetry 초기화 및 관리

이 모듈은 OpenTelemetry의 Trace와 Metric을 설정합니다.
- 커밋/종합 점수 계산 span
- 비교 응답 횟수 counter
- 샘플링 설정
"""

import logging
from typing import Optional, Sequence

from opentelemetry import metrics, trace
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import (
    ConsoleMetricExporter,
    MetricReader,
    PeriodicExportingMetricReader,
)
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

logger = logging.getLogger(__name__)


class TelemetryManager:
    """OpenTelemetry 초기화 및 관리"""

    def __init__(
        self,
        service_name: str,
        service_version: str = "0.1.0",
        environment: str = "development",
        enabled: bool = True,
        sample_rate: float = 1.0,
        span_exporter: SpanExporter | None = None,
        metric_readers: Sequence[MetricReader] | None = None,
    ):
        """
        Args:
            span_exporter: span 내보내기 (기본: ConsoleSpanExporter)
            metric_readers: metric reader 목록 (기본: ConsoleMetricExporter 주기 내보내기)
        """
        self.enabled = enabled
        self.service_name = service_name
        self.tracer_provider: TracerProvider | None = None
        self.meter_provider: MeterProvider | None = None

        if not enabled:
            logger.info("OpenTelemetry disabled")
            return

        resource = Resource.create(
            {
                SERVICE_NAME: service_name,
                SERVICE_VERSION: service_version,
                "deployment.environment": environment,
            }
        )

        # Trace Provider 설정
        self.tracer_provider = TracerProvider(
            resource=resource, sampler=TraceIdRatioBased(sample_rate)
        )
        self.tracer_provider.add_span_processor(
            BatchSpanProcessor(span_exporter or ConsoleSpanExporter())
        )
        trace.set_tracer_provider(self.tracer_provider)

        # Metric Provider 설정
        if metric_readers is None:
            metric_readers = [PeriodicExportingMetricReader(ConsoleMetricExporter())]
        self.meter_provider = MeterProvider(resource=resource, metric_readers=list(metric_readers))
        metrics.set_meter_provider(self.meter_provider)

        logger.info(
            f"OpenTelemetry initialized: service={service_name}, sample_rate={sample_rate}"
        )

    def get_tracer(self, name: str):
        """Tracer 가져오기"""
        if self.tracer_provider is None:
            return trace.get_tracer(name)
        # 전역 provider는 프로세스당 한 번만 설정되므로 자신의 provider를 직접 사용
        return self.tracer_provider.get_tracer(name, self.service_name)

    def get_meter(self, name: str):
        """Meter 가져오기"""
        if self.meter_provider is None:
            return metrics.get_meter(name)
        return self.meter_provider.get_meter(name, self.service_name)

    def force_flush(self) -> None:
        """대기 중인 span/metric 즉시 내보내기"""
        if self.tracer_provider is not None:
            self.tracer_provider.force_flush()
        if self.meter_provider is not None:
            self.meter_provider.force_flush()


# 전역 인스턴스 (Bootstrap에서 초기화)
_telemetry_manager: Optional[TelemetryManager] = None


def init_telemetry(config) -> TelemetryManager:
    """TelemetryManager 초기화

    Args:
        config: Config 인스턴스

    Returns:
        TelemetryManager 인스턴스
    """
    global _telemetry_manager
    _telemetry_manager = TelemetryManager(
        service_name=config.otel_service_name,
        enabled=config.otel_enabled,
        sample_rate=config.otel_sample_rate,
        environment=config.environment,
    )
    return _telemetry_manager


def get_tracer(name: str):
    """편의 함수: Tracer 가져오기 (OTEL 비활성화 시 NoOp tracer)"""
    if _telemetry_manager:
        return _telemetry_manager.get_tracer(name)
    return trace.get_tracer(name)


def get_meter(name: str):
    """편의 함수: Meter 가져오기 (OTEL 비활성화 시 NoOp meter)"""
    if _telemetry_manager:
        return _telemetry_manager.get_meter(name)
    return metrics.get_meter(name)
