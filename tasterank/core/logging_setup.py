"""로깅 설정"""

import logging

from .config import Config


def configure_logging(config: Config) -> None:
    """루트 로거 설정 (애플리케이션 진입점에서 한 번 호출)"""
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )
