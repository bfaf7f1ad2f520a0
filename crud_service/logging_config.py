"""로깅 설정 모듈.

Logging configuration for the service layer.
Modules log through ``logging.getLogger(__name__)``; this sets the root
level and format once at process start.
"""

import logging

from crud_service.config import settings


def configure_logging(level: str | None = None) -> None:
    """루트 로거를 설정합니다.

    Configure the root logger from settings.

    Args:
        level: 로그 레벨 이름, None이면 settings.LOG_LEVEL 사용
               (Level name; defaults to settings.LOG_LEVEL)
    """
    level_name: str = (level or settings.LOG_LEVEL).upper()

    # 핸들러가 이미 있으면 basicConfig는 무시되므로 레벨은 직접 지정
    # basicConfig is a no-op once handlers exist, so set the level explicitly
    logging.basicConfig(level=level_name, format=settings.LOG_FORMAT)
    logging.getLogger().setLevel(level_name)

    # SQL echo는 DEBUG 설정에서만: SQLAlchemy engine logs only in debug mode
    if not settings.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
