"""
Nomad Spirit Tracker 서버 실행
"""
import sys
from pathlib import Path

import uvicorn
from loguru import logger

from app.config import get_settings


def setup_logging(level: str, log_dir: str) -> None:
    """로깅 설정 (콘솔 + 일별 파일)"""
    Path(log_dir).mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=level
    )
    logger.add(
        f"{log_dir}/server_{{time:YYYY-MM-DD}}.log",
        rotation="1 day",
        retention="30 days",
        level="DEBUG"
    )


def main():
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)

    logger.info(f"서버 시작: http://{settings.HOST}:{settings.PORT}")
    uvicorn.run(
        "app.server:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    main()
