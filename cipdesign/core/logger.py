# cipdesign/core/logger.py
import sys
from pathlib import Path
from loguru import logger

# 로그 저장 경로: 실행 위치 기준 .logs/cipdesign_server.log
LOG_DIR = Path.cwd() / ".logs"
LOG_FILE = LOG_DIR / "cipdesign_server.log"


def setup_logging(*, to_file: bool = True) -> str:
    """
    Loguru 로그 설정 초기화.
    - Console: INFO 레벨 이상
    - File: DEBUG 레벨 이상 (cipdesign_server.log)
    """
    # 1. 기존 핸들러 제거 (중복 방지)
    logger.remove()

    # 2. 콘솔 출력 (stderr)
    logger.add(
        sys.stderr,
        level="INFO",
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
    )

    if not to_file:
        return ""

    # 3. 파일 출력
    # - 매일 자정 회전, 10일 보관, zip 압축
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    logger.add(
        str(LOG_FILE),
        rotation="00:00",
        retention="10 days",
        compression="zip",
        level="DEBUG",
        enqueue=True,
        encoding="utf-8",
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{line} - {message}"
    )

    return str(LOG_FILE)
