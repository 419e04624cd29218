"""
Supabase 마이그레이션 실행 스크립트

Supabase Python 클라이언트는 임의 SQL 실행을 지원하지 않으므로
테이블 존재 여부를 확인하고, 없으면 SQL Editor 에서 실행할 SQL 을 출력합니다.
"""
import sys
from pathlib import Path

from loguru import logger

from database.supabase_client import get_supabase_client

MIGRATIONS_DIR = Path(__file__).parent / "migrations"
REQUIRED_TABLES = ["members", "passes", "attendance"]


def missing_tables(client) -> list:
    """존재하지 않는 테이블 목록"""
    missing = []
    for table in REQUIRED_TABLES:
        try:
            client.table(table).select("id").limit(1).execute()
        except Exception as e:
            if "does not exist" in str(e) or "relation" in str(e).lower():
                missing.append(table)
            else:
                logger.warning(f"{table} 테이블 확인 중 오류: {e}")
    return missing


def run_migration() -> bool:
    """마이그레이션 SQL 안내"""
    try:
        client = get_supabase_client()
    except ValueError as e:
        logger.error(str(e))
        return False

    missing = missing_tables(client)
    if not missing:
        logger.info("✅ members / passes / attendance 테이블이 이미 존재합니다")
        return True

    logger.info(f"누락된 테이블: {', '.join(missing)}")
    logger.info("=" * 60)
    logger.info("Supabase Dashboard → SQL Editor 에서 아래 SQL을 실행해주세요")
    logger.info("=" * 60)

    for migration_file in sorted(MIGRATIONS_DIR.glob("*.sql")):
        logger.info(f"-- {migration_file.name}")
        print("\n" + migration_file.read_text(encoding="utf-8") + "\n")

    return True


if __name__ == "__main__":
    logger.remove()
    logger.add(sys.stdout, format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}")
    sys.exit(0 if run_migration() else 1)
