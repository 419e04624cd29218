"""
Supabase 데이터베이스 클라이언트
"""
from typing import Optional

from loguru import logger
from supabase import Client, create_client

from app.config import get_settings


# 싱글톤 클라이언트 (service role key, 서버 전용)
_supabase_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Supabase 클라이언트 인스턴스 반환 (싱글톤)
    """
    global _supabase_client
    if _supabase_client is None:
        settings = get_settings()
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_KEY:
            raise ValueError("SUPABASE_URL과 SUPABASE_SERVICE_KEY 환경변수를 설정해주세요")
        _supabase_client = create_client(
            settings.SUPABASE_URL,
            settings.SUPABASE_SERVICE_KEY
        )
        logger.info("Supabase 클라이언트 초기화 완료")
    return _supabase_client
