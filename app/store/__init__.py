"""
Store Module - 회원/패스/출석 저장소
"""
from functools import lru_cache

from app.config import StoreBackend, get_settings
from .base import AttendanceOutcome, MembershipStore, Row
from .memory import InMemoryStore


@lru_cache()
def get_store() -> MembershipStore:
    """설정된 백엔드의 저장소 반환 (프로세스당 1개)"""
    settings = get_settings()
    if settings.STORE_BACKEND == StoreBackend.MEMORY:
        return InMemoryStore()

    from database.supabase_client import get_supabase_client
    from .supabase_store import SupabaseStore
    return SupabaseStore(get_supabase_client())


__all__ = [
    "AttendanceOutcome",
    "InMemoryStore",
    "MembershipStore",
    "Row",
    "get_store",
]
