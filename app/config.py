"""
App Config - 환경 설정
"""
from enum import Enum
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

load_dotenv()


class PassCompletionPolicy(str, Enum):
    """마지막 세션 사용 후 패스 처리 방식"""
    DEACTIVATE = "deactivate"  # 비활성화 후 보존 (출석 기록 유지)
    PURGE = "purge"            # 패스 + 출석 기록 삭제


class StoreBackend(str, Enum):
    """데이터 저장소 종류"""
    SUPABASE = "supabase"
    MEMORY = "memory"


class Settings(BaseSettings):
    """서비스 설정"""

    # Supabase
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_KEY: str = ""
    SUPABASE_JWT_SECRET: str = ""  # 설정 시 토큰을 로컬에서 검증

    STORE_BACKEND: StoreBackend = StoreBackend.SUPABASE

    # 패스
    PASS_TOTAL_SESSIONS: int = Field(default=8, ge=1)
    PASS_COMPLETION_POLICY: PassCompletionPolicy = PassCompletionPolicy.DEACTIVATE

    # 프로필 사진
    PROFILE_PICTURE_BUCKET: str = "profile_pictures"
    PROFILE_PICTURE_MAX_DIMENSION: int = 300
    PROFILE_PICTURE_MAX_BYTES: int = 200 * 1024
    UPLOAD_MAX_BYTES: int = 10 * 1024 * 1024

    # 백업
    BACKUP_FILENAME_PREFIX: str = "nomad-spirit-backup"

    # 서버 / 로깅
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
