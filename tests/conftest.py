"""
Pytest configuration and fixtures for Nomad Spirit Tracker tests
"""
import os
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# 테스트는 메모리 저장소 + 로컬 JWT 검증으로 실행
TEST_JWT_SECRET = "test-jwt-secret-for-nomad-spirit"
os.environ["STORE_BACKEND"] = "memory"
os.environ["SUPABASE_JWT_SECRET"] = TEST_JWT_SECRET
os.environ["PASS_TOTAL_SESSIONS"] = "8"
os.environ["PASS_COMPLETION_POLICY"] = "deactivate"

from fastapi.testclient import TestClient  # noqa: E402
from jose import jwt  # noqa: E402

from app.auth.dependencies import JWTTokenVerifier, get_token_verifier  # noqa: E402
from app.config import get_settings  # noqa: E402
from app.members.avatar import get_avatar_storage  # noqa: E402
from app.passes.locks import KeyedLock  # noqa: E402
from app.store import InMemoryStore, get_store  # noqa: E402

ADMIN_ID = "00000000-0000-0000-0000-00000000a001"
MEMBER_ID = "00000000-0000-0000-0000-00000000b001"
OTHER_MEMBER_ID = "00000000-0000-0000-0000-00000000b002"


def make_token(user_id: str, email: str = None, full_name: str = None, secret: str = TEST_JWT_SECRET) -> str:
    """Supabase 형식 액세스 토큰 생성"""
    payload = {"sub": user_id, "aud": "authenticated", "role": "authenticated"}
    if email:
        payload["email"] = email
    if full_name:
        payload["user_metadata"] = {"full_name": full_name}
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_header(user_id: str, **kwargs) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id, **kwargs)}"}


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """환경 변수 변경이 테스트 간에 새지 않도록"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store():
    """빈 메모리 저장소"""
    return InMemoryStore()


@pytest.fixture
def seeded_store(store):
    """관리자 1명 + 회원 2명"""
    store.insert_member({"id": ADMIN_ID, "full_name": "Admin", "email": "admin@nomad.test", "is_admin": True})
    store.insert_member({"id": MEMBER_ID, "full_name": "Kim Minji", "email": "minji@nomad.test"})
    store.insert_member({"id": OTHER_MEMBER_ID, "full_name": "Alex Park", "email": "alex@nomad.test"})
    return store


@pytest.fixture
def locks():
    """테스트마다 새 회원 락"""
    return KeyedLock()


@pytest.fixture
def avatar_storage():
    """프로필 사진 저장소 (None = 미설정)"""
    return None


@pytest.fixture
def client(seeded_store, avatar_storage):
    """의존성을 테스트 저장소로 교체한 TestClient"""
    from app.server import app

    app.dependency_overrides[get_store] = lambda: seeded_store
    app.dependency_overrides[get_token_verifier] = lambda: JWTTokenVerifier(TEST_JWT_SECRET)
    app.dependency_overrides[get_avatar_storage] = lambda: avatar_storage

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return auth_header(ADMIN_ID, email="admin@nomad.test")


@pytest.fixture
def member_headers():
    return auth_header(MEMBER_ID, email="minji@nomad.test")


@pytest.fixture
def other_headers():
    return auth_header(OTHER_MEMBER_ID, email="alex@nomad.test")
