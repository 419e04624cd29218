"""
Access Guard

Bearer 토큰 → 인증 사용자 → 회원 컨텍스트 → 관리자 권한 확인.
회원 레코드가 없는 인증 사용자는 최초 접속 시 일반 회원으로 생성되고,
결과는 FastAPI 의존성으로 각 요청 핸들러에 명시적으로 전달됩니다.
"""
from abc import ABC, abstractmethod
from typing import Optional

from fastapi import Depends, Request
from jose import JWTError, jwt
from loguru import logger

from app.config import get_settings
from app.errors import Conflict, Forbidden, Unauthenticated
from app.store import MembershipStore, Row, get_store
from .models import AuthIdentity, MemberContext


class TokenVerifier(ABC):
    """액세스 토큰 검증기"""

    @abstractmethod
    def verify(self, token: str) -> AuthIdentity:
        """유효하지 않으면 Unauthenticated"""


class JWTTokenVerifier(TokenVerifier):
    """Supabase JWT 를 프로젝트 JWT secret 으로 로컬 검증 (HS256)"""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self.secret = secret
        self.algorithm = algorithm

    def verify(self, token: str) -> AuthIdentity:
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"verify_aud": False}
            )
        except JWTError as e:
            raise Unauthenticated(f"Invalid token: {e}") from e

        user_id = payload.get("sub")
        if not user_id:
            raise Unauthenticated("Invalid token: missing subject")

        metadata = payload.get("user_metadata") or {}
        return AuthIdentity(
            user_id=str(user_id),
            email=payload.get("email"),
            full_name=metadata.get("full_name"),
        )


class SupabaseTokenVerifier(TokenVerifier):
    """Supabase Auth API 로 토큰 검증"""

    def __init__(self, client):
        self.client = client

    def verify(self, token: str) -> AuthIdentity:
        try:
            response = self.client.auth.get_user(token)
        except Exception as e:
            raise Unauthenticated(f"Invalid token: {e}") from e

        user = response.user if response else None
        if not user:
            raise Unauthenticated("Invalid token")

        metadata = getattr(user, "user_metadata", None) or {}
        return AuthIdentity(
            user_id=str(user.id),
            email=getattr(user, "email", None),
            full_name=metadata.get("full_name"),
        )


def get_token_verifier() -> TokenVerifier:
    """JWT secret 이 설정되어 있으면 로컬 검증, 아니면 Supabase Auth"""
    settings = get_settings()
    if settings.SUPABASE_JWT_SECRET:
        return JWTTokenVerifier(settings.SUPABASE_JWT_SECRET)

    from database.supabase_client import get_supabase_client
    return SupabaseTokenVerifier(get_supabase_client())


def get_bearer_token(request: Request) -> str:
    """Authorization: Bearer <token> 추출"""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise Unauthenticated("Missing or invalid authorization header")

    token = auth_header[len("Bearer "):].strip()
    if not token:
        raise Unauthenticated("Missing or invalid authorization header")
    return token


async def get_identity(
    request: Request,
    verifier: TokenVerifier = Depends(get_token_verifier)
) -> AuthIdentity:
    """현재 요청의 인증 사용자"""
    return verifier.verify(get_bearer_token(request))


def provision_member(
    store: MembershipStore,
    identity: AuthIdentity,
    profile_picture_url: Optional[str] = None
) -> Row:
    """
    최초 접속 회원 레코드 생성 (일반 회원)

    동시 최초 접속으로 Conflict 가 나면 먼저 생성된 레코드를 반환합니다.
    """
    new_member = {
        "id": identity.user_id,
        "full_name": identity.default_display_name(),
        "email": identity.email,
        "profile_picture_url": profile_picture_url,
        "is_admin": False,
    }
    try:
        member = store.insert_member(new_member)
        logger.info(f"회원 생성: {member['full_name']} ({member['id']})")
    except Conflict:
        member = store.get_member(identity.user_id)
        if not member:
            raise
    return member


def _to_context(member: Row, identity: AuthIdentity) -> MemberContext:
    return MemberContext(
        member_id=member["id"],
        full_name=member["full_name"],
        email=member.get("email") or identity.email,
        is_admin=bool(member.get("is_admin")),
    )


def load_member_context(store: MembershipStore, identity: AuthIdentity) -> Optional[MemberContext]:
    """members 테이블에서 회원 컨텍스트 조회 (없으면 None)"""
    member = store.get_member(identity.user_id)
    if not member:
        return None
    return _to_context(member, identity)


async def get_current_member(
    identity: AuthIdentity = Depends(get_identity),
    store: MembershipStore = Depends(get_store)
) -> MemberContext:
    """
    현재 로그인한 회원

    회원 레코드가 없으면 최초 접속으로 보고 일반 회원으로 생성합니다.
    """
    member = store.get_member(identity.user_id)
    if not member:
        member = provision_member(store, identity)
    return _to_context(member, identity)


def require_admin(member: MemberContext = Depends(get_current_member)) -> MemberContext:
    """관리자 권한 필요"""
    if not member.is_admin:
        raise Forbidden("Admin access required")
    return member
