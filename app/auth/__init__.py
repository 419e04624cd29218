"""
Auth Module - 접근 제어 (Bearer 토큰 + 관리자 플래그)
"""
from .dependencies import (
    JWTTokenVerifier,
    SupabaseTokenVerifier,
    TokenVerifier,
    get_current_member,
    get_identity,
    get_token_verifier,
    provision_member,
    require_admin,
)
from .models import AuthIdentity, MemberContext, MemberResponse

__all__ = [
    "AuthIdentity",
    "JWTTokenVerifier",
    "MemberContext",
    "MemberResponse",
    "SupabaseTokenVerifier",
    "TokenVerifier",
    "get_current_member",
    "get_identity",
    "get_token_verifier",
    "provision_member",
    "require_admin",
]
