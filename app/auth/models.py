"""
Auth Models - Pydantic 모델 정의
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


# =============================================
# Identity / Context
# =============================================

class AuthIdentity(BaseModel):
    """토큰에서 확인한 인증 사용자"""
    user_id: str
    email: Optional[str] = None
    full_name: Optional[str] = None  # user_metadata.full_name

    def default_display_name(self) -> str:
        """회원 최초 생성 시 표시 이름"""
        if self.full_name and self.full_name.strip():
            return self.full_name.strip()
        if self.email and "@" in self.email:
            return self.email.split("@")[0]
        return "Member"


class MemberContext(BaseModel):
    """현재 요청의 회원 컨텍스트"""
    member_id: str
    full_name: str
    email: Optional[str] = None
    is_admin: bool = False


# =============================================
# Response Models
# =============================================

class MemberResponse(BaseModel):
    """회원 정보"""
    id: str
    full_name: str
    email: Optional[str] = None
    profile_picture_url: Optional[str] = None
    is_admin: bool = False
    created_at: Optional[datetime] = None

