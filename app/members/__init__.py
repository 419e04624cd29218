"""
Member Module

회원 프로비저닝, 대시보드, 관리자 회원 조회, 프로필 사진
"""
from .router import router as members_router
from .service import MemberService, get_member_service

__all__ = ["members_router", "MemberService", "get_member_service"]
