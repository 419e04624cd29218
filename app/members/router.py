"""
Member API Router

- GET  /api/me                      내 회원 정보 (최초 접속 시 생성)
- GET  /api/me/dashboard            내 패스 / 출석 현황
- POST /api/me/profile-picture      프로필 사진 교체
- GET  /api/admin/members           회원 목록 (관리자)
- GET  /api/admin/members/{id}      회원 상세 (관리자)
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile

from app.auth.dependencies import get_current_member, get_identity, require_admin
from app.auth.models import AuthIdentity, MemberContext, MemberResponse
from .models import (
    DashboardResponse,
    MemberDetailResponse,
    MemberWithPasses,
    ProfilePictureResponse,
)
from .service import MemberService, get_member_service

router = APIRouter(tags=["Members"])


# =============================================
# 내 정보
# =============================================

@router.get("/me", response_model=MemberResponse)
async def get_me(
    identity: AuthIdentity = Depends(get_identity),
    service: MemberService = Depends(get_member_service)
):
    """내 회원 정보 (없으면 생성)"""
    return MemberResponse(**service.ensure_member_exists(identity))


@router.get("/me/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    identity: AuthIdentity = Depends(get_identity),
    service: MemberService = Depends(get_member_service)
):
    """
    회원 대시보드

    활성 패스, 남은 횟수, 세션 진행 현황, 해당 월 출석 달력
    """
    return service.dashboard(identity, year, month)


@router.post("/me/profile-picture", response_model=ProfilePictureResponse)
async def upload_profile_picture(
    file: UploadFile = File(...),
    member: MemberContext = Depends(get_current_member),
    service: MemberService = Depends(get_member_service)
):
    """프로필 사진 업로드 (압축 후 기존 사진 교체)"""
    public_url = await service.replace_profile_picture(member, file)
    return ProfilePictureResponse(success=True, profile_picture_url=public_url)


# =============================================
# 관리자
# =============================================

@router.get("/admin/members", response_model=List[MemberWithPasses])
async def list_members(
    admin: MemberContext = Depends(require_admin),
    service: MemberService = Depends(get_member_service)
):
    """회원 목록 (관리자 제외, 이름순)"""
    return service.list_members_with_passes()


@router.get("/admin/members/{member_id}", response_model=MemberDetailResponse)
async def get_member_detail(
    member_id: str,
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    admin: MemberContext = Depends(require_admin),
    service: MemberService = Depends(get_member_service)
):
    """회원 상세: 최근 패스와 출석 달력"""
    return service.member_detail(member_id, year, month)
