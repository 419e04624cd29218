"""
Pass API Router

- POST /api/passes       패스 발급 (관리자)
- POST /api/attendance   출석 체크 (관리자)
"""
from fastapi import APIRouter, Depends

from app.auth.dependencies import require_admin
from app.auth.models import MemberContext
from .models import (
    CreatePassRequest,
    CreatePassResponse,
    MarkAttendanceRequest,
    MarkAttendanceResponse,
)
from .service import PassLifecycleService, get_pass_service

router = APIRouter(tags=["Passes"])


@router.post("/passes", response_model=CreatePassResponse, response_model_by_alias=True)
async def create_pass(
    body: CreatePassRequest,
    admin: MemberContext = Depends(require_admin),
    service: PassLifecycleService = Depends(get_pass_service)
):
    """
    패스 발급

    회원에게 활성 패스가 없을 때만 새 패스(기본 8회)를 발급합니다.
    """
    new_pass = await service.create_pass(body.member_id)
    return CreatePassResponse(success=True, pass_=new_pass)


@router.post("/attendance", response_model=MarkAttendanceResponse, response_model_by_alias=True)
async def mark_attendance(
    body: MarkAttendanceRequest,
    admin: MemberContext = Depends(require_admin),
    service: PassLifecycleService = Depends(get_pass_service)
):
    """
    출석 체크

    회원의 활성 패스에 출석을 기록하고 사용 횟수를 1 증가시킵니다.
    마지막 세션이면 설정된 정책에 따라 패스를 비활성화하거나 삭제합니다.
    """
    result = await service.mark_attendance(body.member_id, body.session_date)
    return MarkAttendanceResponse(
        success=True,
        attendance=result.attendance,
        pass_status=result.status,
        pass_deleted=result.pass_deleted,
    )
