"""
Attendance API Router

- GET /api/passes/{pass_id}/attendance  출석 날짜 목록
- GET /api/passes/{pass_id}/calendar    월 달력
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from app.auth.dependencies import get_current_member
from app.auth.models import MemberContext
from app.store import MembershipStore, get_store
from .calendar import MonthCalendar
from .service import AttendanceQueryService

router = APIRouter(prefix="/passes", tags=["Attendance"])


class AttendanceDatesResponse(BaseModel):
    pass_id: str
    dates: List[date]


def get_attendance_service(store: MembershipStore = Depends(get_store)) -> AttendanceQueryService:
    return AttendanceQueryService(store)


@router.get("/{pass_id}/attendance", response_model=AttendanceDatesResponse)
async def list_attendance(
    pass_id: str,
    member: MemberContext = Depends(get_current_member),
    service: AttendanceQueryService = Depends(get_attendance_service)
):
    """
    패스 출석 날짜 (오름차순)

    기록이 없거나 조회에 실패하면 빈 목록을 반환합니다.
    """
    if not service.ensure_can_read(member, pass_id):
        return AttendanceDatesResponse(pass_id=pass_id, dates=[])
    return AttendanceDatesResponse(pass_id=pass_id, dates=service.list_attendance_dates(pass_id))


@router.get("/{pass_id}/calendar", response_model=MonthCalendar)
async def get_calendar(
    pass_id: str,
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    member: MemberContext = Depends(get_current_member),
    service: AttendanceQueryService = Depends(get_attendance_service)
):
    """패스 출석 월 달력 (월요일 시작). 기본값은 이번 달"""
    today = date.today()
    year = year or today.year
    month = month or today.month

    readable = service.ensure_can_read(member, pass_id)
    return service.month_calendar(pass_id if readable else None, year, month)
