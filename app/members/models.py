"""
Member Models

대시보드 / 관리자 회원 목록 / 회원 상세 응답 모델
"""
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.attendance.calendar import MonthCalendar
from app.auth.models import MemberResponse
from app.passes.models import PassRecord


class MemberWithPasses(MemberResponse):
    """관리자 회원 목록 항목"""
    passes: List[PassRecord] = []


class PassOverview(BaseModel):
    """패스 + 출석 현황"""
    model_config = ConfigDict(populate_by_name=True)

    pass_record: Optional[PassRecord] = Field(None, alias="pass")
    remaining_sessions: int = 0
    sessions: List[bool] = []  # 사용한 세션 True
    attendance_dates: List[date] = []
    calendar: MonthCalendar


class DashboardResponse(PassOverview):
    """회원 대시보드"""
    member: MemberResponse
    is_admin: bool


class MemberDetailResponse(PassOverview):
    """관리자 회원 상세"""
    member: MemberResponse


class ProfilePictureResponse(BaseModel):
    success: bool = True
    profile_picture_url: str
