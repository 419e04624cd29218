"""
Pass Models

Pydantic 모델 정의 (요청/응답 키는 웹 클라이언트 형식인 camelCase 유지)
"""
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================
# Records
# =============================================

class PassRecord(BaseModel):
    """패스"""
    id: str
    member_id: str
    total_sessions: int
    used_sessions: int
    is_active: bool
    created_at: Optional[datetime] = None

    @property
    def remaining_sessions(self) -> int:
        return self.total_sessions - self.used_sessions


class AttendanceRecord(BaseModel):
    """출석 기록"""
    id: str
    pass_id: str
    session_date: date
    created_at: Optional[datetime] = None


# =============================================
# Requests
# =============================================

class CreatePassRequest(BaseModel):
    """패스 발급 요청"""
    model_config = ConfigDict(populate_by_name=True)

    member_id: str = Field(..., alias="memberId")

    @field_validator("member_id")
    @classmethod
    def validate_member_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("memberId는 비어 있을 수 없습니다")
        return v


class MarkAttendanceRequest(BaseModel):
    """출석 체크 요청"""
    model_config = ConfigDict(populate_by_name=True)

    member_id: str = Field(..., alias="memberId")
    session_date: date = Field(..., alias="sessionDate")

    @field_validator("member_id")
    @classmethod
    def validate_member_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("memberId는 비어 있을 수 없습니다")
        return v

    @field_validator("session_date", mode="before")
    @classmethod
    def validate_session_date(cls, v):
        # 숫자는 Unix timestamp 로 해석되므로 ISO 문자열(YYYY-MM-DD)만 허용
        if isinstance(v, datetime) or not isinstance(v, (str, date)):
            raise ValueError("sessionDate는 YYYY-MM-DD 형식이어야 합니다")
        return v


# =============================================
# Responses
# =============================================

class PassStatus(BaseModel):
    """출석 체크 후 패스 상태"""
    used_sessions: int
    remaining_sessions: int
    is_active: bool


class CreatePassResponse(BaseModel):
    success: bool = True
    pass_: PassRecord = Field(..., alias="pass")

    model_config = ConfigDict(populate_by_name=True)


class MarkAttendanceResponse(BaseModel):
    """출석 체크 응답"""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    attendance: AttendanceRecord
    pass_status: PassStatus = Field(..., alias="passStatus")
    pass_deleted: bool = Field(False, alias="passDeleted")
