"""
Attendance Query Service

출석 기록 조회 (읽기 전용). 조회 실패는 치명적이지 않으므로
빈 목록을 반환하고 경고 로그만 남깁니다.
"""
from datetime import date
from typing import List, Optional

from loguru import logger

from app.auth.models import MemberContext
from app.errors import Forbidden, StoreError
from app.store import MembershipStore
from .calendar import MonthCalendar, build_month_calendar


class AttendanceQueryService:
    """출석 조회 서비스"""

    def __init__(self, store: MembershipStore):
        self.store = store

    def list_attendance_dates(self, pass_id: str) -> List[date]:
        """패스의 출석 날짜 (오름차순, 중복 없음)"""
        try:
            rows = self.store.list_attendance(pass_id)
        except StoreError as e:
            logger.warning(f"출석 기록 조회 실패 (pass={pass_id}): {e.message}")
            return []

        dates = {date.fromisoformat(str(row["session_date"])[:10]) for row in rows}
        return sorted(dates)

    def ensure_can_read(self, member: MemberContext, pass_id: str) -> bool:
        """
        패스 소유자 또는 관리자만 조회 가능

        Returns:
            패스 존재 여부 (조회 실패 시 False)
        """
        try:
            pass_row = self.store.get_pass(pass_id)
        except StoreError as e:
            logger.warning(f"패스 조회 실패 (pass={pass_id}): {e.message}")
            return False

        if not pass_row:
            return False

        if not member.is_admin and pass_row["member_id"] != member.member_id:
            raise Forbidden("You can only view your own attendance")
        return True

    def month_calendar(
        self,
        pass_id: Optional[str],
        year: int,
        month: int
    ) -> MonthCalendar:
        """패스 출석 기록을 월 달력으로 변환"""
        dates = self.list_attendance_dates(pass_id) if pass_id else []
        return build_month_calendar(year, month, dates)
