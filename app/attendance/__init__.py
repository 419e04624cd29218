"""
Attendance Module

출석 기록 조회 및 월 달력
"""
from .calendar import CalendarDay, MonthCalendar, build_month_calendar, session_strip, shift_month
from .router import router as attendance_router
from .service import AttendanceQueryService

__all__ = [
    "attendance_router",
    "AttendanceQueryService",
    "CalendarDay",
    "MonthCalendar",
    "build_month_calendar",
    "session_strip",
    "shift_month",
]
