"""
출석 달력 계산

월 달력은 월요일을 첫 번째 열로 사용합니다.
해당 월이 아닌 칸은 day=None 입니다.
"""
import calendar
import datetime as dt
from datetime import date
from typing import Iterable, List, Optional, Set, Tuple

from pydantic import BaseModel

WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


class CalendarDay(BaseModel):
    """달력 한 칸"""
    day: Optional[int] = None
    date: Optional[dt.date] = None
    attended: bool = False


class MonthCalendar(BaseModel):
    """월 달력"""
    year: int
    month: int
    weekdays: List[str] = WEEKDAY_LABELS
    weeks: List[List[CalendarDay]]
    attended_count: int = 0
    previous: Tuple[int, int]
    next: Tuple[int, int]

    @property
    def leading_blanks(self) -> int:
        """1일 앞의 빈 칸 수 (월요일 = 0)"""
        first_week = self.weeks[0]
        return sum(1 for cell in first_week if cell.day is None)


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """월 이동 (delta 개월)"""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def build_month_calendar(year: int, month: int, attended_dates: Iterable[date]) -> MonthCalendar:
    """
    (year, month) 달력 생성

    Args:
        attended_dates: 출석 날짜 (다른 달 날짜는 무시)
    """
    if not 1 <= month <= 12:
        raise ValueError(f"잘못된 월: {month}")

    attended: Set[date] = {d for d in attended_dates if d.year == year and d.month == month}
    cal = calendar.Calendar(firstweekday=calendar.MONDAY)

    weeks = []
    for week in cal.monthdayscalendar(year, month):
        row = []
        for day in week:
            if day == 0:
                row.append(CalendarDay())
                continue
            current = date(year, month, day)
            row.append(CalendarDay(day=day, date=current, attended=current in attended))
        weeks.append(row)

    return MonthCalendar(
        year=year,
        month=month,
        weeks=weeks,
        attended_count=len(attended),
        previous=shift_month(year, month, -1),
        next=shift_month(year, month, 1),
    )


def session_strip(total_sessions: int, used_sessions: int) -> List[bool]:
    """세션 사용 현황 ([True] * 사용 + [False] * 남은 횟수)"""
    used = max(0, min(used_sessions, total_sessions))
    return [i < used for i in range(total_sessions)]
