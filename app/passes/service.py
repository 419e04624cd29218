"""
Pass Lifecycle Service

패스 상태 전이: NoPass → Active → {Active (사용 +1), Completed}
- 패스 발급: 활성 패스가 없는 회원에게만
- 출석 체크: 활성 패스에 출석 기록 + 사용 횟수 증가
- 완료 처리: PASS_COMPLETION_POLICY 에 따라 비활성화 또는 삭제
"""
import asyncio
from dataclasses import dataclass
from datetime import date
from typing import Optional

from fastapi import Depends
from loguru import logger

from app.config import PassCompletionPolicy, get_settings
from app.errors import Conflict, NotFound, ValidationError
from app.store import MembershipStore, get_store
from .locks import KeyedLock
from .models import AttendanceRecord, PassRecord, PassStatus


# 프로세스 전역: 회원별 변경 직렬화
member_locks = KeyedLock()


@dataclass
class MarkAttendanceResult:
    """출석 체크 결과"""
    attendance: AttendanceRecord
    pass_record: PassRecord
    pass_deleted: bool

    @property
    def status(self) -> PassStatus:
        return PassStatus(
            used_sessions=self.pass_record.used_sessions,
            remaining_sessions=self.pass_record.remaining_sessions,
            is_active=self.pass_record.is_active,
        )


class PassLifecycleService:
    """패스 발급 및 출석 체크"""

    def __init__(
        self,
        store: MembershipStore,
        total_sessions: int = 8,
        completion_policy: PassCompletionPolicy = PassCompletionPolicy.DEACTIVATE,
        locks: Optional[KeyedLock] = None
    ):
        self.store = store
        self.total_sessions = total_sessions
        self.completion_policy = completion_policy
        self.locks = locks if locks is not None else member_locks

    async def create_pass(self, member_id: str) -> PassRecord:
        """
        새 패스 발급

        Raises:
            ValidationError: member_id 누락
            NotFound: 회원 없음
            Conflict: 이미 활성 패스가 있음
        """
        if not member_id or not member_id.strip():
            raise ValidationError("Missing memberId")

        if not await asyncio.to_thread(self.store.get_member, member_id):
            raise NotFound("Member not found")

        async with self.locks.acquire(member_id):
            if await asyncio.to_thread(self.store.get_active_pass, member_id):
                raise Conflict("A member can only have one active pass at a time.")

            row = await asyncio.to_thread(self.store.create_pass, member_id, self.total_sessions)

        new_pass = PassRecord(**row)
        logger.info(f"패스 발급: member={member_id} pass={new_pass.id} ({new_pass.total_sessions}회)")
        return new_pass

    async def mark_attendance(self, member_id: str, session_date: date) -> MarkAttendanceResult:
        """
        활성 패스에 출석 체크

        Raises:
            ValidationError: member_id / session_date 누락
            NotFound: 활성 패스 없음
            Conflict: 같은 날짜 출석 중복
        """
        if not member_id or not member_id.strip() or session_date is None:
            raise ValidationError("Missing memberId or sessionDate")

        purge = self.completion_policy == PassCompletionPolicy.PURGE

        async with self.locks.acquire(member_id):
            active = await asyncio.to_thread(self.store.get_active_pass, member_id)
            if not active:
                raise NotFound("No active pass found for this member")

            outcome = await asyncio.to_thread(
                self.store.record_attendance,
                active["id"],
                session_date,
                purge_on_completion=purge
            )

        result = MarkAttendanceResult(
            attendance=AttendanceRecord(**outcome.attendance),
            pass_record=PassRecord(**outcome.pass_row),
            pass_deleted=outcome.purged,
        )

        status = result.status
        logger.info(
            f"출석 체크: member={member_id} date={session_date.isoformat()} "
            f"used={status.used_sessions}/{result.pass_record.total_sessions}"
        )
        if not status.is_active:
            action = "삭제" if result.pass_deleted else "비활성화"
            logger.info(f"패스 완료 ({action}): pass={result.pass_record.id}")

        return result


def get_pass_service(store: MembershipStore = Depends(get_store)) -> PassLifecycleService:
    """설정값으로 구성한 패스 서비스 (FastAPI 의존성)"""
    settings = get_settings()
    return PassLifecycleService(
        store,
        total_sessions=settings.PASS_TOTAL_SESSIONS,
        completion_policy=settings.PASS_COMPLETION_POLICY,
    )
