"""
Supabase 저장소

스키마: database/migrations/001_membership_schema.sql
- passes_one_active_per_member (부분 유니크 인덱스) 로 활성 패스 중복 방지
- record_attendance() 함수로 출석 기록 + 카운터 갱신을 하나의 트랜잭션에서 처리
"""
from datetime import date
from typing import Callable, List, Optional, TypeVar

from loguru import logger
from postgrest.exceptions import APIError
from supabase import Client

from app.errors import Conflict, NotFound, StoreError
from .base import AttendanceOutcome, MembershipStore, Row

T = TypeVar("T")

# PostgreSQL SQLSTATE
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NO_DATA_FOUND = "P0002"


class SupabaseStore(MembershipStore):
    """Supabase(PostgREST) 기반 저장소"""

    backend_name = "supabase"

    def __init__(self, client: Client):
        self.client = client

    def _run(self, action: str, call: Callable[[], T]) -> T:
        """쿼리 실행. 예상하지 못한 오류는 StoreError 로 변환"""
        try:
            return call()
        except APIError as e:
            logger.error(f"{action} 오류 [{e.code}]: {e.message}")
            raise StoreError(f"{action} failed: {e.message}") from e
        except Exception as e:
            logger.error(f"{action} 오류: {e}")
            raise StoreError(f"{action} failed: {e}") from e

    @staticmethod
    def _first(rows: Optional[List[Row]]) -> Optional[Row]:
        return rows[0] if rows else None

    # ==================== 회원 ====================

    def get_member(self, member_id: str) -> Optional[Row]:
        result = self._run("Member lookup", lambda: self.client.table("members").select(
            "*"
        ).eq("id", member_id).limit(1).execute())
        return self._first(result.data)

    def insert_member(self, member: Row) -> Row:
        try:
            result = self.client.table("members").insert(member).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise Conflict("Member already exists") from e
            logger.error(f"회원 생성 오류 [{e.code}]: {e.message}")
            raise StoreError(f"Member insert failed: {e.message}") from e
        row = self._first(result.data)
        if not row:
            raise StoreError("Member insert returned no row")
        return row

    def update_member(self, member_id: str, fields: Row) -> Optional[Row]:
        result = self._run("Member update", lambda: self.client.table("members").update(
            fields
        ).eq("id", member_id).execute())
        return self._first(result.data)

    def list_members(self) -> List[Row]:
        result = self._run("Members fetch", lambda: self.client.table("members").select(
            "*"
        ).execute())
        return result.data or []

    # ==================== 패스 ====================

    def get_pass(self, pass_id: str) -> Optional[Row]:
        result = self._run("Pass lookup", lambda: self.client.table("passes").select(
            "*"
        ).eq("id", pass_id).limit(1).execute())
        return self._first(result.data)

    def get_active_pass(self, member_id: str) -> Optional[Row]:
        result = self._run("Active pass lookup", lambda: self.client.table("passes").select(
            "*"
        ).eq("member_id", member_id).eq("is_active", True).limit(1).execute())
        return self._first(result.data)

    def list_passes(self, member_id: Optional[str] = None) -> List[Row]:
        def query():
            q = self.client.table("passes").select("*")
            if member_id is not None:
                q = q.eq("member_id", member_id)
            return q.order("created_at", desc=True).execute()

        result = self._run("Passes fetch", query)
        return result.data or []

    def create_pass(self, member_id: str, total_sessions: int) -> Row:
        data = {
            "member_id": member_id,
            "total_sessions": total_sessions,
            "used_sessions": 0,
            "is_active": True,
        }
        try:
            result = self.client.table("passes").insert(data).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise Conflict("A member can only have one active pass at a time.") from e
            if e.code == FOREIGN_KEY_VIOLATION:
                raise NotFound("Member not found") from e
            logger.error(f"패스 생성 오류 [{e.code}]: {e.message}")
            raise StoreError(f"Failed to create pass: {e.message}") from e

        row = self._first(result.data)
        if not row:
            raise StoreError("Failed to create pass: no row returned")
        return row

    # ==================== 출석 ====================

    def record_attendance(
        self,
        pass_id: str,
        session_date: date,
        purge_on_completion: bool = False
    ) -> AttendanceOutcome:
        params = {
            "p_pass_id": pass_id,
            "p_session_date": session_date.isoformat(),
            "p_purge": purge_on_completion,
        }
        try:
            result = self.client.rpc("record_attendance", params).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise Conflict("Attendance already marked for this member on this date") from e
            if e.code == NO_DATA_FOUND:
                raise NotFound("No active pass found for this member") from e
            logger.error(f"출석 기록 오류 [{e.code}]: {e.message}")
            raise StoreError(f"Failed to record attendance: {e.message}") from e

        payload = result.data or {}
        if not payload.get("attendance") or not payload.get("pass"):
            raise StoreError("Failed to record attendance: empty response")

        return AttendanceOutcome(
            attendance=payload["attendance"],
            pass_row=payload["pass"],
            purged=bool(payload.get("purged", False)),
        )

    def list_attendance(self, pass_id: str) -> List[Row]:
        result = self._run("Attendance fetch", lambda: self.client.table("attendance").select(
            "*"
        ).eq("pass_id", pass_id).order("session_date").execute())
        return result.data or []

    def list_all_attendance(self) -> List[Row]:
        result = self._run("Attendance fetch", lambda: self.client.table("attendance").select(
            "*"
        ).execute())
        return result.data or []
