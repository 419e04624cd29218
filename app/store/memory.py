"""
In-memory 저장소 (테스트 / 로컬 개발용)

Supabase 스키마의 제약 조건을 그대로 흉내냅니다:
- 회원당 활성 패스 1개
- (pass_id, session_date) 유일
- 0 <= used_sessions <= total_sessions
"""
import threading
import uuid
from copy import deepcopy
from datetime import date, datetime, timezone
from typing import Dict, List, Optional

from app.errors import Conflict, NotFound
from .base import AttendanceOutcome, MembershipStore, Row


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class InMemoryStore(MembershipStore):
    """프로세스 메모리 기반 저장소"""

    backend_name = "memory"

    def __init__(self):
        self._lock = threading.RLock()
        self._members: Dict[str, Row] = {}
        self._passes: Dict[str, Row] = {}
        self._attendance: Dict[str, Row] = {}

    # ==================== 회원 ====================

    def get_member(self, member_id: str) -> Optional[Row]:
        with self._lock:
            member = self._members.get(member_id)
            return deepcopy(member) if member else None

    def insert_member(self, member: Row) -> Row:
        with self._lock:
            member_id = member.get("id") or str(uuid.uuid4())
            if member_id in self._members:
                raise Conflict("Member already exists")
            row = {
                "id": member_id,
                "full_name": member["full_name"],
                "email": member.get("email"),
                "profile_picture_url": member.get("profile_picture_url"),
                "is_admin": bool(member.get("is_admin", False)),
                "created_at": _now(),
            }
            self._members[member_id] = row
            return deepcopy(row)

    def update_member(self, member_id: str, fields: Row) -> Optional[Row]:
        with self._lock:
            member = self._members.get(member_id)
            if not member:
                return None
            member.update({k: v for k, v in fields.items() if k != "id"})
            return deepcopy(member)

    def list_members(self) -> List[Row]:
        with self._lock:
            return [deepcopy(m) for m in self._members.values()]

    # ==================== 패스 ====================

    def get_pass(self, pass_id: str) -> Optional[Row]:
        with self._lock:
            row = self._passes.get(pass_id)
            return deepcopy(row) if row else None

    def get_active_pass(self, member_id: str) -> Optional[Row]:
        with self._lock:
            for row in self._passes.values():
                if row["member_id"] == member_id and row["is_active"]:
                    return deepcopy(row)
            return None

    def list_passes(self, member_id: Optional[str] = None) -> List[Row]:
        with self._lock:
            rows = [
                deepcopy(p) for p in self._passes.values()
                if member_id is None or p["member_id"] == member_id
            ]
        # 삽입 순서 = 생성 순서. 최신순으로 뒤집음
        rows.reverse()
        return rows

    def create_pass(self, member_id: str, total_sessions: int) -> Row:
        with self._lock:
            if member_id not in self._members:
                raise NotFound("Member not found")
            if self.get_active_pass(member_id):
                raise Conflict("A member can only have one active pass at a time.")
            row = {
                "id": str(uuid.uuid4()),
                "member_id": member_id,
                "total_sessions": total_sessions,
                "used_sessions": 0,
                "is_active": True,
                "created_at": _now(),
            }
            self._passes[row["id"]] = row
            return deepcopy(row)

    # ==================== 출석 ====================

    def record_attendance(
        self,
        pass_id: str,
        session_date: date,
        purge_on_completion: bool = False
    ) -> AttendanceOutcome:
        day = session_date.isoformat()
        with self._lock:
            pass_row = self._passes.get(pass_id)
            if not pass_row or not pass_row["is_active"]:
                raise NotFound("No active pass found for this member")

            for record in self._attendance.values():
                if record["pass_id"] == pass_id and record["session_date"] == day:
                    raise Conflict("Attendance already marked for this member on this date")

            used = pass_row["used_sessions"] + 1
            if used > pass_row["total_sessions"]:
                raise Conflict("Pass has no remaining sessions")

            attendance = {
                "id": str(uuid.uuid4()),
                "pass_id": pass_id,
                "session_date": day,
                "created_at": _now(),
            }
            self._attendance[attendance["id"]] = attendance
            pass_row["used_sessions"] = used
            pass_row["is_active"] = used < pass_row["total_sessions"]

            outcome = AttendanceOutcome(
                attendance=deepcopy(attendance),
                pass_row=deepcopy(pass_row),
            )

            if not pass_row["is_active"] and purge_on_completion:
                self._purge_pass(pass_id)
                outcome.purged = True

            return outcome

    def _purge_pass(self, pass_id: str) -> None:
        for record_id in [k for k, v in self._attendance.items() if v["pass_id"] == pass_id]:
            del self._attendance[record_id]
        del self._passes[pass_id]

    def list_attendance(self, pass_id: str) -> List[Row]:
        with self._lock:
            rows = [deepcopy(a) for a in self._attendance.values() if a["pass_id"] == pass_id]
        return sorted(rows, key=lambda a: a["session_date"])

    def list_all_attendance(self) -> List[Row]:
        with self._lock:
            return [deepcopy(a) for a in self._attendance.values()]
