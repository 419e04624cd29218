"""
Membership Store - 저장소 인터페이스

members / passes / attendance 세 테이블에 대한 쿼리 인터페이스.
모든 행은 Supabase 응답과 같은 dict 형태로 주고받습니다.
(날짜/시각은 ISO 문자열)
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional

Row = Dict[str, Any]


@dataclass
class AttendanceOutcome:
    """출석 기록 결과"""
    attendance: Row
    pass_row: Row   # 갱신 후 패스 상태 (삭제된 경우 삭제 직전 상태)
    purged: bool = False


class MembershipStore(ABC):
    """회원/패스/출석 저장소"""

    backend_name = "abstract"

    # ==================== 회원 ====================

    @abstractmethod
    def get_member(self, member_id: str) -> Optional[Row]:
        ...

    @abstractmethod
    def insert_member(self, member: Row) -> Row:
        """회원 생성 (id 중복 시 Conflict)"""

    @abstractmethod
    def update_member(self, member_id: str, fields: Row) -> Optional[Row]:
        ...

    @abstractmethod
    def list_members(self) -> List[Row]:
        ...

    # ==================== 패스 ====================

    @abstractmethod
    def get_pass(self, pass_id: str) -> Optional[Row]:
        ...

    @abstractmethod
    def get_active_pass(self, member_id: str) -> Optional[Row]:
        ...

    @abstractmethod
    def list_passes(self, member_id: Optional[str] = None) -> List[Row]:
        """패스 목록 (최신순). member_id 미지정 시 전체"""

    @abstractmethod
    def create_pass(self, member_id: str, total_sessions: int) -> Row:
        """
        활성 패스 생성

        회원에게 이미 활성 패스가 있으면 Conflict, 회원이 없으면 NotFound.
        검사와 삽입은 하나의 원자적 연산이어야 합니다.
        """

    # ==================== 출석 ====================

    @abstractmethod
    def record_attendance(
        self,
        pass_id: str,
        session_date: date,
        purge_on_completion: bool = False
    ) -> AttendanceOutcome:
        """
        출석 기록 + 사용 횟수 증가 (원자적)

        - 활성 패스가 아니면 NotFound
        - 같은 날짜 기록이 있으면 Conflict
        - used_sessions == total_sessions 가 되면 is_active = false,
          purge_on_completion 이면 패스와 출석 기록 삭제
        """

    @abstractmethod
    def list_attendance(self, pass_id: str) -> List[Row]:
        """패스의 출석 기록 (session_date 오름차순)"""

    @abstractmethod
    def list_all_attendance(self) -> List[Row]:
        ...
