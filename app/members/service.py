"""
Member Service

- 최초 접속 시 회원 레코드 생성
- 회원 대시보드 / 관리자 회원 목록 / 회원 상세
- 프로필 사진 교체
"""
from datetime import date
from typing import List, Optional

from fastapi import Depends, UploadFile
from loguru import logger

from app.attendance.calendar import build_month_calendar, session_strip
from app.attendance.service import AttendanceQueryService
from app.auth.dependencies import provision_member
from app.auth.models import AuthIdentity, MemberContext, MemberResponse
from app.config import get_settings
from app.errors import NotFound, StoreError, ValidationError
from app.passes.models import PassRecord
from app.store import MembershipStore, Row, get_store
from .avatar import ProfilePictureStorage, compress_image, get_avatar_storage
from .models import (
    DashboardResponse,
    MemberDetailResponse,
    MemberWithPasses,
    PassOverview,
)


class MemberService:
    """회원 조회 / 프로비저닝"""

    def __init__(
        self,
        store: MembershipStore,
        avatar_storage: Optional[ProfilePictureStorage] = None
    ):
        self.store = store
        self.attendance = AttendanceQueryService(store)
        self.avatar_storage = avatar_storage

    # ===== 프로비저닝 =====

    def _existing_picture(self, member_id: str) -> Optional[str]:
        if not self.avatar_storage:
            return None
        try:
            return self.avatar_storage.find_existing(member_id)
        except StoreError as e:
            logger.warning(f"기존 프로필 사진 확인 실패 ({member_id}): {e.message}")
            return None

    def ensure_member_exists(self, identity: AuthIdentity) -> Row:
        """회원 레코드 조회, 없으면 생성"""
        member = self.store.get_member(identity.user_id)
        if member:
            return member

        return provision_member(self.store, identity, self._existing_picture(identity.user_id))

    # ===== 조회 =====

    def _overview(self, pass_row: Optional[Row], year: int, month: int) -> dict:
        if not pass_row:
            return {
                "pass_record": None,
                "remaining_sessions": 0,
                "sessions": [],
                "attendance_dates": [],
                "calendar": build_month_calendar(year, month, []),
            }

        pass_record = PassRecord(**pass_row)
        dates = self.attendance.list_attendance_dates(pass_record.id)
        return {
            "pass_record": pass_record,
            "remaining_sessions": pass_record.remaining_sessions,
            "sessions": session_strip(pass_record.total_sessions, pass_record.used_sessions),
            "attendance_dates": dates,
            "calendar": build_month_calendar(year, month, dates),
        }

    def dashboard(
        self,
        identity: AuthIdentity,
        year: Optional[int] = None,
        month: Optional[int] = None
    ) -> DashboardResponse:
        """회원 대시보드: 활성 패스 + 출석 현황"""
        today = date.today()
        member = self.ensure_member_exists(identity)
        active = self.store.get_active_pass(member["id"])

        return DashboardResponse(
            member=MemberResponse(**member),
            is_admin=bool(member.get("is_admin")),
            **self._overview(active, year or today.year, month or today.month)
        )

    def list_members_with_passes(self) -> List[MemberWithPasses]:
        """관리자 제외 회원 목록 (이름순) + 패스"""
        members = [m for m in self.store.list_members() if not m.get("is_admin")]
        members.sort(key=lambda m: (m.get("full_name") or "").lower())

        try:
            passes = self.store.list_passes()
        except StoreError as e:
            logger.warning(f"패스 목록 조회 실패, 회원만 반환: {e.message}")
            passes = []

        by_member = {}
        for row in passes:
            by_member.setdefault(row["member_id"], []).append(PassRecord(**row))

        return [
            MemberWithPasses(**member, passes=by_member.get(member["id"], []))
            for member in members
        ]

    def member_detail(
        self,
        member_id: str,
        year: Optional[int] = None,
        month: Optional[int] = None
    ) -> MemberDetailResponse:
        """회원 상세: 가장 최근 패스 (활성 여부 무관)"""
        member = self.store.get_member(member_id)
        if not member:
            raise NotFound("Member not found")

        passes = self.store.list_passes(member_id)
        latest = passes[0] if passes else None

        today = date.today()
        return MemberDetailResponse(
            member=MemberResponse(**member),
            **self._overview(latest, year or today.year, month or today.month)
        )

    # ===== 프로필 사진 =====

    async def replace_profile_picture(self, member: MemberContext, upload: UploadFile) -> str:
        """
        프로필 사진 교체

        Returns:
            새 공개 URL
        """
        settings = get_settings()

        if not upload.content_type or not upload.content_type.startswith("image/"):
            raise ValidationError("Only image files can be uploaded")

        content = await upload.read()
        if len(content) > settings.UPLOAD_MAX_BYTES:
            raise ValidationError("File size must be 10MB or less")
        if not content:
            raise ValidationError("Uploaded file is empty")

        if not self.avatar_storage:
            raise StoreError("Profile picture storage is not configured")

        data, content_type = compress_image(
            content,
            settings.PROFILE_PICTURE_MAX_DIMENSION,
            settings.PROFILE_PICTURE_MAX_BYTES
        )
        public_url = self.avatar_storage.replace(member.member_id, data, "jpg", content_type)

        self.store.update_member(member.member_id, {"profile_picture_url": public_url})
        logger.info(f"프로필 사진 교체: {member.member_id}")
        return public_url


def get_member_service(
    store: MembershipStore = Depends(get_store),
    avatar_storage: Optional[ProfilePictureStorage] = Depends(get_avatar_storage)
) -> MemberService:
    return MemberService(store, avatar_storage)
