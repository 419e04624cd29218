"""
Backup Exporter

passes / members / attendance 전체를 하나의 JSON 문서로 내보냅니다.
읽기 전용이며, 테이블 하나라도 조회에 실패하면 내보내기를 중단합니다.
"""
from datetime import datetime, timezone
from typing import Callable, List

from fastapi import Depends
from loguru import logger

from app.errors import StoreError
from app.store import MembershipStore, Row, get_store
from .models import BackupDocument, BackupSummary


class BackupExporter:
    """관리자 백업"""

    def __init__(self, store: MembershipStore):
        self.store = store

    def _fetch(self, table: str, read: Callable[[], List[Row]]) -> List[Row]:
        try:
            return read()
        except StoreError as e:
            logger.error(f"백업 중단: {table} 조회 실패 - {e.message}")
            raise StoreError(f"Failed to fetch {table}: {e.message}") from e

    def export_backup(self) -> BackupDocument:
        passes = self._fetch("passes", self.store.list_passes)
        members = self._fetch("members", self.store.list_members)
        attendance = self._fetch("attendance", self.store.list_all_attendance)

        members_by_id = {m["id"]: m for m in members}
        joined_passes = []
        for row in passes:
            owner = members_by_id.get(row["member_id"], {})
            joined_passes.append({
                **row,
                "member_full_name": owner.get("full_name"),
                "member_email": owner.get("email"),
            })

        document = BackupDocument(
            backup_timestamp=datetime.now(timezone.utc),
            passes=joined_passes,
            members=members,
            attendance=attendance,
            summary=BackupSummary(
                total_passes=len(passes),
                total_members=len(members),
                total_attendance_records=len(attendance),
            ),
        )

        logger.info(
            f"백업 생성: passes={len(passes)} members={len(members)} "
            f"attendance={len(attendance)}"
        )
        return document


def get_backup_exporter(store: MembershipStore = Depends(get_store)) -> BackupExporter:
    return BackupExporter(store)
