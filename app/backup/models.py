"""
Backup Models
"""
from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel


class BackupSummary(BaseModel):
    total_passes: int
    total_members: int
    total_attendance_records: int


class BackupDocument(BaseModel):
    """전체 데이터 스냅샷"""
    backup_timestamp: datetime
    passes: List[Dict[str, Any]]  # member_full_name, member_email 포함
    members: List[Dict[str, Any]]
    attendance: List[Dict[str, Any]]
    summary: BackupSummary
