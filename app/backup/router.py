"""
Backup API Router

- POST /api/backup  전체 데이터 JSON 다운로드 (관리자)
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.auth.dependencies import require_admin
from app.auth.models import MemberContext
from app.config import get_settings
from .service import BackupExporter, get_backup_exporter

router = APIRouter(tags=["Backup"])


@router.post("/backup")
async def export_backup(
    admin: MemberContext = Depends(require_admin),
    exporter: BackupExporter = Depends(get_backup_exporter)
):
    """전체 백업 (첨부 파일로 응답)"""
    document = exporter.export_backup()

    prefix = get_settings().BACKUP_FILENAME_PREFIX
    filename = f"{prefix}-{document.backup_timestamp.date().isoformat()}.json"

    return JSONResponse(
        content=document.model_dump(mode="json"),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )
