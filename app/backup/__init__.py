"""
Backup Module
"""
from .router import router as backup_router
from .service import BackupExporter

__all__ = ["backup_router", "BackupExporter"]
