"""
Pass Module

패스(세션 묶음) 발급 및 출석 체크
"""
from .router import router as passes_router
from .service import PassLifecycleService, get_pass_service

__all__ = ["passes_router", "PassLifecycleService", "get_pass_service"]
