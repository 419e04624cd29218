"""
Nomad Spirit Tracker - FastAPI 웹 서버
회원 패스(8회권) 발급 + 출석 체크 + 백업

데이터 소스: Supabase (STORE_BACKEND=memory 로 로컬 실행 가능)
"""
from fastapi import FastAPI
from loguru import logger

from app.config import get_settings
from app.errors import add_exception_handlers

# 기능 모듈 라우터
from app.attendance import attendance_router
from app.backup import backup_router
from app.members import members_router
from app.passes import passes_router


# FastAPI 앱
app = FastAPI(
    title="Nomad Spirit Tracker",
    description="회원 패스 및 출석 관리 API",
    version="1.0.0"
)

# {"error": ...} 형식 에러 응답
add_exception_handlers(app)

app.include_router(passes_router, prefix="/api")
app.include_router(attendance_router, prefix="/api")
app.include_router(members_router, prefix="/api")
app.include_router(backup_router, prefix="/api")


# ==================== API Endpoints ====================

@app.on_event("startup")
async def startup_event():
    """서버 시작 시 설정 확인"""
    settings = get_settings()
    logger.info(
        f"✅ 서버 시작 완료 - store={settings.STORE_BACKEND.value}, "
        f"passes={settings.PASS_TOTAL_SESSIONS}회, "
        f"completion={settings.PASS_COMPLETION_POLICY.value}"
    )


@app.on_event("shutdown")
async def shutdown_event():
    """서버 종료 시 정리"""
    logger.info("서버 종료됨")


@app.get("/api/status")
async def get_status():
    """서비스 상태"""
    settings = get_settings()
    return {
        "status": "ok",
        "store_backend": settings.STORE_BACKEND.value,
        "pass_total_sessions": settings.PASS_TOTAL_SESSIONS,
        "pass_completion_policy": settings.PASS_COMPLETION_POLICY.value,
    }


# ==================== 서버 실행 ====================

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.server:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=True,
        log_level="info"
    )
