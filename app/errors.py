"""
Error Taxonomy - 도메인 예외 및 FastAPI 예외 핸들러

서비스/저장소 계층은 아래 예외만 발생시키고,
HTTP 계층에서 {"error": message} 형태로 변환합니다.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger


class MembershipError(Exception):
    """모든 도메인 예외의 기반 클래스"""

    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class Unauthenticated(MembershipError):
    """인증 정보 없음 / 유효하지 않음"""
    status_code = 401


class Forbidden(MembershipError):
    """인증되었으나 권한 없음"""
    status_code = 403


class NotFound(MembershipError):
    """회원 또는 패스 없음"""
    status_code = 404


class Conflict(MembershipError):
    """활성 패스 중복, 출석 날짜 중복"""
    status_code = 409


class ValidationError(MembershipError):
    """필수 필드 누락 / 잘못된 입력"""
    status_code = 400


class StoreError(MembershipError):
    """데이터 저장소 오류"""
    status_code = 500


def _describe_validation_error(exc: RequestValidationError) -> str:
    """요청 검증 오류를 짧은 메시지로 변환"""
    if any(error.get("type") == "json_invalid" for error in exc.errors()):
        return "Invalid request body"

    fields = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        if loc:
            fields.append(".".join(loc))
    if not fields:
        return "Invalid request body"
    if all(error.get("type") == "missing" for error in exc.errors()):
        return f"Missing {' or '.join(fields)}"
    return f"Invalid {', '.join(fields)}"


def add_exception_handlers(app: FastAPI) -> None:
    """도메인 예외 → JSON 응답 핸들러 등록"""

    @app.exception_handler(MembershipError)
    async def membership_error_handler(request: Request, exc: MembershipError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} 실패: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} → {exc.status_code}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = _describe_validation_error(exc)
        logger.info(f"{request.method} {request.url.path} → 400: {message}")
        return JSONResponse(status_code=400, content={"error": message})
