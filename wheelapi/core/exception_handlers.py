import logging
import traceback
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from .exceptions import InternalServerError, PersistenceError

logger = logging.getLogger("wheelapi")

# 저장소 장애(503) 시 클라이언트 재시도 간격
RETRY_AFTER_SECONDS = 2


def _describe(request: Request) -> str:
    client = request.client.host if request.client else "-"
    return f"{request.method} {request.url} from {client}"


def _log(kind: str, request: Request, status_code: int, detail: Any, tb: str = "") -> None:
    message = f"[{kind}] {_describe(request)} -> {status_code}: {detail}"
    if status_code >= 500:
        logger.error(f"{message}\n\nStack Trace:\n{tb}" if tb else message)
    else:
        logger.warning(message)


def _envelope(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {
        "success": False,
        "error": {"code": code, "message": message, "details": details or {}},
    }


async def handle_base_api_exception(request, exc):
    _log("BaseAPIException", request, exc.status_code, exc.detail)

    headers = dict(exc.headers or {})
    if isinstance(exc, PersistenceError):
        headers.setdefault("Retry-After", str(RETRY_AFTER_SECONDS))
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(exc.detail),
        headers=headers or None,
    )


async def handle_http_exception(request, exc):
    tb = "".join(traceback.format_tb(exc.__traceback__)) if exc.status_code >= 500 else ""
    _log("HTTPException", request, exc.status_code, exc.detail, tb)

    # 인증/권한 오류 등 문자열 detail 도 같은 형식으로 맞춤
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        content = exc.detail
    else:
        content = _envelope("HTTP_ERROR", str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(content),
        headers=getattr(exc, "headers", None),
    )


async def handle_validation_error(request, exc):
    errors = jsonable_encoder(exc.errors())
    _log("ValidationError", request, 422, errors)
    return JSONResponse(
        status_code=422,
        content=_envelope("VALIDATION_001", "Validation failed", {"errors": errors}),
    )


async def handle_unexpected_error(request, exc):
    """잘못된 경품 테이블/추첨값(InvalidInputError) 같은 프로그래밍 오류도 여기로 온다"""
    tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    logger.error(
        f"\n{'=' * 80}\n"
        f"[Unhandled Error] {_describe(request)}\n"
        f"Exception Type: {type(exc).__name__}\n"
        f"Exception Message: {str(exc)}\n\n"
        f"Full Stack Trace:\n{tb}"
        f"{'=' * 80}"
    )

    internal = InternalServerError()
    return JSONResponse(status_code=internal.status_code, content=internal.detail)  # type: ignore[arg-type]
