"""
中间件模块 - 请求追踪和统一的错误响应格式
"""
import time
from typing import Callable, Optional
from uuid import uuid4

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from docsim.core.config import get_settings
from docsim.core.errors import BaseApplicationError, InternalServerError
from docsim.core.logging import LogEvent, get_logger

logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """为每个请求生成请求ID并记录处理时间"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid4())
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        process_time = time.perf_counter() - start_time
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.6f}"
        logger.info(
            LogEvent.REQUEST_COMPLETED,
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(process_time * 1000, 2),
            request_id=request_id,
        )
        return response


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


def create_error_response(
    status_code: int,
    error_code: str,
    message: str,
    details: Optional[dict] = None,
    request_id: Optional[str] = None,
) -> JSONResponse:
    """创建统一的错误响应"""
    content = {
        "error": {
            "code": error_code,
            "message": message,
            "details": details or {},
            "request_id": request_id,
        }
    }
    headers = {"X-Request-ID": request_id} if request_id else None
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def application_error_handler(request: Request, exc: BaseApplicationError) -> JSONResponse:
    """处理自定义应用异常"""
    logger.warning(
        LogEvent.REQUEST_FAILED,
        path=request.url.path,
        error_code=exc.error_code.value,
        error=exc.message,
    )
    return create_error_response(
        status_code=exc.status_code,
        error_code=exc.error_code.value,
        message=exc.message,
        details=exc.details,
        request_id=_request_id(request),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """处理未预期的异常"""
    logger.error(
        LogEvent.REQUEST_FAILED,
        path=request.url.path,
        error=str(exc),
        exc_info=exc,
    )
    message = "An unexpected error occurred"
    if get_settings().is_development:
        message = str(exc) or message
    error = InternalServerError(message, details={"type": type(exc).__name__})
    return create_error_response(
        status_code=error.status_code,
        error_code=error.error_code.value,
        message=error.message,
        details=error.details,
        request_id=_request_id(request),
    )
