# app/middleware/logging.py
"""
请求日志中间件

记录每个 HTTP 请求：
- 请求 ID（写入响应头 X-Request-ID，并绑定到 structlog 上下文）
- 请求方法、路径（RPC 调用即 /trpc/<procedure>）
- 客户端 IP
- 响应状态码、耗时
"""
import time
import uuid

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.logging import get_logger

logger = get_logger("access")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        # 优先沿用上游传入的请求 ID
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start_time = time.perf_counter()
        log_data = {
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else "unknown",
        }

        try:
            response = await call_next(request)
        except Exception as e:
            log_data.update({
                "status_code": 500,
                "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
                "error_type": type(e).__name__,
            })
            logger.exception("request_failed", **log_data)
            raise
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        log_data.update({
            "status_code": response.status_code,
            "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
        })

        # 根据状态码选择日志级别
        if response.status_code >= 500:
            logger.error("request_completed", request_id=request_id, **log_data)
        elif response.status_code >= 400:
            logger.warning("request_completed", request_id=request_id, **log_data)
        else:
            logger.info("request_completed", request_id=request_id, **log_data)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
