"""请求ID与计时中间件"""

import time
from collections.abc import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from poe_proxy.common.logging import (
    REQUEST_ID_HEADER,
    generate_request_id,
    get_logger_with_request_id,
)


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """记录请求处理时间的中间件"""

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()

        request_id = generate_request_id()
        request.state.request_id = request_id
        bound_logger = get_logger_with_request_id(request_id)
        bound_logger.info(f"收到请求: {request.method} {request.url.path}")

        response = await call_next(request)

        response_time = time.time() - start_time
        response_time_ms = round(response_time * 1000, 2)
        bound_logger.info(
            f"请求完成 - Status: {response.status_code}, Time: {response_time_ms}ms"
        )

        response.headers["X-Process-Time"] = f"{response_time:.3f}s"
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
