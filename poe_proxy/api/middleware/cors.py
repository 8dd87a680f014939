"""CORS中间件

所有响应都带 access-control-allow-origin: *，任意路径的 OPTIONS 请求
直接返回预检响应，不进入路由。
"""

from collections.abc import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

ALLOW_ORIGIN = "*"
ALLOW_METHODS = "GET, POST, OPTIONS"
ALLOW_HEADERS = "authorization, content-type"


class OpenCORSMiddleware(BaseHTTPMiddleware):
    """开放CORS的中间件"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method == "OPTIONS":
            return Response(
                status_code=200,
                headers={
                    "access-control-allow-origin": ALLOW_ORIGIN,
                    "access-control-allow-methods": ALLOW_METHODS,
                    "access-control-allow-headers": ALLOW_HEADERS,
                },
            )

        response = await call_next(request)
        response.headers["access-control-allow-origin"] = ALLOW_ORIGIN
        return response
