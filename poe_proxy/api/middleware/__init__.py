"""
中间件模块

提供FastAPI应用的各种中间件实现。

主要功能:
- 开放CORS与预检响应
- 请求计时与请求ID追踪

使用示例:
    from poe_proxy.api.middleware import setup_middlewares

    setup_middlewares(app)
"""

from fastapi import FastAPI

from .cors import OpenCORSMiddleware
from .timing import RequestTimingMiddleware


def setup_middlewares(app: FastAPI) -> None:
    """设置所有中间件"""
    # 后添加的中间件在外层：CORS 头也会加到计时中间件的响应上
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(OpenCORSMiddleware)


__all__ = [
    "OpenCORSMiddleware",
    "RequestTimingMiddleware",
    "setup_middlewares",
]
