"""
API模块

提供FastAPI应用的路由、处理器和中间件。

子模块:
- handlers: 聊天补全与图片生成处理器
- routes: 模型列表与服务说明
- middleware: 中间件实现
"""

from .handlers import ProxyHandler, extract_bearer_token
from .handlers import router as handlers_router
from .middleware import (
    OpenCORSMiddleware,
    RequestTimingMiddleware,
    setup_middlewares,
)
from .routes import build_model_list
from .routes import router as routes_router

__all__ = [
    # 路由
    "handlers_router",
    "routes_router",
    "build_model_list",
    # 处理器
    "ProxyHandler",
    "extract_bearer_token",
    # 中间件
    "OpenCORSMiddleware",
    "RequestTimingMiddleware",
    "setup_middlewares",
]
