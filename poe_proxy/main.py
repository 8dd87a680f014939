from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from poe_proxy.api.handlers import ProxyHandler
from poe_proxy.api.handlers import router as handlers_router
from poe_proxy.api.middleware import setup_middlewares
from poe_proxy.api.routes import router as routes_router
from poe_proxy.common.logging import (
    configure_logging,
    get_logger_with_request_id,
    get_request_id_from_request,
)
from poe_proxy.config.settings import Config
from poe_proxy.models.errors import GatewayError, get_error_response


def create_app(
    config: Config | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """创建应用

    Args:
        config: 网关配置，为 None 时从配置文件加载
        transport: 上游 httpx 传输层，测试时可注入 MockTransport

    Returns:
        FastAPI: 应用实例
    """
    if config is None:
        config = Config.from_file()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """应用生命周期管理"""
        configure_logging(config.logging)
        config.log_summary()
        config.check_image_requirements()

        app.state.proxy_handler = ProxyHandler.create(config, transport=transport)

        logger.info(
            f"启动 Poe OpenAI 兼容代理 - Host: {config.server.host}, Port: {config.server.port}, "
            f"Upstream: {config.upstream.url}, LogLevel: {config.logging.level}"
        )

        yield

        await app.state.proxy_handler.aclose()
        logger.info("服务器已停止")

    app = FastAPI(
        title="Poe OpenAI Proxy",
        version="0.1.0",
        description="OpenAI-compatible chat completions and image generation proxy for the Poe API.",
        lifespan=lifespan,
    )
    app.state.config = config

    setup_middlewares(app)

    app.include_router(handlers_router)
    app.include_router(routes_router)

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        """将网关错误转换为 OpenAI 错误响应"""
        bound_logger = get_logger_with_request_id(get_request_id_from_request(request))
        bound_logger.warning(
            f"请求失败 - Status: {exc.status_code}, Type: {exc.error_type}, Message: {exc.message}"
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """全局异常处理，防止Internal Server Error直接返回给客户端"""
        bound_logger = get_logger_with_request_id(get_request_id_from_request(request))
        bound_logger.opt(exception=exc).error(
            f"捕获未处理的服务器异常 - Type: {type(exc).__name__}, Path: {request.url.path}"
        )

        error_response = get_error_response(500, message="服务器内部错误，请稍后重试")
        return JSONResponse(
            status_code=500,
            content=error_response.model_dump(exclude_none=True),
            headers={"access-control-allow-origin": "*"},
        )

    return app


app = create_app()
