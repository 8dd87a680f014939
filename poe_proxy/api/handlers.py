"""聊天补全与图片生成端点"""

from typing import Any

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response, StreamingResponse
from pydantic import BaseModel, ValidationError

from poe_proxy.common.logging import (
    get_logger_with_request_id,
    get_request_id_from_request,
)
from poe_proxy.config.settings import Config
from poe_proxy.core.clients.poe_client import PoeServiceClient
from poe_proxy.core.converters.image_converter import ImageToChatConverter
from poe_proxy.core.converters.request_converter import OpenAIToPoeConverter
from poe_proxy.core.converters.response_converter import ChatToImageConverter
from poe_proxy.models.errors import (
    InvalidRequestError,
    MissingCredentialError,
    UpstreamError,
)
from poe_proxy.models.openai import ChatCompletionRequest, ImageGenerationRequest

router = APIRouter()

SSE_MEDIA_TYPE = "text/event-stream"


def extract_bearer_token(authorization_header: str | None) -> str | None:
    """从 Authorization 头中取出 Bearer token，缺失或为空时返回 None"""
    if not authorization_header:
        return None
    parts = authorization_header.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


def require_token(request: Request) -> str:
    """取出 Bearer token，缺失时抛出 MissingCredentialError"""
    token = extract_bearer_token(request.headers.get("authorization"))
    if not token:
        raise MissingCredentialError()
    return token


async def parse_body(request: Request, model: type[BaseModel]) -> Any:
    """读取 JSON 请求体并校验为指定模型"""
    try:
        body = await request.json()
    except ValueError as e:
        raise InvalidRequestError("Invalid JSON body") from e

    if not isinstance(body, dict):
        raise InvalidRequestError("Request body must be a JSON object")

    try:
        return model.model_validate(body)
    except ValidationError as e:
        first = e.errors()[0]
        param = ".".join(str(loc) for loc in first.get("loc", ())) or None
        raise InvalidRequestError(
            f"Invalid request body: {first.get('msg')}", param=param
        ) from e


def load_upstream_json(response: httpx.Response) -> Any:
    """解析上游响应体，不是合法 JSON 时返回 None"""
    try:
        return response.json()
    except ValueError:
        return None


class ProxyHandler:
    """请求处理器：请求转换 → 上游调用 → 响应转换"""

    def __init__(self, config: Config, client: PoeServiceClient):
        self.config = config
        self.client = client
        self.converter = OpenAIToPoeConverter(config)

    @classmethod
    def create(
        cls,
        config: Config,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "ProxyHandler":
        return cls(config, PoeServiceClient(config.upstream, transport=transport))

    async def aclose(self) -> None:
        await self.client.aclose()

    async def handle_chat_completion(
        self,
        chat_request: ChatCompletionRequest,
        token: str,
        request_id: str | None = None,
    ) -> Response:
        """
        转发聊天补全请求，上游响应的状态码和响应体原样返回

        Args:
            chat_request: 调用方请求
            token: 调用方的 Bearer token
            request_id: 请求ID用于日志追踪

        Returns:
            Response: 流式请求返回 StreamingResponse，否则返回 JSON 原文
        """
        bound_logger = get_logger_with_request_id(request_id)
        payload = self.converter.convert(chat_request, request_id=request_id)
        bound_logger.info(f"聊天补全请求 - 模型: {chat_request.model}")

        if payload.get("stream"):
            upstream = await self.client.open_stream(payload, token, request_id)
            return StreamingResponse(
                PoeServiceClient.iter_stream(upstream, request_id),
                status_code=upstream.status_code,
                media_type=SSE_MEDIA_TYPE,
                headers={"cache-control": "no-cache"},
            )

        upstream = await self.client.create_chat_completion(payload, token, request_id)
        bound_logger.debug("返回原始聊天响应")
        return Response(
            content=upstream.content,
            status_code=upstream.status_code,
            media_type="application/json",
        )

    async def handle_image_generation(
        self,
        image_request: ImageGenerationRequest,
        token: str,
        request_id: str | None = None,
    ) -> JSONResponse:
        """
        通过聊天补全端点生成图片

        Args:
            image_request: 图片生成请求
            token: 调用方的 Bearer token
            request_id: 请求ID用于日志追踪

        Returns:
            JSONResponse: OpenAI 图片生成响应

        Raises:
            InvalidSizeError: 尺寸不被支持（不会访问上游）
            UpstreamError: 上游返回非2xx
            NetworkError: 上游调用失败
        """
        bound_logger = get_logger_with_request_id(request_id)

        chat_request = ImageToChatConverter.convert(image_request, request_id=request_id)
        payload = self.converter.convert(chat_request, request_id=request_id)

        aspect = chat_request.supplied_params().get("aspect")
        if aspect and "aspect" not in payload.get("extra_body", {}):
            bound_logger.warning(
                f"aspect={aspect} 未转发：extraBodyParams 未配置 aspect，将生成 1024x1024 图片"
            )

        upstream = await self.client.create_chat_completion(payload, token, request_id)
        data = load_upstream_json(upstream)

        if not upstream.is_success:
            raise UpstreamError.from_response_body(upstream.status_code, data)

        result = ChatToImageConverter.convert(data)
        bound_logger.info(f"提取的图片URL: {result.data[0].url or '(无)'}")
        return JSONResponse(content=result.model_dump())


def get_proxy_handler(request: Request) -> ProxyHandler:
    return request.app.state.proxy_handler


@router.post("/v1/chat/completions")
async def chat_completions_endpoint(
    request: Request, handler: ProxyHandler = Depends(get_proxy_handler)
) -> Response:
    """OpenAI 聊天补全端点"""
    token = require_token(request)
    chat_request = await parse_body(request, ChatCompletionRequest)
    return await handler.handle_chat_completion(
        chat_request, token, get_request_id_from_request(request)
    )


@router.post("/v1/images/generations")
async def image_generations_endpoint(
    request: Request, handler: ProxyHandler = Depends(get_proxy_handler)
) -> JSONResponse:
    """OpenAI 图片生成端点（dall-e-3）"""
    token = require_token(request)
    image_request = await parse_body(request, ImageGenerationRequest)
    return await handler.handle_image_generation(
        image_request, token, get_request_id_from_request(request)
    )
