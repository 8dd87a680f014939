"""Poe 上游 API 客户端"""

from collections.abc import AsyncIterator
from typing import Any

import httpx

from poe_proxy.common.logging import get_logger_with_request_id
from poe_proxy.config.settings import UpstreamConfig
from poe_proxy.models.errors import NetworkError


class PoeServiceClient:
    """向 Poe 聊天补全端点转发请求

    调用方的 Bearer token 原样转发，本地不做校验。每个调用方请求只访问上游一次，
    不做重试。连接失败、超时等传输层错误统一转换为 NetworkError。
    """

    def __init__(
        self,
        config: UpstreamConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = config.url
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout, connect=config.connect_timeout),
            transport=transport,
        )

    def _build_request(self, payload: dict[str, Any], token: str) -> httpx.Request:
        return self.client.build_request(
            "POST",
            self.url,
            json=payload,
            headers={
                "authorization": f"Bearer {token}",
                "content-type": "application/json",
            },
        )

    async def _send(
        self,
        payload: dict[str, Any],
        token: str,
        stream: bool,
        request_id: str | None,
    ) -> httpx.Response:
        bound_logger = get_logger_with_request_id(request_id)
        request = self._build_request(payload, token)
        try:
            response = await self.client.send(request, stream=stream)
        except httpx.HTTPError as e:
            bound_logger.error(f"上游请求失败 - Type: {type(e).__name__}, Message: {e}")
            raise NetworkError() from e

        bound_logger.info(f"上游响应 - Status: {response.status_code}, Stream: {stream}")
        return response

    async def create_chat_completion(
        self, payload: dict[str, Any], token: str, request_id: str | None = None
    ) -> httpx.Response:
        """发送非流式请求，返回已读取完整响应体的 Response"""
        return await self._send(payload, token, stream=False, request_id=request_id)

    async def open_stream(
        self, payload: dict[str, Any], token: str, request_id: str | None = None
    ) -> httpx.Response:
        """发送流式请求，只等待响应头；调用方负责关闭返回的 Response"""
        return await self._send(payload, token, stream=True, request_id=request_id)

    @staticmethod
    async def iter_stream(
        response: httpx.Response, request_id: str | None = None
    ) -> AsyncIterator[bytes]:
        """按上游到达顺序逐块转发原始字节，结束或被取消时释放上游连接"""
        bound_logger = get_logger_with_request_id(request_id)
        chunk_count = 0
        try:
            async for chunk in response.aiter_raw():
                chunk_count += 1
                yield chunk
        except httpx.HTTPError as e:
            # 响应头已发送，只能结束流
            bound_logger.error(f"流式转发中断 - Type: {type(e).__name__}, Message: {e}")
        finally:
            await response.aclose()
            bound_logger.debug(f"流式转发结束，共 {chunk_count} 个数据块")

    async def aclose(self) -> None:
        await self.client.aclose()
