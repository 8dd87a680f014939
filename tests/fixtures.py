"""测试辅助：示例配置与模拟的 Poe 上游"""

import json
from collections.abc import AsyncIterator, Callable
from typing import Any

import httpx

from poe_proxy.config.settings import Config

UPSTREAM_URL = "https://poe.test/v1/chat/completions"

SAMPLE_CONFIG: dict[str, Any] = {
    "logging": {"level": "DEBUG", "file": None},
    "upstream": {"url": UPSTREAM_URL, "timeout": 5, "connect_timeout": 1},
    "modelMapping": {
        "gpt-4": "upstream-gpt4",
        "claude-sonnet": "Claude-Sonnet-4",
    },
    "extraBodyParams": ["aspect", "thinking_budget", "web_search"],
    "modelDefaultParams": {
        "claude-sonnet": {
            "thinking_budget": 4096,
            "max_tokens": 8192,
            "temperature": 0.5,
        },
        "gpt-4": {"web_search": True},
        "streamer": {"stream": True},
    },
}


def make_config(**overrides: Any) -> Config:
    """基于 SAMPLE_CONFIG 构造配置，overrides 按顶层键覆盖"""
    data = {**SAMPLE_CONFIG, **overrides}
    return Config.from_dict(data)


def chat_completion_body(content: str, model: str = "dall-e-3") -> dict[str, Any]:
    """上游聊天补全响应"""
    return {
        "id": "chatcmpl-123",
        "object": "chat.completion",
        "created": 1700000000,
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 15, "total_tokens": 25},
    }


SSE_CHUNKS = [
    b'data: {"choices":[{"index":0,"delta":{"role":"assistant","content":""}}]}\n\n',
    b'data: {"choices":[{"index":0,"delta":{"content":"Hel"}}]}\n\n',
    b'data: {"choices":[{"index":0,"delta":{"content":"lo"}}]}\n\n',
    b"data: [DONE]\n\n",
]


async def iter_chunks(chunks: list[bytes]) -> AsyncIterator[bytes]:
    for chunk in chunks:
        yield chunk


class FakePoeUpstream:
    """记录收到的请求并返回预设响应的上游"""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response] | None = None):
        self.requests: list[httpx.Request] = []
        self.responder = responder or (
            lambda request: httpx.Response(200, json=chat_completion_body("Hello!"))
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def last_payload(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


def empty_config() -> Config:
    """没有任何映射的配置（不写日志文件）"""
    return Config.from_dict({"logging": {"level": "DEBUG", "file": None}})
