"""
核心功能模块

提供代理服务的核心功能，包括：
- Poe 上游客户端
- 请求/响应格式转换器

子模块:
- clients: Poe API 客户端实现
- converters: OpenAI ↔ Poe 格式转换器
"""

from .clients import PoeServiceClient
from .converters import (
    ChatToImageConverter,
    ImageToChatConverter,
    OpenAIToPoeConverter,
)

__all__ = [
    "PoeServiceClient",
    "OpenAIToPoeConverter",
    "ImageToChatConverter",
    "ChatToImageConverter",
]
