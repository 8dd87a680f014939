"""
转换器模块

提供OpenAI与Poe上游之间的请求/响应转换功能。
"""

from .image_converter import ImageToChatConverter, resolve_aspect
from .request_converter import STANDARD_PARAMS, OpenAIToPoeConverter, clamp_temperature
from .response_converter import ChatToImageConverter, extract_image_url

__all__ = [
    "STANDARD_PARAMS",
    "OpenAIToPoeConverter",
    "clamp_temperature",
    "ImageToChatConverter",
    "resolve_aspect",
    "ChatToImageConverter",
    "extract_image_url",
]
