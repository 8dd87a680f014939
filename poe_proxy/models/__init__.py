"""
数据模型模块

- openai: OpenAI 兼容的请求/响应模型
- errors: 错误类型与标准化错误响应
"""

from .errors import (
    ERROR_TYPE_MAPPING,
    GatewayError,
    InvalidRequestError,
    InvalidSizeError,
    MissingCredentialError,
    NetworkError,
    UpstreamError,
    get_error_response,
    get_error_type,
)
from .openai import (
    ChatCompletionRequest,
    ImageData,
    ImageGenerationRequest,
    ImageGenerationResponse,
    ModelCard,
    ModelList,
    OpenAIErrorDetail,
    OpenAIErrorResponse,
    ServiceInfo,
)

__all__ = [
    "ChatCompletionRequest",
    "ImageGenerationRequest",
    "ImageGenerationResponse",
    "ImageData",
    "ModelCard",
    "ModelList",
    "ServiceInfo",
    "OpenAIErrorDetail",
    "OpenAIErrorResponse",
    "ERROR_TYPE_MAPPING",
    "GatewayError",
    "InvalidRequestError",
    "InvalidSizeError",
    "MissingCredentialError",
    "NetworkError",
    "UpstreamError",
    "get_error_response",
    "get_error_type",
]
