"""错误类型与标准化错误响应"""

from typing import Any

from .openai import OpenAIErrorDetail, OpenAIErrorResponse

# 上游HTTP状态码 -> OpenAI错误类型
ERROR_TYPE_MAPPING: dict[int, str] = {
    400: "invalid_request_error",
    401: "authentication_error",
    402: "insufficient_credits",
    403: "moderation_error",
    404: "not_found_error",
    408: "timeout_error",
    413: "request_too_large",
    429: "rate_limit_error",
    502: "upstream_error",
    529: "overloaded_error",
}

SUPPORTED_IMAGE_SIZES = ("1024x1024", "1792x1024", "1024x1792")


def get_error_type(status_code: int) -> str:
    """根据HTTP状态码映射错误类型"""
    return ERROR_TYPE_MAPPING.get(status_code, "unknown_error")


def extract_upstream_error_message(data: Any) -> str | None:
    """从上游错误响应体中提取 error.message"""
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    return None


class GatewayError(Exception):
    """返回给调用方的错误基类

    Attributes:
        status_code: HTTP状态码
        message: 错误消息
        error_type: OpenAI错误类型
        param: 相关参数名
        code: 错误代码
    """

    status_code: int = 500
    error_type: str = "server_error"
    default_message: str = "服务器内部错误，请稍后重试"

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        error_type: str | None = None,
        param: str | None = None,
        code: str | None = None,
    ):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        if error_type is not None:
            self.error_type = error_type
        self.param = param
        self.code = code
        super().__init__(self.message)

    def to_response(self) -> OpenAIErrorResponse:
        return OpenAIErrorResponse(
            error=OpenAIErrorDetail(
                message=self.message,
                type=self.error_type,
                param=self.param,
                code=self.code,
            )
        )

    def to_dict(self) -> dict[str, Any]:
        return self.to_response().model_dump(exclude_none=True)


class MissingCredentialError(GatewayError):
    """缺少 Bearer token"""

    status_code = 401
    error_type = "authentication_error"
    default_message = "Missing Bearer token"


class InvalidRequestError(GatewayError):
    """请求体无法解析或字段类型错误"""

    status_code = 400
    error_type = "invalid_request_error"
    default_message = "Invalid request body"


class InvalidSizeError(InvalidRequestError):
    """图片尺寸不在支持范围内"""

    def __init__(self, size: Any):
        self.size = size
        super().__init__(
            f"Invalid size: {size}. Supported sizes are: {', '.join(SUPPORTED_IMAGE_SIZES)}.",
            param="size",
            code="invalid_size",
        )


class UpstreamError(GatewayError):
    """上游返回非2xx状态码"""

    default_message = "Upstream API error"

    def __init__(self, status_code: int, message: str | None = None):
        super().__init__(
            message,
            status_code=status_code,
            error_type=get_error_type(status_code),
        )

    @classmethod
    def from_response_body(cls, status_code: int, data: Any) -> "UpstreamError":
        return cls(status_code, extract_upstream_error_message(data))


class NetworkError(GatewayError):
    """无法完成上游调用（连接失败、超时等）"""

    status_code = 408
    error_type = "timeout_error"
    default_message = "Network error or timeout"


def get_error_response(
    status_code: int,
    message: str | None = None,
    param: str | None = None,
    code: str | None = None,
) -> OpenAIErrorResponse:
    """根据HTTP状态码构造标准错误响应"""
    fallback = "server_error" if status_code >= 500 else "unknown_error"
    error_type = ERROR_TYPE_MAPPING.get(status_code, fallback)
    return GatewayError(
        message,
        status_code=status_code,
        error_type=error_type,
        param=param,
        code=code,
    ).to_response()
