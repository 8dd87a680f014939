"""
图片生成请求转换器

Poe 的 dall-e-3 只接受 1024x1024 画布，宽高比通过非标准参数 aspect 传递。
这里把 /v1/images/generations 请求改写成一次聊天补全请求，再交给
OpenAIToPoeConverter 生成最终的上游请求体。

注意: aspect 不是标准参数，只有 extraBodyParams 中包含 aspect 时才会被
放入 extra_body 转发，否则会被丢弃。
"""

from typing import Any

from poe_proxy.common.logging import get_logger_with_request_id
from poe_proxy.models.errors import InvalidSizeError
from poe_proxy.models.openai import ChatCompletionRequest, ImageGenerationRequest

IMAGE_MODEL = "dall-e-3"
DEFAULT_IMAGE_SIZE = "1024x1024"
# Poe 只支持这个尺寸，实际比例由 aspect 控制
UPSTREAM_IMAGE_SIZE = "1024x1024"
IMAGE_MAX_TOKENS = 1000

SIZE_TO_ASPECT: dict[str, str | None] = {
    "1024x1024": None,
    "1792x1024": "7:4",
    "1024x1792": "4:7",
}


def resolve_aspect(size: Any) -> str | None:
    """
    将 OpenAI 尺寸映射为 aspect 参数

    Args:
        size: 请求的尺寸，None 表示默认尺寸

    Returns:
        str | None: aspect 取值，默认尺寸返回 None

    Raises:
        InvalidSizeError: 尺寸不在支持范围内（包括非字符串取值）
    """
    if size is None:
        size = DEFAULT_IMAGE_SIZE
    if not isinstance(size, str) or size not in SIZE_TO_ASPECT:
        raise InvalidSizeError(size)
    return SIZE_TO_ASPECT[size]


class ImageToChatConverter:
    """将图片生成请求转换为聊天补全请求"""

    @staticmethod
    def convert(
        image_request: ImageGenerationRequest,
        request_id: str | None = None,
    ) -> ChatCompletionRequest:
        """
        构造用于图片生成的聊天补全请求

        Args:
            image_request: 图片生成请求
            request_id: 请求ID用于日志追踪

        Returns:
            ChatCompletionRequest: 交给请求转换器处理的聊天请求

        Raises:
            InvalidSizeError: 尺寸不在支持范围内（此时不会访问上游）
        """
        bound_logger = get_logger_with_request_id(request_id)
        size = DEFAULT_IMAGE_SIZE if image_request.size is None else image_request.size

        try:
            aspect = resolve_aspect(size)
        except InvalidSizeError:
            bound_logger.info(f"拒绝请求: 尺寸 {size} 不被支持")
            raise

        params = {
            "model": IMAGE_MODEL,
            "messages": [{"role": "user", "content": image_request.prompt}],
            "max_tokens": IMAGE_MAX_TOKENS,
            "size": UPSTREAM_IMAGE_SIZE,
        }
        if image_request.quality is not None:
            params["quality"] = image_request.quality
        if image_request.style is not None:
            params["style"] = image_request.style
        if aspect:
            params["aspect"] = aspect

        bound_logger.info(
            f"处理图片生成请求: 用户尺寸={size}, 上游尺寸={UPSTREAM_IMAGE_SIZE}, aspect={aspect}"
        )
        return ChatCompletionRequest.model_validate(params)
