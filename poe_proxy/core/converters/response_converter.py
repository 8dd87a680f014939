"""
Poe-to-OpenAI图片响应转换器

上游把图片生成结果当作聊天补全返回，图片地址以纯文本（或 Markdown）
出现在消息内容里。这里从内容中提取第一个 URL，组装成 OpenAI 图片生成响应。
"""

import re
import time
from typing import Any

from poe_proxy.models.openai import ImageData, ImageGenerationResponse

IMAGE_URL_PATTERN = re.compile(r"https?://[^\s)]+")

# 固定文本，不回显调用方的提示词
REVISED_PROMPT = "成功生成图片！"


def extract_message_content(chat_response: Any) -> str:
    """取出 choices[0].message.content，结构不符时返回空字符串"""
    if not isinstance(chat_response, dict):
        return ""
    choices = chat_response.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message")
    if not isinstance(message, dict):
        return ""

    content = message.get("content")
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        # 多段内容：拼接所有文本段
        return "\n".join(
            part["text"]
            for part in content
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        )
    return ""


def extract_image_url(content: str) -> str:
    """提取内容中的第一个 http(s) URL，找不到时返回空字符串"""
    match = IMAGE_URL_PATTERN.search(content or "")
    return match.group(0) if match else ""


class ChatToImageConverter:
    """将上游聊天补全响应转换为OpenAI图片生成响应"""

    @staticmethod
    def convert(chat_response: Any, created: int | None = None) -> ImageGenerationResponse:
        """
        Args:
            chat_response: 上游响应的 JSON（解析失败时可传入 None）
            created: 创建时间戳，默认当前时间

        Returns:
            ImageGenerationResponse: 图片生成响应
        """
        url = extract_image_url(extract_message_content(chat_response))
        return ImageGenerationResponse(
            created=created if created is not None else int(time.time()),
            data=[ImageData(revised_prompt=REVISED_PROMPT, url=url)],
        )
