"""
OpenAI-to-Poe请求转换器

将调用方的 OpenAI 格式请求转换为 Poe 上游可接受的请求体。

参数来源有三类：
- 标准参数：上游原生支持，直接透传（temperature 截断到 [0, 2]）
- 额外参数：extraBodyParams 中列出的非标准参数，放入 extra_body
- 模型默认参数：modelDefaultParams 中按原始模型名配置的默认值

优先级：调用方 extra_body > 调用方顶层字段 > 模型默认参数
"""

import copy
import json
from typing import Any

from poe_proxy.common.logging import get_logger_with_request_id
from poe_proxy.config.settings import Config
from poe_proxy.models.openai import ChatCompletionRequest

# 上游原生支持的参数（顺序固定）
STANDARD_PARAMS: tuple[str, ...] = (
    "model",
    "messages",
    "max_tokens",
    "max_completion_tokens",
    "stream",
    "stream_options",
    "top_p",
    "stop",
    "temperature",
    "n",
    "presence_penalty",
    "frequency_penalty",
    "logit_bias",
    "user",
    "functions",
    "function_call",
    "tools",
    "tool_choice",
    "response_format",
    "seed",
    "prompt",
    "size",
    "quality",
    "style",
)

MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 2.0


def clamp_temperature(value: float | None) -> float | None:
    """将 temperature 截断到 [0, 2]，None 原样返回"""
    if value is None:
        return None
    return min(max(value, MIN_TEMPERATURE), MAX_TEMPERATURE)


class OpenAIToPoeConverter:
    """将OpenAI请求转换为Poe上游请求体"""

    def __init__(self, config: Config):
        self.config = config

    def map_model(self, model: str | None) -> str | None:
        """按 modelMapping 解析模型名，未配置的模型原样返回"""
        if model is None:
            return None
        return self.config.model_mapping.get(model, model)

    def convert(
        self,
        request: ChatCompletionRequest,
        request_id: str | None = None,
    ) -> dict[str, Any]:
        """
        生成上游请求体

        Args:
            request: 调用方请求
            request_id: 请求ID用于日志追踪

        Returns:
            dict[str, Any]: 可直接发送给上游的请求体，不含值为 None 的字段
        """
        bound_logger = get_logger_with_request_id(request_id)
        supplied = request.supplied_params()
        original_model = supplied.get("model")
        extra_params = self.config.extra_body_params

        result: dict[str, Any] = {
            "model": self.map_model(original_model),
            "messages": supplied.get("messages"),
        }

        # 标准参数
        for param in STANDARD_PARAMS:
            if param in ("model", "messages") or param not in supplied:
                continue
            value = supplied[param]
            if param == "temperature":
                value = clamp_temperature(value)
            result[param] = value

        # 顶层传入的额外参数
        extra_body: dict[str, Any] = {
            param: supplied[param] for param in extra_params if param in supplied
        }

        # 调用方显式的 extra_body 覆盖顶层额外参数
        if isinstance(supplied.get("extra_body"), dict):
            extra_body.update(supplied["extra_body"])

        # 模型默认参数（按原始模型名查找）
        defaults = self.config.model_defaults.get(original_model, {}) if original_model else {}
        applied_defaults = []
        for param, default_value in defaults.items():
            if param in result or param in extra_body:
                continue
            target = extra_body if param in extra_params else result
            target[param] = copy.deepcopy(default_value)
            applied_defaults.append(param)

        if applied_defaults:
            bound_logger.debug(f"应用模型默认参数 [{original_model}]: {applied_defaults}")

        if extra_body:
            result["extra_body"] = extra_body

        payload = {key: value for key, value in result.items() if value is not None}

        if payload.get("model") != original_model:
            bound_logger.info(f"模型映射: {original_model} -> {payload.get('model')}")
        bound_logger.debug(
            f"转换后的请求: {json.dumps(payload, ensure_ascii=False, default=str)}"
        )
        return payload
