"""配置模型与加载

配置文件为 JSON 格式，核心是三组参数转换映射：
- modelMapping: 对外模型别名 -> Poe 模型名
- extraBodyParams: 需要放入 extra_body 的非标准参数名
- modelDefaultParams: 按对外模型名配置的默认参数

配置在进程启动时加载一次，之后只读。文件缺失或格式错误时退化为空配置。
"""

import json
import os
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_CONFIG_PATH = "config/settings.json"
POE_CHAT_COMPLETIONS_URL = "https://api.poe.com/v1/chat/completions"


class ServerConfig(BaseModel):
    """服务器监听配置"""

    model_config = ConfigDict(frozen=True)

    host: str = Field("0.0.0.0", description="监听地址")
    port: int = Field(8000, description="监听端口")
    workers: int = Field(1, ge=1, description="uvicorn worker 数量")


class LoggingConfig(BaseModel):
    """日志配置"""

    model_config = ConfigDict(frozen=True)

    level: str = Field("INFO", description="日志级别")
    file: str | None = Field("logs/app.log", description="日志文件路径，为空则只输出到控制台")


class UpstreamConfig(BaseModel):
    """上游 Poe API 配置"""

    model_config = ConfigDict(frozen=True)

    url: str = Field(POE_CHAT_COMPLETIONS_URL, description="上游聊天补全端点")
    timeout: float = Field(600.0, gt=0, description="读取超时（秒）")
    connect_timeout: float = Field(10.0, gt=0, description="连接超时（秒）")


class Config(BaseModel):
    """网关配置（不可变）"""

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, protected_namespaces=()
    )

    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    upstream: UpstreamConfig = Field(default_factory=UpstreamConfig)
    model_mapping: dict[str, str] = Field(
        default_factory=dict, alias="modelMapping", description="模型别名映射"
    )
    extra_body_params: tuple[str, ...] = Field(
        default=(), alias="extraBodyParams", description="放入 extra_body 的参数名"
    )
    model_defaults: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        alias="modelDefaultParams",
        description="按模型名配置的默认参数",
    )

    @field_validator("extra_body_params", mode="before")
    @classmethod
    def _dedupe_extra_params(cls, value: Any) -> Any:
        # 保留配置顺序，去掉重复项
        if value is None:
            return ()
        if isinstance(value, (list, tuple)):
            return tuple(dict.fromkeys(value))
        return value

    @field_validator(
        "server", "logging", "upstream", "model_mapping", "model_defaults", mode="before"
    )
    @classmethod
    def _null_as_default(cls, value: Any) -> Any:
        # 单个键为 null 时按缺省处理，不影响其它配置项
        return {} if value is None else value

    @property
    def image_aspect_enabled(self) -> bool:
        """aspect 是否会被转发到上游（图片比例依赖此配置）"""
        return "aspect" in self.extra_body_params

    @classmethod
    def empty(cls) -> "Config":
        """空配置：所有映射为空，网关退化为透传"""
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        return cls.model_validate(data)

    @classmethod
    def from_file(cls, config_path: str | Path | None = None) -> "Config":
        """从 JSON 文件加载配置

        文件不存在、JSON 解析失败或字段校验失败时返回空配置并记录警告，
        服务仍然可以启动。

        Args:
            config_path: 配置文件路径，为 None 时使用 CONFIG_PATH 环境变量或默认路径

        Returns:
            Config: 加载得到的配置
        """
        path = Path(config_path or get_config_file_path())
        try:
            with path.open(encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("配置文件顶层必须是 JSON 对象")
            config = cls.from_dict(data)
        except (OSError, ValueError, ValidationError) as e:
            # json.JSONDecodeError 是 ValueError 的子类
            logger.warning(f"无法加载配置文件 {path}，将使用空配置: {e}")
            return cls.empty()

        logger.info(f"已加载配置文件: {path}")
        return config

    def log_summary(self) -> None:
        """输出配置摘要"""
        logger.info(f"已加载 {len(self.model_mapping)} 个模型映射")
        logger.info(
            f"已加载 {len(self.extra_body_params)} 个额外参数: {list(self.extra_body_params)}"
        )
        logger.info(f"已加载 {len(self.model_defaults)} 个模型的默认参数")

    def check_image_requirements(self) -> bool:
        """检查图片生成所需的配置

        图片生成通过非标准参数 aspect 传递宽高比，只有 extraBodyParams
        包含 aspect 时该参数才会被转发。缺失时记录错误日志。

        Returns:
            bool: 配置满足图片比例转发要求时返回 True
        """
        if self.image_aspect_enabled:
            return True
        logger.error(
            "extraBodyParams 未包含 aspect：1792x1024 / 1024x1792 的图片请求"
            "将丢失宽高比，只能生成 1024x1024 图片"
        )
        return False


def get_config_file_path() -> str:
    """获取配置文件路径（CONFIG_PATH 环境变量优先）"""
    return os.getenv("CONFIG_PATH", DEFAULT_CONFIG_PATH)
