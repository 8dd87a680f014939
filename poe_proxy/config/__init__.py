"""
配置管理模块

提供网关配置的加载与校验。

主要功能:
- 配置文件加载和校验
- 加载失败时退化为空配置
- 图片生成依赖项检查

使用示例:
    from poe_proxy.config import Config

    config = Config.from_file("config/settings.json")
    print(config.model_mapping)
"""

from .settings import (
    DEFAULT_CONFIG_PATH,
    POE_CHAT_COMPLETIONS_URL,
    Config,
    LoggingConfig,
    ServerConfig,
    UpstreamConfig,
    get_config_file_path,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "POE_CHAT_COMPLETIONS_URL",
    "get_config_file_path",
    "Config",
    "ServerConfig",
    "LoggingConfig",
    "UpstreamConfig",
]
