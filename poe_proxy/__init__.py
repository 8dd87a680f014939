"""
Poe OpenAI Proxy

把 OpenAI 兼容的聊天补全和图片生成接口转发到 Poe API 的代理服务。

主要功能:
- 模型别名映射
- 标准参数 / extra_body 参数 / 模型默认参数的合并
- DALL-E 3 图片生成（尺寸转换为 aspect 参数）
- 流式响应原样转发
- 请求ID追踪和日志记录

使用示例:
    from poe_proxy import create_app, Config

    app = create_app(Config.from_file("config/settings.json"))
"""

__version__ = "0.1.0"
__description__ = "OpenAI-compatible proxy for the Poe API"

from .config import Config
from .main import create_app

__all__ = [
    "Config",
    "create_app",
    "__version__",
    "__description__",
]
