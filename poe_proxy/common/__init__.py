"""
通用工具模块

提供项目中共享的工具和实用功能。

主要功能:
- 日志配置和管理
- 请求ID生成和追踪

使用示例:
    from poe_proxy.common import configure_logging, get_logger_with_request_id

    configure_logging(config.logging)
    bound_logger = get_logger_with_request_id("req_123")
"""

from .logging import (
    REQUEST_ID_HEADER,
    configure_logging,
    generate_request_id,
    get_logger_with_request_id,
    get_request_id_from_request,
)

__all__ = [
    "REQUEST_ID_HEADER",
    "configure_logging",
    "generate_request_id",
    "get_request_id_from_request",
    "get_logger_with_request_id",
]
