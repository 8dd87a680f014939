"""上游客户端"""

from .poe_client import PoeServiceClient

__all__ = ["PoeServiceClient"]
