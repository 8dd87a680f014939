"""Loguru日志配置"""

import sys
import uuid
from pathlib import Path

from loguru import logger


def _ensure_request_id(record) -> bool:
    record["extra"].setdefault("request_id", "---")
    return True


def configure_logging(log_config) -> None:
    """配置Loguru日志系统

    Args:
        log_config: 日志配置对象（LoggingConfig）
    """
    # 移除默认的handler
    logger.remove()

    # 控制台日志格式（包含请求ID）
    console_format = "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{extra[request_id]}</cyan> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"

    logger.add(
        sys.stdout,
        format=console_format,
        level=log_config.level,
        colorize=True,
        filter=_ensure_request_id,
    )

    if log_config.file:
        log_path = Path(log_config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # 文件日志（包含截取的异常堆栈）
        logger.add(
            str(log_path),
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[request_id]} | {name}:{line} | {message}",
            level=log_config.level,
            rotation="10 MB",
            retention="1 day",
            encoding="utf-8",
            backtrace=True,
            diagnose=False,
            filter=_ensure_request_id,
        )

    def exception_handler(exc_type, exc_value, exc_traceback):
        """全局异常处理器"""
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return

        logger.opt(exception=(exc_type, exc_value, exc_traceback)).critical(
            "未捕获的异常"
        )

    sys.excepthook = exception_handler


def generate_request_id() -> str:
    """生成唯一的请求ID

    Returns:
        str: 格式为 req_xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx 的请求ID
    """
    return f"req_{uuid.uuid4()}"


REQUEST_ID_HEADER = "X-Request-ID"


def get_request_id_from_request(request) -> str | None:
    """从请求对象中安全地获取请求ID

    Args:
        request: FastAPI Request对象

    Returns:
        str | None: 请求ID，如果不存在则返回None
    """
    try:
        return getattr(request.state, "request_id", None)
    except AttributeError:
        return None


def get_logger_with_request_id(request_id: str | None = None):
    """获取绑定了请求ID的日志器实例

    Args:
        request_id: 请求ID，如果为None则使用默认值

    Returns:
        绑定了请求ID的logger实例
    """
    return logger.bind(request_id=request_id or "---")
