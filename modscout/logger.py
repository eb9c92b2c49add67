"""
日志模块

CLI 启动时配置 loguru：日志写到 stderr，stdout 只留给结果输出。
"""

import os
import sys
from typing import Optional, TextIO

from loguru import logger

DEBUG_ENV = "MODSCOUT_DEBUG"
LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"
DEBUG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | {message}"
)


def setup_logger(debug: bool = False, sink: Optional[TextIO] = None) -> None:
    """
    设置日志记录器

    Args:
        debug: 启用 DEBUG 级别；环境变量 MODSCOUT_DEBUG=1 同样生效
        sink: 输出流，默认当前的 sys.stderr。非终端输出时不着色
    """
    debug = debug or os.environ.get(DEBUG_ENV, "0") == "1"
    stream = sink if sink is not None else sys.stderr
    isatty = getattr(stream, "isatty", None)

    logger.remove()
    logger.add(
        stream,
        format=DEBUG_FORMAT if debug else LOG_FORMAT,
        level="DEBUG" if debug else "INFO",
        colorize=bool(isatty and isatty()),
        backtrace=debug,
        diagnose=debug,
    )

    if debug:
        logger.debug("DEBUG 模式已启用")


__all__ = ["logger", "setup_logger"]
