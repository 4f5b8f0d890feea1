"""
日志模块

使用 loguru 提供统一的日志记录功能。
"""

import os
import sys
from typing import Optional

from loguru import logger

CONSOLE_FORMAT = "<level>{level: <8}</level> | {message}"
DEBUG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | {message}"
)


def resolve_level(level: Optional[str] = None) -> str:
    """命令行参数优先，其次是 MODINSTALL_DEBUG 环境变量"""
    if level:
        return level.upper()
    return "DEBUG" if os.environ.get("MODINSTALL_DEBUG", "0") == "1" else "INFO"


def setup_logger(
    level: Optional[str] = None,
    sink=None,
    colorize: bool = True,
) -> None:
    """
    设置日志记录器

    Args:
        level: 日志级别 (DEBUG, INFO, WARNING, ERROR)
        sink: 输出目标（默认为当前的标准输出）
        colorize: 是否启用颜色
    """
    level = resolve_level(level)
    debug = level == "DEBUG"

    logger.remove()
    logger.add(
        sink=sys.stdout if sink is None else sink,
        format=DEBUG_FORMAT if debug else CONSOLE_FORMAT,
        level=level,
        colorize=colorize,
        backtrace=debug,
        diagnose=debug,
    )

    if debug:
        logger.debug("DEBUG 模式已启用")


__all__ = ["logger", "setup_logger", "resolve_level"]
