"""
日志模块

命令行使用的 loguru 配置。库代码只调用 loguru 的 logger，不自行添加输出。
"""

import os
import sys
from typing import Optional

from loguru import logger


DEBUG_ENV = "FICSITFETCH_DEBUG"

_FORMAT = "{time:HH:mm:ss} | {level: <8} | {message}"
_DEBUG_FORMAT = "{time:HH:mm:ss} | {level: <8} | {name}:{line} | {message}"


def resolve_level(debug: bool = False) -> str:
    """--debug 或 FICSITFETCH_DEBUG=1 时为 DEBUG，否则为 INFO"""
    if debug or os.environ.get(DEBUG_ENV, "0") == "1":
        return "DEBUG"
    return "INFO"


def setup_logger(
    level: Optional[str] = None,
    sink=sys.stderr,
    enqueue: bool = False,
    colorize: bool = True,
) -> None:
    """
    设置日志记录器

    DEBUG 级别下输出来源模块和行号，并开启异常回溯。

    Args:
        level: 日志级别，默认由 resolve_level 决定
        sink: 输出目标
        enqueue: 是否启用队列
        colorize: 是否启用颜色
    """
    level = level or resolve_level()
    debug = level == "DEBUG"

    logger.remove()
    logger.add(
        sink=sink,
        format=_DEBUG_FORMAT if debug else _FORMAT,
        enqueue=enqueue,
        level=level,
        colorize=colorize,
        backtrace=debug,
        diagnose=debug,
    )
    logger.debug(f"[日志] 级别 {level}")


__all__ = ["DEBUG_ENV", "resolve_level", "setup_logger"]
