"""
日志配置模块
"""
import inspect
import logging
import sys
from pathlib import Path

from loguru import logger

from .config import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

# 需要桥接到 loguru 的标准库日志器
BRIDGED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi")

_configured = False


class InterceptHandler(logging.Handler):
    """把标准库 logging 的记录转发给 loguru"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _console_stream():
    """窗口化运行（如 pythonw）时 stdout/stderr 可能为 None"""
    for stream in (sys.stdout, sys.stderr, sys.__stdout__, sys.__stderr__):
        if stream is not None:
            return stream
    return None


def _bridge_stdlib_logging() -> None:
    handler = InterceptHandler()
    logging.basicConfig(handlers=[handler], level=0, force=True)
    for name in BRIDGED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [handler]
        std_logger.propagate = False


def setup_logger(force: bool = False):
    """配置日志系统"""
    global _configured
    if _configured and not force:
        return logger

    # 移除已有处理器
    logger.remove()

    # 创建日志目录
    log_dir = Path(settings.log_path)
    log_dir.mkdir(parents=True, exist_ok=True)

    enqueue = bool(settings.log_enqueue_enabled)

    # 控制台输出
    console_missing = False
    if settings.log_console_enabled:
        stream = _console_stream()
        if stream is None:
            console_missing = True
        else:
            logger.add(stream, level=settings.log_level, format=CONSOLE_FORMAT, enqueue=enqueue)

    # 文件输出 - 全局日志
    logger.add(
        log_dir / "app_{time:YYYY-MM-DD}.log",
        level=settings.log_level,
        format=FILE_FORMAT,
        rotation=settings.log_rotation,
        retention=f"{settings.log_retention_days} days",
        encoding="utf-8",
        serialize=settings.log_file_format == "json",
        enqueue=enqueue,
    )

    # 错误日志单独记录
    logger.add(
        log_dir / "error_{time:YYYY-MM-DD}.log",
        level="ERROR",
        format=FILE_FORMAT,
        rotation=settings.log_rotation,
        retention=f"{settings.log_retention_days * 2} days",
        encoding="utf-8",
        enqueue=enqueue,
    )

    _bridge_stdlib_logging()

    if console_missing:
        logger.warning("未检测到可用控制台输出流，已跳过控制台日志")

    _configured = True
    return logger


# 初始化日志系统
logger = setup_logger()
