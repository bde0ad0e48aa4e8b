# app/core/logging.py
"""
日志系统配置

stdlib logging 负责输出（stdout + 可选的轮转文件），structlog 负责结构化字段。
请求级的 request_id 由 RequestLoggingMiddleware 绑定到 contextvars，这里统一合并。
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, Optional

import structlog

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# 单个日志文件 10MB
MAX_LOG_BYTES = 10 * 1024 * 1024

# 访问日志由 RequestLoggingMiddleware 输出，uvicorn 自带的那一份只保留告警
QUIET_LOGGERS = ("uvicorn.access",)


def _rotating_handler(path: Path, level: int, backup_count: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=backup_count, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[str] = None,
    json_format: bool = True,
    quiet_loggers: Iterable[str] = QUIET_LOGGERS,
):
    """
    初始化日志
    - log_dir 为空：只写 stdout，不创建任何文件（测试、容器）
    - log_dir 非空：额外写 app.log（INFO+）与 error.log（ERROR+）
    - json_format=False：控制台友好的渲染，本地调试用
    可重复调用；每次都会替换 root logger 上的 handlers。
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(_rotating_handler(path / "app.log", logging.INFO, backup_count=5))
        root_logger.addHandler(_rotating_handler(path / "error.log", logging.ERROR, backup_count=10))

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    renderer = (
        structlog.processors.JSONRenderer(ensure_ascii=False)  # 孟加拉语/印地语原样输出
        if json_format
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    return structlog.get_logger()


def get_logger(name: str = None):
    """获取 logger 实例"""
    return structlog.get_logger(name)
