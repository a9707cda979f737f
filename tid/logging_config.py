# tid/logging_config.py
"""
本模块负责集中配置项目的日志系统。

structlog 负责结构化事件的处理，标准库 logging 作为最终输出端点。
控制台格式使用 rich 渲染为单行彩色文本，生产环境使用 JSON。
"""

import logging
from collections.abc import MutableMapping
from typing import Any, Literal

import structlog
from rich.console import Console
from rich.text import Text
from structlog.typing import Processor


class RichLineRenderer:
    """把日志事件渲染为 `时间 级别 消息 key=value ... (logger)` 形式的单行文本。"""

    def __init__(self, show_timestamp: bool = True, show_logger_name: bool = True):
        self._console = Console()
        self._show_timestamp = show_timestamp
        self._show_logger_name = show_logger_name
        self._level_styles = {
            "debug": ("blue", "DEBUG   "),
            "info": ("green", "INFO    "),
            "warning": ("yellow", "WARNING "),
            "error": ("bold red", "ERROR   "),
            "critical": ("bold magenta", "CRITICAL"),
        }

    def __call__(
        self, logger: Any, name: str, event_dict: MutableMapping[str, Any]
    ) -> str:
        event = str(event_dict.pop("event", "")).strip()
        timestamp = event_dict.pop("timestamp", "")
        level = event_dict.pop("level", "info").lower()
        logger_name = event_dict.pop("logger", "unknown")
        style, level_text = self._level_styles.get(level, ("default", level.upper()))

        line = Text()
        if self._show_timestamp and timestamp:
            line.append(str(timestamp), style="dim")
            line.append(" ")
        line.append(level_text, style=style)
        line.append(" ")
        line.append(event)
        for key, value in sorted(event_dict.items()):
            line.append(f" {key}=", style="dim")
            line.append(repr(value), style="bright_white")
        if self._show_logger_name:
            line.append(f" ({logger_name})", style="cyan dim")

        with self._console.capture() as capture:
            self._console.print(line, soft_wrap=True)
        return capture.get().rstrip()


def setup_logging(
    log_level: str = "INFO",
    log_format: Literal["json", "console"] = "console",
    show_timestamp: bool = True,
    show_logger_name: bool = True,
) -> None:
    """
    配置全局的 structlog 日志系统。

    Args:
        log_level: 本项目日志记录器的最低级别 (DEBUG, INFO, WARNING, ERROR, CRITICAL)。
        log_format: 'console' 用于开发环境的可读输出，'json' 用于机器可读输出。
        show_timestamp: 是否在控制台输出中包含时间戳。
        show_logger_name: 是否在控制台输出中包含记录器名称。
    """
    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "console":
        processors.append(
            RichLineRenderer(
                show_timestamp=show_timestamp, show_logger_name=show_logger_name
            )
        )
    else:
        processors[4] = structlog.processors.TimeStamper(fmt="iso", utc=True)
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()

    class PassthroughFormatter(logging.Formatter):
        """直接传递 structlog 已经处理好的字符串。"""

        def format(self, record: logging.LogRecord) -> str:
            return str(record.getMessage())

    handler.setFormatter(PassthroughFormatter())

    root_logger = logging.getLogger()
    if root_logger.hasHandlers():
        root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    app_logger = logging.getLogger("tid")
    app_logger.setLevel(log_level.upper())
    app_logger.propagate = True

    structlog.get_logger("tid.logging_config").info(
        "日志系统已配置完成。",
        log_format=log_format,
        app_log_level=log_level.upper(),
    )
