"""Structured logging configuration using structlog."""

import logging
import re
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any
from typing_extensions import override

import structlog

LOG_DIR = Path(__file__).parent.parent.parent / "logs"

APP_LOG_FILE = LOG_DIR / "app.log"
ERROR_LOG_FILE = LOG_DIR / "error.log"
REQUEST_LOG_FILE = LOG_DIR / "request.log"

ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")

# Longest user message / answer echoed into the request log
MAX_LOGGED_TEXT = 500


def strip_ansi(text: str) -> str:
    """Remove ANSI escape codes from text."""
    return ANSI_ESCAPE.sub("", text)


class CleanFileHandler(logging.Handler):
    """File handler that writes plain logs and rotates by size."""

    def __init__(self, filepath: Path, max_size_mb: int = 10, max_days: int = 30):
        super().__init__()
        self.filepath = filepath
        self.max_size = max_size_mb * 1024 * 1024
        self.max_days = max_days

    @override
    def emit(self, record: Any) -> None:
        try:
            msg = strip_ansi(self.format(record))
            with open(self.filepath, "a", encoding="utf-8") as f:
                f.write(msg + "\n")

            if self.filepath.stat().st_size > self.max_size:
                self._rotate()
        except Exception:
            self.handleError(record)

    def _rotate(self) -> None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        if self.filepath.exists():
            self.filepath.rename(self.filepath.with_suffix(f".{timestamp}.log"))
        self._cleanup_old_logs()

    def _cleanup_old_logs(self) -> None:
        """Delete rotated files older than max_days."""
        cutoff = datetime.now() - timedelta(days=self.max_days)

        for log_file in self.filepath.parent.glob(f"{self.filepath.stem}.*.log"):
            try:
                timestamp_str = log_file.stem.split(".")[-1]
                if datetime.strptime(timestamp_str, "%Y%m%d_%H%M%S") < cutoff:
                    log_file.unlink()
            except (ValueError, OSError):
                continue


def setup_logging(
    log_level: str = "INFO",
    json_format: bool = False,
    log_to_file: bool = False,
) -> None:
    """Configure structured logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_format: If True, output JSON; otherwise a colored console format
        log_to_file: If True, also write app/error/request logs under ``logs/``
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    if log_to_file:
        LOG_DIR.mkdir(exist_ok=True)
        file_format = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

        app_handler = CleanFileHandler(APP_LOG_FILE, max_size_mb=10, max_days=30)
        app_handler.setFormatter(logging.Formatter(file_format, datefmt="%Y-%m-%d %H:%M:%S"))
        app_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(app_handler)

        error_handler = CleanFileHandler(ERROR_LOG_FILE, max_size_mb=5, max_days=60)
        error_handler.setFormatter(logging.Formatter(file_format, datefmt="%Y-%m-%d %H:%M:%S"))
        error_handler.setLevel(logging.ERROR)
        root_logger.addHandler(error_handler)

        request_handler = CleanFileHandler(REQUEST_LOG_FILE, max_size_mb=20, max_days=7)
        request_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
        )
        request_logger = logging.getLogger("request")
        request_logger.addHandler(request_handler)
        request_logger.setLevel(logging.INFO)
        request_logger.propagate = False

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors_list = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors_list = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors_list,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a configured logger instance."""
    return structlog.get_logger(name)


def _truncate(text: str | None) -> str | None:
    if text and len(text) > MAX_LOGGED_TEXT:
        return text[:MAX_LOGGED_TEXT] + "..."
    return text


def log_request(
    method: str,
    path: str,
    user_id: str | None = None,
    conversation_id: str | None = None,
    user_message: str | None = None,
    tools: list[str] | None = None,
    response: str | None = None,
    duration_ms: float | None = None,
    status: str = "success",
    error: str | None = None,
) -> None:
    """Log a chat request/response as one readable line.

    Args:
        method: HTTP method
        path: Request path
        user_id: Calling user
        conversation_id: Conversation the message belongs to
        user_message: User's input message
        tools: Names of tools the agent called
        response: Assistant answer
        duration_ms: Request duration in milliseconds
        status: "success" or "error"
        error: Error message if failed
    """
    parts = [f"[{method}] {path}"]

    if user_id:
        parts.append(f"user={user_id}")
    if conversation_id:
        parts.append(f"conversation={conversation_id[:8]}...")
    if user_message:
        parts.append(f"| INPUT: {_truncate(user_message)}")
    if tools:
        parts.append(f"| TOOLS: {', '.join(tools)}")
    if response:
        parts.append(f"| OUTPUT: {_truncate(response)}")
    if duration_ms:
        parts.append(f"| {duration_ms:.0f}ms")

    parts.append(f"| {status.upper()}")

    if error:
        parts.append(f"| ERROR: {error}")

    logging.getLogger("request").info(" ".join(parts))
