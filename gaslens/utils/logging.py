# gaslens/utils/logging.py - Logging configuration

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Dict, Optional


class LogFormat(Enum):
    """Log format types"""
    SIMPLE = "simple"
    JSON = "json"


class StructuredFormatter(logging.Formatter):
    """Formatter that emits text or JSON lines and appends structured data"""

    def __init__(self, fmt_type: LogFormat = LogFormat.SIMPLE, include_context: bool = True):
        self.fmt_type = fmt_type
        self.include_context = include_context
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        structured_data = getattr(record, 'structured_data', {})

        if self.fmt_type == LogFormat.JSON:
            return self._format_json(record, structured_data)
        return self._format_text(record, structured_data)

    def _format_json(self, record: logging.LogRecord, structured_data: Dict) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        if structured_data:
            log_entry["data"] = structured_data

        return json.dumps(log_entry, default=str)

    def _format_text(self, record: logging.LogRecord, structured_data: Dict) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]

        base_msg = f"{timestamp} [{record.levelname:8}] {record.name}:{record.lineno} - {record.getMessage()}"

        if self.include_context and structured_data:
            base_msg += f" | {json.dumps(structured_data, default=str)}"

        if record.exc_info:
            base_msg += f"\n{self.formatException(record.exc_info)}"

        return base_msg


def configure_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    component: str = "gaslens",
    json_format: bool = False,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    enable_console: bool = True
) -> logging.Logger:
    """
    Configure logging for a component

    Args:
        level: Logging level name
        log_file: Path to log file, rotated by size
        component: Logger name the handlers are attached to
        json_format: Emit JSON lines instead of text
        max_bytes: Maximum log file size
        backup_count: Number of rotated files to keep
        enable_console: Whether to log to stdout
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(component)
    logger.setLevel(log_level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    formatter = StructuredFormatter(LogFormat.JSON if json_format else LogFormat.SIMPLE)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.captureWarnings(True)

    # Quiet noisy libraries
    logging.getLogger('asyncio').setLevel(logging.WARNING)
    logging.getLogger('aiohttp.access').setLevel(logging.WARNING)

    logger.debug(f"Logging configured - Level: {level}, File: {log_file}")
    return logger
