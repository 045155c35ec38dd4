"""
SDK logger

Leveled log sink used by the request engine. Records go through the
standard logging module under the ``open_kkt`` channel and, when a log
directory is configured, are also appended as JSON lines to daily files
split by level (``error-2024-05-01.log``). The configured level filters
what this sink emits; the level of the ``open_kkt`` logger itself is left
to the host application.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union, runtime_checkable

from open_kkt.exceptions import ValidationError
from open_kkt.utils.redaction import redact_sensitive_data


LEVELS: Dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

DEFAULT_CHANNEL = "open_kkt"


@runtime_checkable
class LogSink(Protocol):
    """Leveled, fire-and-forget log capability"""

    def write(
        self, level: str, message: str, context: Optional[Dict[str, Any]] = None
    ) -> None:
        ...


class JsonLineFormatter(logging.Formatter):
    """Formats a record as one logstash-style JSON object"""

    def __init__(self, channel: str = DEFAULT_CHANNEL) -> None:
        super().__init__()
        self._channel = channel

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "@timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "@version": 1,
            "message": record.getMessage(),
            "level": record.levelname.lower(),
            "channel": self._channel,
            "context": getattr(record, "context", {}),
        }
        return json.dumps(payload, ensure_ascii=False, default=str)


class DailyLevelFileHandler(logging.Handler):
    """Appends each record to ``<level>-<YYYY-MM-DD>.log`` in a directory"""

    def __init__(self, directory: Union[str, Path], level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.directory = Path(directory).resolve()
        self.directory.mkdir(parents=True, exist_ok=True)

    def filename_for(self, record: logging.LogRecord) -> Path:
        day = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d")
        return self.directory / f"{record.levelname.lower()}-{day}.log"

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
            with open(self.filename_for(record), "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except Exception:
            self.handleError(record)


class Logger:
    """
    Default LogSink implementation

    Example:
        >>> log = Logger(log_path="./logs", level="info")
        >>> log.info("token expired", {"resource": "StateSystem"})
    """

    def __init__(
        self,
        channel: str = DEFAULT_CHANNEL,
        log_path: Optional[Union[str, Path]] = None,
        level: str = "debug",
    ) -> None:
        level_name = getattr(level, "value", level)
        if level_name not in LEVELS:
            raise ValidationError(
                f"Invalid log level '{level_name}'. Expected one of: {', '.join(LEVELS)}",
                field="log_level",
            )

        self._logger = logging.getLogger(channel)
        self._threshold = LEVELS[level_name]

        if log_path is not None:
            self._attach_file_handler(Path(log_path), channel)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def threshold(self) -> int:
        return self._threshold

    def _attach_file_handler(self, directory: Path, channel: str) -> None:
        resolved = directory.resolve()
        for handler in self._logger.handlers:
            if isinstance(handler, DailyLevelFileHandler) and handler.directory == resolved:
                return
        handler = DailyLevelFileHandler(resolved, level=self._threshold)
        handler.setFormatter(JsonLineFormatter(channel))
        self._logger.addHandler(handler)

    def write(
        self, level: str, message: str, context: Optional[Dict[str, Any]] = None
    ) -> None:
        """Write a record; unknown levels are logged at error level"""
        levelno = LEVELS.get(level, logging.ERROR)
        if levelno < self._threshold:
            return
        self._logger.log(
            levelno,
            message,
            extra={"context": redact_sensitive_data(dict(context or {}))},
        )

    def debug(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.write("debug", message, context)

    def info(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.write("info", message, context)

    def warning(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.write("warning", message, context)

    def error(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.write("error", message, context)

    def critical(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.write("critical", message, context)
