"""
Structured JSON Logging Module.

Every component logs through a ``StructuredLogger``: one JSON object per
line, on stdout and in a rotating log file.  Each entry is stamped with
the application slug so lines from several apps sharing one Supabase
project (and one log collector) can be told apart.

Auth secrets never reach the log: extra fields named like tokens or
OAuth codes are replaced with ``"[redacted]"``.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, TextIO, Union

ExtraValue = Union[str, int, float, bool, None]

_REDACTED: str = "[redacted]"
_SECRET_FIELDS: frozenset[str] = frozenset({
    "access_token",
    "refresh_token",
    "provider_token",
    "auth_code",
    "code",
    "anon_key",
})


class JSONFormatter(logging.Formatter):
    """Formats log records as structured JSON objects.

    Each log entry contains:
        - timestamp  (ISO-8601, UTC)
        - level      (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        - logger_name
        - app        (when an application slug was given)
        - message
        - extra      (fields passed via the ``extra`` kwarg; scalars
                      keep their JSON type, anything else is ``str()``)
        - exception  (formatted traceback when ``exc_info`` is set)
    """

    _STANDARD_ATTRS: frozenset[str] = frozenset(
        logging.LogRecord(
            name="", level=0, pathname="", lineno=0, msg="", args=(), exc_info=None
        ).__dict__.keys()
    ) | {"message", "asctime"}

    def __init__(self, app: Optional[str] = None) -> None:
        super().__init__()
        self._app: Optional[str] = app

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Union[str, dict[str, ExtraValue]]] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger_name": record.name,
        }
        if self._app:
            entry["app"] = self._app
        entry["message"] = record.getMessage()

        extra_fields = {
            key: _clean_extra(key, value)
            for key, value in record.__dict__.items()
            if key not in self._STANDARD_ATTRS
        }
        if extra_fields:
            entry["extra"] = extra_fields

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            entry["exception"] = record.exc_text

        return json.dumps(entry, ensure_ascii=False)


def _clean_extra(key: str, value: object) -> ExtraValue:
    if key in _SECRET_FIELDS:
        return _REDACTED
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


class StructuredLogger:
    """Injectable logger factory.

    Pass the resulting object wherever a logger is needed; the
    underlying ``logging.Logger`` is exposed via ``.logger``.

    Usage::

        log = StructuredLogger(name="knit_hub.session")
        log.info("Signed in: %s", user.id, extra={"user_id": user.id})

    Unset arguments fall back to ``AppConfig`` (``LOG_LEVEL``,
    ``LOG_FILE``, ``LOG_MAX_BYTES``, ``LOG_BACKUP_COUNT``, ``APP_SLUG``).
    Handlers are attached once per logger name.
    """

    def __init__(
        self,
        name: str = "knit_hub",
        level: Optional[int] = None,
        stream: Union[TextIO, None] = None,
        log_file: Optional[str] = None,
        max_bytes: Optional[int] = None,
        backup_count: Optional[int] = None,
    ) -> None:
        # Lazy import to avoid circular dependency at module level
        from knit_hub.config import get_config
        cfg = get_config()

        resolved_level: int = level if level is not None else _parse_level(cfg.LOG_LEVEL)
        self._logger: logging.Logger = logging.getLogger(name)
        self._logger.setLevel(resolved_level)

        if self._logger.handlers:
            return

        formatter = JSONFormatter(app=cfg.APP_SLUG)

        stream_handler = logging.StreamHandler(stream or sys.stdout)
        stream_handler.setLevel(resolved_level)
        stream_handler.setFormatter(formatter)
        self._logger.addHandler(stream_handler)

        file_handler = self._build_file_handler(
            log_file or cfg.LOG_FILE,
            max_bytes if max_bytes is not None else cfg.LOG_MAX_BYTES,
            backup_count if backup_count is not None else cfg.LOG_BACKUP_COUNT,
        )
        if file_handler is not None:
            file_handler.setLevel(resolved_level)
            file_handler.setFormatter(formatter)
            self._logger.addHandler(file_handler)

    def _build_file_handler(
        self,
        log_file: str,
        max_bytes: int,
        backup_count: int,
    ) -> Optional[RotatingFileHandler]:
        """Open the rotating log file, or ``None`` to stay console-only."""
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            return RotatingFileHandler(
                filename=str(log_path),
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        except OSError as exc:
            self._logger.warning(
                "Could not create log file '%s': %s. "
                "Continuing with console logging only.",
                log_file,
                exc,
            )
            return None

    @property
    def logger(self) -> logging.Logger:
        """Access the underlying ``logging.Logger`` directly."""
        return self._logger

    def debug(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.error(msg, *args, **kwargs)

    def critical(self, msg: str, *args: object, **kwargs: object) -> None:
        self._logger.critical(msg, *args, **kwargs)


def _parse_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str = "knit_hub") -> StructuredLogger:
    """Return a ``StructuredLogger`` under the ``knit_hub`` hierarchy.

    ``get_logger("session")`` and ``get_logger("knit_hub.session")`` name
    the same logger.
    """
    if name != "knit_hub" and not name.startswith("knit_hub."):
        name = f"knit_hub.{name}"
    return StructuredLogger(name=name)
