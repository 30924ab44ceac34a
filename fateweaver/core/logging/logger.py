"""
Fateweaver Logging Subsystem

Purpose
-------
Logging helpers shared by every resolution module:

- Structured JSON records for aggregation and analysis.
- LogContext-based propagation of per-invocation context via ContextVars
  (which character is acting, which action is being resolved).
- Correlation IDs so one gather/loot/flee call can be traced end to end.
- An opt-in console / rotating file stack for host applications.

Responsibilities
----------------
- Enrich log records with contextual fields:
  - character, action
  - correlation_id, request_id
  - component, operation
- Provide simple helper APIs:
  - get_logger()
  - LogContext (sync + async context manager)
  - set_log_context() / clear_log_context()
  - setup_logging() / shutdown_logging() for hosts that want fateweaver's
    formatting
  - get_logging_health() for inspection.

Design Decisions
----------------
- Importing fateweaver never configures logging. The package logger only
  carries a NullHandler; records propagate to whatever the host set up.
- setup_logging() adds handlers it owns to the root logger and leaves the
  host's existing handlers, filters and root level alone. ContextFilter sits
  on those handlers, so records from any logger are enriched before they are
  formatted.
- JSONFormatter is the canonical representation. Extra fields passed via
  `logger.info("msg", extra={...})` are merged into the payload under
  "extra"; the resolvers use this for their per-roll diagnostics.

Dependencies
------------
- fateweaver.core.config.config.Config
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from contextvars import ContextVar, Token
from dataclasses import dataclass
from datetime import datetime, timezone
from logging import Logger
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from fateweaver.core.config.config import Config

PACKAGE_LOGGER = "fateweaver"


# ============================================================================
# Invocation Context (ContextVars)
# ============================================================================

_request_context: ContextVar[Dict[str, Any]] = ContextVar(
    "request_context",
    default={},
)


# ============================================================================
# Config / Environment
# ============================================================================


@dataclass(frozen=True, slots=True)
class LoggerConfig:
    """Console and file settings read from Config."""

    CONSOLE_FORMAT: str = "%(asctime)s | %(levelname)-8s | %(name)-36s | %(character)s | %(message)s"
    DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"

    DAILY_BASENAME: str = "fateweaver_daily.json.log"
    DAILY_BACKUP_COUNT: int = 1

    @property
    def environment(self) -> str:
        return str(getattr(Config, "ENVIRONMENT", "development")).lower()

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def logs_dir(self) -> Path:
        return Path(Config.LOGS_DIR).resolve()

    @property
    def log_level(self) -> int:
        level_name = getattr(Config, "LOG_LEVEL", "INFO")
        if not isinstance(level_name, str):
            level_name = "INFO"
        return getattr(logging, level_name.upper(), logging.INFO)

    @property
    def use_json(self) -> bool:
        json_flag = getattr(Config, "LOG_JSON", None)
        if json_flag is None:
            return self.is_production
        return bool(json_flag)

    @property
    def use_colors(self) -> bool:
        if self.use_json:
            return False
        return bool(getattr(Config, "LOG_COLORS", True)) and sys.stdout.isatty()

    @property
    def log_to_file(self) -> bool:
        return bool(getattr(Config, "LOG_TO_FILE", False))


LOGGER_CONFIG = LoggerConfig()


@dataclass(frozen=True, slots=True)
class LoggingHealth:
    initialized: bool
    handlers: Tuple[str, ...]
    level: str


# ============================================================================
# Filters & Formatters
# ============================================================================


class ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        context: Dict[str, Any] = _request_context.get({})

        # An explicit extra={"character": ...} wins over the ambient context
        if not hasattr(record, "character"):
            record.character = context.get("character", "N/A")
        if not hasattr(record, "action"):
            record.action = context.get("action", "N/A")

        correlation_id = context.get("correlation_id") or context.get("request_id")
        record.correlation_id = correlation_id or "N/A"
        record.request_id = context.get("request_id", record.correlation_id)

        record.component = context.get("component") or record.name.split(".", 1)[0]
        record.operation = context.get("operation", "N/A")

        return True


class ColoredFormatter(logging.Formatter):
    COLORS: Dict[str, str] = {
        "DEBUG": "\033[90m",
        "INFO": "\033[94m",
        "WARNING": "\033[93m",
        "ERROR": "\033[91m",
        "CRITICAL": "\033[91m\033[1m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        levelname = record.levelname
        prefix = self.COLORS.get(levelname)
        if prefix:
            record.levelname = f"{prefix}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


class JSONFormatter(logging.Formatter):
    # Attributes every LogRecord carries; anything else came in via extra=
    STANDARD_ATTRS = frozenset(
        logging.LogRecord("", 0, "", 0, "", None, None).__dict__
    ) | {"message", "asctime", "taskName"}

    CONTEXT_ATTRS = (
        "character",
        "action",
        "correlation_id",
        "request_id",
        "component",
        "operation",
    )

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for attr in self.CONTEXT_ATTRS:
            value = getattr(record, attr, None)
            if value not in (None, "N/A"):
                log_data[attr] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in self.STANDARD_ATTRS
            and key not in self.CONTEXT_ATTRS
            and not key.startswith("_")
        }
        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, ensure_ascii=False, default=str)


# ============================================================================
# Host Setup
# ============================================================================

_installed_handlers: List[logging.Handler] = []


def _build_console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    if LOGGER_CONFIG.use_json:
        handler.setFormatter(JSONFormatter())
    elif LOGGER_CONFIG.use_colors:
        handler.setFormatter(
            ColoredFormatter(fmt=LOGGER_CONFIG.CONSOLE_FORMAT, datefmt=LOGGER_CONFIG.DATE_FORMAT)
        )
    else:
        handler.setFormatter(
            logging.Formatter(fmt=LOGGER_CONFIG.CONSOLE_FORMAT, datefmt=LOGGER_CONFIG.DATE_FORMAT)
        )
    return handler


def _build_daily_file_handler() -> logging.Handler:
    LOGGER_CONFIG.logs_dir.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        filename=str(LOGGER_CONFIG.logs_dir / LOGGER_CONFIG.DAILY_BASENAME),
        when="midnight",
        interval=1,
        backupCount=LOGGER_CONFIG.DAILY_BACKUP_COUNT,
        encoding="utf-8",
        utc=True,
    )
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging() -> None:
    """
    Install fateweaver's console handler (plus the daily JSON file when
    FATEWEAVER_LOG_TO_FILE is set) on the root logger.

    Meant for host applications and scripts; calling it again is a no-op
    until shutdown_logging() runs.
    """
    if _installed_handlers:
        return

    level = LOGGER_CONFIG.log_level
    handlers: List[logging.Handler] = [_build_console_handler()]
    if LOGGER_CONFIG.log_to_file:
        handlers.append(_build_daily_file_handler())

    root = logging.getLogger()
    for handler in handlers:
        handler.setLevel(level)
        handler.addFilter(ContextFilter())
        root.addHandler(handler)
    _installed_handlers.extend(handlers)

    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
    logging.getLogger("yaml").setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging initialized",
        extra={
            "environment": LOGGER_CONFIG.environment,
            "log_level": logging.getLevelName(level),
            "json": LOGGER_CONFIG.use_json,
            "log_to_file": LOGGER_CONFIG.log_to_file,
        },
    )


def shutdown_logging() -> None:
    """Remove and close the handlers installed by setup_logging()."""
    if not _installed_handlers:
        return

    logging.getLogger(__name__).info("Shutting down logging subsystem.")

    root = logging.getLogger()
    while _installed_handlers:
        handler = _installed_handlers.pop()
        root.removeHandler(handler)
        handler.flush()
        handler.close()

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.NOTSET)


def get_logging_health() -> LoggingHealth:
    return LoggingHealth(
        initialized=bool(_installed_handlers),
        handlers=tuple(type(h).__name__ for h in _installed_handlers),
        level=logging.getLevelName(logging.getLogger(PACKAGE_LOGGER).getEffectiveLevel()),
    )


# ============================================================================
# Public API
# ============================================================================


def get_logger(name: str) -> Logger:
    return logging.getLogger(name)


class LogContext:
    """
    Scope log records to one character and action.

    Example
    -------
    >>> with LogContext(character="Link", action="loot"):
    ...     engine.resolve_final_value(snapshot, 62, "regular")
    """

    def __init__(
        self,
        character: Optional[str] = None,
        action: Optional[str] = None,
        component: Optional[str] = None,
        operation: Optional[str] = None,
        correlation_id: Optional[str] = None,
        request_id: Optional[str] = None,
        **extra: Any,
    ) -> None:
        effective = correlation_id or request_id or self._generate_correlation_id()

        self.context: Dict[str, Any] = {
            "character": character or "N/A",
            "action": action or "N/A",
            "component": component,
            "operation": operation,
            "correlation_id": effective,
            "request_id": request_id or effective,
            **extra,
        }

        self._token: Optional[Token[Dict[str, Any]]] = None

    @staticmethod
    def _generate_correlation_id() -> str:
        return str(uuid.uuid4())[:8]

    def __enter__(self) -> "LogContext":
        self._token = _request_context.set(self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _request_context.reset(self._token)

    async def __aenter__(self) -> "LogContext":
        return self.__enter__()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.__exit__(exc_type, exc_val, exc_tb)


def set_log_context(
    character: Optional[str] = None,
    action: Optional[str] = None,
    component: Optional[str] = None,
    operation: Optional[str] = None,
    correlation_id: Optional[str] = None,
    request_id: Optional[str] = None,
    **extra: Any,
) -> None:
    """Merge fields into the current context without a scope."""
    current = _request_context.get({}).copy()

    for key, value in (
        ("character", character),
        ("action", action),
        ("component", component),
        ("operation", operation),
    ):
        if value is not None:
            current[key] = value

    if correlation_id:
        current["correlation_id"] = correlation_id
    if request_id:
        current["request_id"] = request_id
        current.setdefault("correlation_id", request_id)

    current.update(extra)
    _request_context.set(current)


def get_log_context() -> Dict[str, Any]:
    return dict(_request_context.get({}))


def clear_log_context() -> None:
    _request_context.set({})


logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())
