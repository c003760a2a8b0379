# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# STATUS: Core - Structured logging with context
# PURPOSE: Consistent, queryable logging across all components
# CREATED: 05 OCT 2026
# ============================================================================
"""
Structured Logging

Every SchemaBridge component logs through get_logger(). Messages pick up
the table / record / operation currently being worked on from a
thread-local context stack, so a failing DDL statement or metadata pass
can be traced back without repeating names in every message.

Output goes to stderr: the CLI prints DDL text and JSON on stdout.

Usage:
    from core.logging import ComponentType, get_logger, log_context

    logger = get_logger(__name__, ComponentType.DDL)

    with log_context(table_name="listing", operation="create"):
        logger.info("Executing DDL", extra={"statements": 2})
"""

import json
import logging
import os
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, TextIO, Union


class ComponentType(str, Enum):
    """Component types for logging categorization."""
    INTROSPECTION = "introspection"
    DDL = "ddl"
    CODEGEN = "codegen"
    QUERY = "query"
    CLI = "cli"


# Third-party loggers kept at WARNING unless running at DEBUG
LIBRARY_LOGGERS = ("psycopg",)

# Context field -> label in the human format
HUMAN_LABELS = {
    "schema_name": "schema",
    "table_name": "table",
    "record": "record",
    "operation": "op",
}


# ============================================================================
# CONTEXT
# ============================================================================

@dataclass(frozen=True)
class LogContext:
    """
    What is being worked on.

    Contexts nest: an inner log_context() inherits every field it does
    not set from the enclosing one.
    """
    table_name: Optional[str] = None
    schema_name: Optional[str] = None
    record: Optional[str] = None
    operation: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def merged(self, **kwargs) -> "LogContext":
        extra = {**self.extra, **kwargs.pop("extra", {})}
        known = {f.name for f in fields(self)}
        unknown = {k: v for k, v in kwargs.items() if k not in known}
        changes = {k: v for k, v in kwargs.items() if k in known and v is not None}
        return replace(self, extra={**extra, **unknown}, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Set fields only, extras flattened in."""
        result = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(self, f.name) is not None
        }
        result.update(self.extra)
        return result


_local = threading.local()


def _stack() -> List[LogContext]:
    if not hasattr(_local, "stack"):
        _local.stack = []
    return _local.stack


def get_current_context() -> LogContext:
    """Innermost context of this thread (empty outside any log_context)."""
    stack = _stack()
    return stack[-1] if stack else LogContext()


@contextmanager
def log_context(**kwargs) -> Iterator[LogContext]:
    """
    Push a context for the duration of a block.

    Unknown keyword arguments land in `extra`; None leaves the parent's
    value in place.

    Example:
        with log_context(table_name="address", operation="describe"):
            logger.info("Reading columns")
    """
    context = get_current_context().merged(**kwargs)
    stack = _stack()
    stack.append(context)
    try:
        yield context
    finally:
        stack.pop()


# ============================================================================
# FORMATTERS
# ============================================================================

def _record_data(record: logging.LogRecord) -> Dict[str, Any]:
    return dict(getattr(record, "data", None) or {})


class StructuredFormatter(logging.Formatter):
    """
    One JSON object per line, for log aggregation.
    """

    def __init__(self, include_source: bool = True):
        super().__init__()
        self.include_source = include_source

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        component = getattr(record, "component", None)
        if component:
            log_data["component"] = component

        context = get_current_context().to_dict()
        if context:
            log_data["context"] = context

        data = _record_data(record)
        if data:
            log_data["data"] = data

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if self.include_source:
            log_data["source"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(log_data, default=str)


class HumanFormatter(logging.Formatter):
    """
    Single-line format for terminals:

        12:04:31 INFO     core.schema.ddl_synthesizer [table=listing, op=execute]: Executed CREATE
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%H:%M:%S")

        context = get_current_context()
        parts = [
            f"{label}={getattr(context, name)}"
            for name, label in HUMAN_LABELS.items()
            if getattr(context, name)
        ]
        context_str = f" [{', '.join(parts)}]" if parts else ""

        data = _record_data(record)
        data_str = f" {data}" if data else ""

        result = f"{timestamp} {record.levelname:<8} {record.name}{context_str}: {record.getMessage()}{data_str}"
        if record.exc_info:
            result += f"\n{self.formatException(record.exc_info)}"
        return result


# ============================================================================
# LOGGERS
# ============================================================================

class ContextLogger(logging.LoggerAdapter):
    """
    Logger adapter stamping records with the component name.

    `extra={...}` passed to a log call is carried as record.data, so
    caller keys never clash with LogRecord attributes.
    """

    def process(self, msg, kwargs):
        kwargs["extra"] = {
            "component": self.extra.get("component"),
            "data": dict(kwargs.get("extra") or {}),
        }
        return msg, kwargs


def get_logger(
    name: str,
    component: Optional[ComponentType] = None,
) -> ContextLogger:
    """
    Get a context-aware logger.

    Args:
        name: Logger name (normally __name__)
        component: Component the logger belongs to
    """
    return ContextLogger(logging.getLogger(name), {"component": component.value if component else None})


def configure_logging(
    level: Union[str, int] = "INFO",
    json_output: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_output: JSON lines instead of the human format
            (LOG_FORMAT=json has the same effect)
        stream: Destination (default: stderr)
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if json_output or os.getenv("LOG_FORMAT", "").lower() == "json":
        formatter = StructuredFormatter()
    else:
        formatter = HumanFormatter()

    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)
    root.addHandler(handler)

    library_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
]
