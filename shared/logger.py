"""
Strata Structured Logger
=========================

:class:`StrataLogger` binds a stdlib logger under the ``strata.``
namespace to one component. Records go to stderr through Rich and,
when a log file is configured, to a rotating file as plain text or as
JSON lines carrying the component, the current operation and any
keyword fields passed to the log call.

References:
    - Python logging HOWTO. https://docs.python.org/3/howto/logging.html
    - Rich library. https://github.com/Textualize/rich
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterator

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

_LOG_THEME = Theme(
    {
        "log.level.debug": "dim cyan",
        "log.level.info": "bold bright_blue",
        "log.level.warning": "bold yellow",
        "log.level.error": "bold red",
    }
)

_TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_ROTATE_BYTES = 10 * 1024 * 1024
_ROTATE_BACKUPS = 5


class _JSONLineFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message,
    then ``component``, ``operation`` and ``extra`` when present."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in ("component", "operation", "extra"):
            value = getattr(record, f"strata_{key}", None)
            if value is not None:
                entry[key] = value
        if record.exc_info and record.exc_info[1] is not None:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def _rich_handler(level: int) -> RichHandler:
    return RichHandler(
        level=level,
        console=Console(theme=_LOG_THEME, stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )


def _file_handler(path: Path, level: int, json_lines: bool) -> RotatingFileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path, maxBytes=_ROTATE_BYTES, backupCount=_ROTATE_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(
        _JSONLineFormatter() if json_lines else logging.Formatter(_TEXT_FORMAT)
    )
    return handler


class Timer:
    """Elapsed wall time of a ``with`` block, frozen once the block exits."""

    def __init__(self) -> None:
        self._start = time.perf_counter()
        self._stop: float | None = None

    def stop(self) -> None:
        self._stop = time.perf_counter()

    @property
    def elapsed(self) -> float:
        end = self._stop if self._stop is not None else time.perf_counter()
        return end - self._start


class StrataLogger:
    """Component logger with an optional operation context.

    Usage::

        log = StrataLogger("dictionary", log_file="strata.log", json_logs=True)
        with log.operation("add_words"):
            log.info("Added %d words", len(added), words=added)

    Keyword arguments other than ``exc_info`` given to a log call end up
    in the ``extra`` field of JSON records.

    Args:
        component:      Name appended to the ``strata.`` logger namespace.
        log_level:      Minimum severity name; unknown names mean INFO.
        log_file:       Rotating log file, ``None`` for no file output.
        json_logs:      Write JSON lines instead of plain text to the file.
        console_output: Attach the Rich stderr handler.
    """

    def __init__(
        self,
        component: str,
        *,
        log_level: str = "INFO",
        log_file: str | Path | None = None,
        json_logs: bool = False,
        console_output: bool = True,
    ) -> None:
        self._component = component
        self._operation: str | None = None
        level = getattr(logging, log_level.upper(), logging.INFO)

        self._logger = logging.getLogger(f"strata.{component}")
        self._logger.setLevel(level)
        self._logger.propagate = False
        # a second instance for the same component replaces the handlers
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()

        if console_output:
            self._logger.addHandler(_rich_handler(level))
        if log_file:
            self._logger.addHandler(_file_handler(Path(log_file), level, json_logs))

    @property
    def component(self) -> str:
        return self._component

    @property
    def underlying(self) -> logging.Logger:
        """The stdlib logger records are sent to."""
        return self._logger

    @contextmanager
    def operation(self, name: str) -> Iterator[StrataLogger]:
        """Tag every record logged inside the block with *name*."""
        previous, self._operation = self._operation, name
        try:
            yield self
        finally:
            self._operation = previous

    @contextmanager
    def timed(self, label: str) -> Iterator[Timer]:
        """Measure the block and log its duration at DEBUG level.

        Usage::

            with log.timed("password strength") as timer:
                result = compute()
            print(timer.elapsed)
        """
        timer = Timer()
        try:
            yield timer
        finally:
            timer.stop()
            self.debug("%s took %.6f sec", label, timer.elapsed)

    def _log(self, level: int, msg: str, args: tuple[Any, ...], fields: dict[str, Any]) -> None:
        exc_info = fields.pop("exc_info", None)
        self._logger.log(
            level,
            msg,
            *args,
            exc_info=exc_info,
            extra={
                "strata_component": self._component,
                "strata_operation": self._operation,
                "strata_extra": fields or None,
            },
        )

    def debug(self, msg: str, *args: Any, **fields: Any) -> None:
        self._log(logging.DEBUG, msg, args, fields)

    def info(self, msg: str, *args: Any, **fields: Any) -> None:
        self._log(logging.INFO, msg, args, fields)

    def warning(self, msg: str, *args: Any, **fields: Any) -> None:
        self._log(logging.WARNING, msg, args, fields)

    def error(self, msg: str, *args: Any, **fields: Any) -> None:
        self._log(logging.ERROR, msg, args, fields)
