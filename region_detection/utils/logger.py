# region_detection/utils/logger.py
"""Single-source Loguru setup: console sink, optional file sink, module-bound loggers."""

from __future__ import annotations

import inspect
import os
import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

from loguru import logger as _root_logger
from loguru._logger import Logger as LoguruLogger

LoggerType = LoguruLogger


# ---------- options ----------
@dataclass(slots=True)
class _LogOptions:
    level: str = field(
        default_factory=lambda: os.environ.get("REGION_DETECTION_LOG_LEVEL", "INFO")
    )
    log_dir: Optional[Path] = field(
        default_factory=lambda: (
            Path(os.environ["REGION_DETECTION_LOG_DIR"])
            if os.environ.get("REGION_DETECTION_LOG_DIR")
            else None
        )
    )


_OPTIONS = _LogOptions()
_CONFIGURED = False
_LOG_FILE: Optional[Path] = None
_LOGGER: Optional[LoguruLogger] = None


# ---------- sinks as callables ----------
def _console_sink(msg) -> None:
    r = msg.record
    module = r["extra"].get("module", r.get("name", "unknown"))
    sys.stderr.write(
        f"{r['time']:%H:%M:%S} | {r['level'].name: <5.5} | {module} | {r['message']}\n"
    )


def _make_file_sink(fh: TextIO):
    def _file_sink(msg) -> None:
        r = msg.record
        module = r["extra"].get("module", r.get("name", "unknown"))
        fh.write(
            f"{r['time'].isoformat()} | {r['level'].name} | {module} | {r['message']}\n"
        )
        fh.flush()

    return _file_sink


def _configure_logger(level: str | None = None, log_dir: Path | None = None) -> None:
    global _CONFIGURED, _LOG_FILE, _LOGGER

    # drop foreign handlers so format strings from other setups do not leak in
    _root_logger.remove()

    def _inject_extras(record):
        record["extra"].setdefault("module", record.get("name", "unknown"))

    logger = _root_logger.patch(_inject_extras)
    sink_level = level or _OPTIONS.level
    logger.add(_console_sink, level=sink_level, catch=True)

    _LOG_FILE = None
    target_dir = log_dir or _OPTIONS.log_dir
    if target_dir is not None:
        target_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        _LOG_FILE = target_dir / f"region_detection_{timestamp}.log"
        fh = _LOG_FILE.open("a", encoding="utf-8")
        logger.add(_make_file_sink(fh), level=sink_level, catch=True)

    _LOGGER = logger
    _CONFIGURED = True


def get_logger(name: str | None = None) -> LoguruLogger:
    """Return a loguru logger bound to ``name`` (caller module when omitted)."""
    if not _CONFIGURED:
        _configure_logger()

    module_name = name
    frame = inspect.currentframe()
    if module_name is None and frame is not None:
        caller_frame = frame.f_back
        if caller_frame is not None:
            module = inspect.getmodule(caller_frame)
            if module is not None and module.__name__ != "__main__":
                module_name = module.__name__

    assert _LOGGER is not None
    bound = _LOGGER.bind(module=module_name or "unknown")

    def _tag(label: str, msg: str | None = None, *args, level: str = "info") -> None:
        text = f"[{label}] " + (msg or "")
        method = getattr(bound, level, bound.info)
        if args:
            text = text.format(*args)
        method(text)

    setattr(bound, "tag", _tag)
    return bound


def configure(level: str | None = None, log_dir: str | Path | None = None) -> None:
    """Reconfigure sinks, e.g. to raise verbosity or add a log file."""
    _configure_logger(level=level, log_dir=Path(log_dir) if log_dir is not None else None)


def log_file() -> Optional[Path]:
    return _LOG_FILE


__all__ = ["LoggerType", "configure", "get_logger", "log_file"]
