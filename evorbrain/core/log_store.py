"""Per-application log capture: a JSON-lines file plus a buffer of recent entries."""

from __future__ import annotations

import json
import logging
import threading
from collections import deque
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from flask import Flask

from evorbrain.core.errors import ValidationError

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_STORE_HANDLER_ATTR = "_evorbrain_log_store"


def _entry(record: logging.LogRecord) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
    }
    context = getattr(record, "context", None)
    if context:
        entry["context"] = context
    if record.exc_info and record.exc_info[1] is not None:
        exc = record.exc_info[1]
        entry["error_details"] = f"{type(exc).__name__}: {exc}"
    return entry


class JsonLinesFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(_entry(record), default=str)


class BufferHandler(logging.Handler):
    """Keeps the most recent ``capacity`` entries in memory."""

    def __init__(self, capacity: int):
        super().__init__()
        self._entries: deque = deque(maxlen=max(1, capacity))
        self._entries_lock = threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = _entry(record)
        except Exception:
            self.handleError(record)
            return
        with self._entries_lock:
            self._entries.append(entry)

    def snapshot(self) -> List[Dict[str, Any]]:
        with self._entries_lock:
            return list(self._entries)


class LogStore:
    """Owns the handlers attached to the application logger."""

    def __init__(self, logger: logging.Logger, *, capacity: int, log_dir: Optional[Path] = None):
        self.logger = logger
        self.buffer = BufferHandler(capacity)
        self.file_handler: Optional[logging.FileHandler] = None
        self.log_file: Optional[Path] = None
        if log_dir is not None:
            log_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(timezone.utc).strftime("%Y-%m-%d")
            self.log_file = log_dir / f"evorbrain_{stamp}.log"
            self.file_handler = logging.FileHandler(self.log_file, encoding="utf-8")
            self.file_handler.setFormatter(JsonLinesFormatter())

    @property
    def handlers(self) -> List[logging.Handler]:
        return [h for h in (self.buffer, self.file_handler) if h is not None]

    def attach(self) -> None:
        for handler in list(self.logger.handlers):
            if getattr(handler, _STORE_HANDLER_ATTR, False):
                self.logger.removeHandler(handler)
                handler.close()
        for handler in self.handlers:
            setattr(handler, _STORE_HANDLER_ATTR, True)
            self.logger.addHandler(handler)

    def detach(self) -> None:
        for handler in self.handlers:
            self.logger.removeHandler(handler)
            handler.close()

    @property
    def level(self) -> str:
        return logging.getLevelName(self.logger.level)

    def set_level(self, level: str) -> str:
        name = (level or "").upper()
        if name not in LEVELS:
            raise ValidationError(f"Unknown log level: {level}")
        self.logger.setLevel(name)
        self.logger.info("Log level set to %s", name)
        return name

    def recent(self, *, limit: int = 100, min_level: Optional[str] = None) -> List[Dict[str, Any]]:
        entries = self.buffer.snapshot()
        if min_level:
            name = min_level.upper()
            if name not in LEVELS:
                raise ValidationError(f"Unknown log level: {min_level}")
            threshold = logging.getLevelName(name)
            entries = [e for e in entries if logging.getLevelName(e["level"]) >= threshold]
        if limit:
            entries = entries[-limit:]
        return entries


def init_logging(app: Flask) -> LogStore:
    """Attach a fresh ``LogStore`` to ``app.logger`` and register it on the app."""
    log_dir = None
    if app.config.get("LOG_TO_FILE"):
        log_dir = Path(app.config["DATA_DIR"]) / "logs"
    store = LogStore(
        app.logger,
        capacity=int(app.config.get("LOG_BUFFER_SIZE", 500)),
        log_dir=log_dir,
    )
    store.attach()
    level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    app.logger.setLevel(level if level in LEVELS else "INFO")
    app.extensions["log_store"] = store
    return store


def get_log_store(app: Flask) -> LogStore:
    return app.extensions["log_store"]
