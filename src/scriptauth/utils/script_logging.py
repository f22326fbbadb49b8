# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Tsar Studio
# Part of ScriptAuth - see LICENSE and REFERENCES.md
# Refs: see REFERENCES.md
'''
HOW TO USE logging in your code:

log = get_ctx_logger("scriptauth.consensus.authorize")
log = get_ctx_logger("scriptauth.consensus.batch", height=812, tx=3)   # bound context

log.trace("per-signature verify results")
log.debug("address mismatch on unlock")
log.info / log.warning / log.error / log.exception as usual

Authorization negatives (bad signature, wrong address) are expected outcomes:
keep them at TRACE/DEBUG, never ERROR.

Entry points call setup_logging() once; library modules never add handlers.
'''

from __future__ import annotations

import json
import logging
import re
import threading
import time
from collections import OrderedDict
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from scriptauth.utils import config as CFG

TRACE = 9
logging.addLevelName(TRACE, "TRACE")

def _logger_trace(self, msg, *args, **kwargs):
    if self.isEnabledFor(TRACE):
        self._log(TRACE, msg, args, **kwargs)

logging.Logger.trace = _logger_trace

CONTEXT_FIELDS = ("height", "tx", "script")
DATEFMT = "%Y-%m-%d %H:%M:%S"
PLAIN_FMT = "%(asctime)s [%(levelname)s] %(proc)s %(name)s: %(message)s"


def _proc(record: logging.LogRecord) -> str:
    return record.processName if CFG.LOG_SHOW_PROCESS else CFG.LOG_PROC_PLACEHOLDER

def _context(record: logging.LogRecord) -> dict:
    out = {}
    for k in CONTEXT_FIELDS:
        v = getattr(record, k, None)
        if v not in (None, "-"):
            out[k] = v
    return out


# ---------------- Filters ----------------

class RedactFilter(logging.Filter):
    # 32-byte secrets (Ed25519 seeds) passed next to a telling keyword
    RE_SECRET = re.compile(r"\b(priv(?:key)?|seed|secret)(\s*[=:]\s*)[0-9a-f]{64}\b", re.I)

    def filter(self, record):
        msg = record.getMessage()
        if self.RE_SECRET.search(msg):
            record.msg, record.args = self.RE_SECRET.sub(r"\1\2[REDACTED_SECRET]", msg), None
        return True


class RateLimitFilter(logging.Filter):
    """
    Drop a record when the same (logger, level, template) passed less than
    `min_interval` seconds ago. Keeps at most `max_keys` templates, oldest
    first out; safe to share between worker threads.
    """

    def __init__(self, min_interval: float = 2.0, max_keys: int = 1024):
        super().__init__()
        self.min_interval = float(min_interval)
        self.max_keys = max(1, int(max_keys))
        self._seen: OrderedDict[tuple, float] = OrderedDict()
        self._lock = threading.Lock()

    def filter(self, record):
        key = (record.name, record.levelno, str(record.msg))
        now = time.monotonic()
        with self._lock:
            last = self._seen.get(key)
            if last is not None and now - last < self.min_interval:
                return False
            self._seen[key] = now
            self._seen.move_to_end(key)
            while len(self._seen) > self.max_keys:
                self._seen.popitem(last=False)
        return True


# ---------------- Formatters ----------------

class SafeFormatter(logging.Formatter):
    """Plain text; context fields a record does not carry render as '-'."""

    def format(self, record):
        for k in CONTEXT_FIELDS:
            if not hasattr(record, k):
                setattr(record, k, "-")
        record.proc = _proc(record)
        return super().format(record)


class JsonFormatter(logging.Formatter):
    """One JSON object per line, context fields only when set."""

    def format(self, record):
        payload = {
            "ts": self.formatTime(record, DATEFMT),
            "lvl": record.levelname,
            "logger": record.name,
            "proc": _proc(record),
            "msg": record.getMessage(),
            **_context(record),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


# ---------------- Loggers ----------------

class ContextAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        extra = kwargs.setdefault("extra", {})
        bound = self.extra or {}
        for k in CONTEXT_FIELDS:
            extra.setdefault(k, bound.get(k, "-"))
        return msg, kwargs

    def trace(self, msg, *args, **kwargs):
        self.log(TRACE, msg, *args, **kwargs)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "scriptauth")

def get_ctx_logger(name: str = "scriptauth", **ctx) -> ContextAdapter:
    return ContextAdapter(get_logger(name), ctx)


def _resolve_level(level) -> int:
    if isinstance(level, int):
        return level
    lvl = logging.getLevelName(str(level).upper())
    if not isinstance(lvl, int):
        raise ValueError(f"unknown log level: {level!r}")
    return lvl

def _dress(handler: logging.Handler, as_json: bool, rate_seconds: float) -> logging.Handler:
    handler.setFormatter(JsonFormatter() if as_json else SafeFormatter(PLAIN_FMT, DATEFMT))
    handler.addFilter(RedactFilter())
    if rate_seconds > 0.0:
        handler.addFilter(RateLimitFilter(rate_seconds))
    return handler


def setup_logging(log_file=None, level=None, to_console: Optional[bool] = None,
                  force: bool = False) -> logging.Logger:
    """
    Configure the root logger once per process.

    log_file   path of a rotating log file; None means no file
    level      name or number, CFG.LOG_LEVEL when None
    to_console stderr handler, CFG.LOG_TO_CONSOLE when None
    """
    lvl = _resolve_level(CFG.LOG_LEVEL if level is None else level)
    if to_console is None:
        to_console = bool(CFG.LOG_TO_CONSOLE)
    as_json = str(CFG.LOG_FORMAT).lower() == "json"

    handlers: list[logging.Handler] = []
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(path, maxBytes=int(CFG.LOG_ROTATE_MAX_BYTES),
                                 backupCount=int(CFG.LOG_BACKUP_COUNT), encoding="utf-8", delay=True)
        handlers.append(_dress(fh, as_json, float(CFG.LOG_FILE_RATE_LIMIT_SECONDS)))
    if to_console:
        handlers.append(_dress(logging.StreamHandler(), as_json, float(CFG.LOG_RATE_LIMIT_SECONDS)))
    if not handlers:
        handlers.append(logging.NullHandler())

    logging.basicConfig(level=lvl, handlers=handlers, force=force)
    root = get_logger()
    root.trace("logging ready: level=%s file=%s json=%s console=%s",
               logging.getLevelName(lvl), log_file, as_json, to_console)
    return root
