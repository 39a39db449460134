"""
haconnect.logger
~~~~~~~~~~~~~~~~
Human-readable *and* JSON logs for workspace lifecycle events.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

LOGGER_NAME = "haconnect"

_ISO = "%Y-%m-%dT%H:%M:%SZ"

def _now() -> str:  # RFC-3339 without microseconds
    return datetime.now(tz=timezone.utc).strftime(_ISO)


class _PlainFormatter(logging.Formatter):
    """ e.g. 2026-10-18T09:12:44Z INFO cleaning base=/tmp/haproxy-connect-x1y2 """

    def format(self, record):  # type: ignore[override]
        if not isinstance(record.msg, dict):
            return super().format(record)
        d: Dict[str, Any] = dict(record.msg)
        parts = [d.pop("ts", _now()), record.levelname, d.pop("event", "-")]
        parts.extend(f"{k}={v}" for k, v in d.items())
        return " ".join(parts)


class _JSONFormatter(logging.Formatter):
    def format(self, record):  # type: ignore[override]
        if isinstance(record.msg, dict):
            return json.dumps(record.msg, separators=(",", ":"))
        return json.dumps(
            {"event": "message", "ts": _now(), "msg": record.getMessage()},
            separators=(",", ":"),
        )


def configure_logging(basename: str | Path | None) -> logging.Logger:
    """Attach stderr and (optionally) daily-rotated JSON-lines handlers."""
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(logging.INFO)
    root.propagate = False

    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(_PlainFormatter())
    root.addHandler(console)

    if basename:
        basename = Path(basename).with_suffix("")  # haconnect
        jsonl_file = basename.with_suffix(".jsonl")

        # json lines
        h = logging.handlers.TimedRotatingFileHandler(
            jsonl_file, when="midnight", backupCount=7, encoding="utf-8"
        )
        h.setFormatter(_JSONFormatter())
        root.addHandler(h)

    return root


class ConfigLogger:
    """Structured events for provisioning, rendering and cleanup.

    Credentials are never passed in here.
    """

    def __init__(self, name: str = LOGGER_NAME):
        self.log = logging.getLogger(name)

    def provisioned(self, base: str | Path):
        self.log.info({"event": "provisioned", "ts": _now(), "base": str(base)})

    def written(self, path: str | Path, size: int):
        self.log.info(
            {"event": "written", "ts": _now(), "path": str(path), "bytes": size}
        )

    def cleaning(self, base: str | Path):
        self.log.info({"event": "cleaning", "ts": _now(), "base": str(base)})

    def cleanup_failed(self, base: str | Path, exc: BaseException):
        self.log.error(
            {"event": "cleanup_failed", "ts": _now(), "base": str(base), "error": str(exc)}
        )

    def stop(self, reason: str):
        self.log.info({"event": "stop", "ts": _now(), "reason": reason})
