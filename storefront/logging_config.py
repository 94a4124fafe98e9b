"""Logging configuration helpers."""

from __future__ import annotations

import logging
import re
from contextlib import suppress
from logging import Handler
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable


_EMAIL_RE = re.compile(r"\b[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}\b", re.IGNORECASE)
# +47 912 34 567, +4791234567, 912 34 567, 91 23 45 67; bare digit runs are ids or amounts
_PHONE_RE = re.compile(r"(?<![\w+])\+\d(?:[ -]?\d){7,14}\b|\b\d{3} \d{2} \d{3}\b|\b\d{2}(?: \d{2}){3}\b")
_TOKEN_RE = re.compile(r"(?P<key>(?:token|password)\s*[=:]\s*)(?P<secret>[^\s,;]{4,})", re.IGNORECASE)


def _scrub_text(value: str) -> str:
    """Mask emails, phone numbers, tokens and passwords in the provided value."""

    if not value:
        return value

    value = _EMAIL_RE.sub("<email>", value)
    value = _PHONE_RE.sub("<phone>", value)
    value = _TOKEN_RE.sub(lambda m: f"{m.group('key')}<secret>", value)
    return value


class PiiScrubbingFilter(logging.Filter):
    """Filter that scrubs customer PII from log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401 - standard logging hook
        message = record.getMessage()
        record.msg = _scrub_text(message)
        record.args = ()
        return True


def _close_handlers(handlers: Iterable[Handler]) -> None:
    for handler in handlers:
        logging.getLogger().removeHandler(handler)
        with suppress(Exception):  # pragma: no cover - best effort cleanup
            handler.close()


def resolve_log_level(value: str | int) -> int:
    try:
        return int(value)
    except ValueError:
        level = getattr(logging, str(value).upper(), logging.INFO)
        if isinstance(level, int):
            return level
    except TypeError:
        pass
    return logging.INFO


def setup_logging(log_dir: str = "logs", level: int = logging.INFO) -> None:
    """Configure console and rotating file handlers for the storefront."""

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)

    if root.handlers:
        _close_handlers(list(root.handlers))

    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)
    pii_filter = PiiScrubbingFilter()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    stream_handler.addFilter(pii_filter)
    root.addHandler(stream_handler)

    file_handler = RotatingFileHandler(
        log_path / "store.log",
        maxBytes=5_000_000,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    file_handler.addFilter(pii_filter)
    root.addHandler(file_handler)

    error_handler = RotatingFileHandler(
        log_path / "errors.log",
        maxBytes=2_000_000,
        backupCount=3,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.WARNING)
    error_handler.setFormatter(formatter)
    error_handler.addFilter(pii_filter)
    root.addHandler(error_handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.INFO)

    resolved_level = logging.getLevelName(level)
    root.info("logging initialized, level=%s", resolved_level)
    root.info(
        "log_paths dir=%s store=%s errors=%s",
        log_path.resolve(),
        (log_path / "store.log").resolve(),
        (log_path / "errors.log").resolve(),
    )
