from __future__ import annotations

import json
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _handler(path: Path, level: int) -> RotatingFileHandler:
    fh = RotatingFileHandler(path, maxBytes=2_000_000, backupCount=5, encoding="utf-8")
    fh.setFormatter(JsonFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
    fh.setLevel(level)
    return fh


def setup_logging(logs_dir: Path, level: int = logging.INFO) -> None:
    """Attach JSON-line file handlers to the ``defter`` logger tree.

    Calling it again for the same directory is a no-op; a different
    directory replaces the previous file handlers.
    """
    logs_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("defter")
    logger.setLevel(level)
    app_log = logs_dir / "app.log"
    file_handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
    if any(h.baseFilename == os.path.abspath(app_log) for h in file_handlers):
        return
    for old in file_handlers:
        logger.removeHandler(old)
        old.close()

    logger.addHandler(_handler(app_log, level))
    logger.addHandler(_handler(logs_dir / "errors.log", logging.ERROR))
