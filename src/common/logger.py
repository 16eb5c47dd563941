"""
Logging setup for the recruiter import pipeline.

Every message emitted for an import run carries the run id and the
pipeline stage (fetch, parse, validate, dedup, insert), both as a text
prefix and as record attributes, so one run can be followed across all
stage modules and filtered in a log aggregator.
"""

import json
import logging
import os
import sys
from typing import Any, MutableMapping, Optional, Tuple


# Global debug mode flag - can be set via environment or CLI
_GLOBAL_DEBUG_MODE = os.getenv("DEBUG_MODE", "false").lower() == "true"


def set_global_debug_mode(enabled: bool) -> None:
    """Set global debug mode (used by the CLI --verbose flag)."""
    global _GLOBAL_DEBUG_MODE
    _GLOBAL_DEBUG_MODE = enabled


def is_debug_mode() -> bool:
    return _GLOBAL_DEBUG_MODE


class ImportLogger(logging.LoggerAdapter):
    """
    Logger adapter tagging records with run_id and stage.

    Usage:
        log = get_logger(__name__, run_id=run_id)
        log.for_stage("dedup").warning("lookup batch failed")
        # [run:1a2b3c4d] [dedup] lookup batch failed
    """

    def __init__(
        self,
        name: str,
        run_id: Optional[str] = None,
        stage: Optional[str] = None,
        debug_mode: Optional[bool] = None
    ):
        super().__init__(logging.getLogger(name), {"run_id": run_id, "stage": stage})
        self.run_id = run_id
        self.stage = stage
        self._debug_mode = debug_mode if debug_mode is not None else is_debug_mode()

        if self._debug_mode:
            self.logger.setLevel(logging.DEBUG)

    def for_stage(self, stage: str) -> "ImportLogger":
        """Same run, different stage."""
        return ImportLogger(self.logger.name, self.run_id, stage, self._debug_mode)

    @property
    def prefix(self) -> str:
        parts = []
        if self.run_id:
            parts.append(f"[run:{self.run_id[:8]}]")
        if self.stage:
            parts.append(f"[{self.stage}]")
        return " ".join(parts)

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = dict(self.extra, **kwargs.get("extra", {}))
        if self.prefix:
            msg = f"{self.prefix} {msg}"
        return msg, kwargs


class JsonFormatter(logging.Formatter):
    """One JSON object per line, including run_id/stage when present."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        for key in ("run_id", "stage"):
            value = getattr(record, key, None)
            if value:
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(level: str = "INFO", format: str = "simple") -> None:
    """
    Configure the root logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format: "simple" for humans, "json" for log aggregators
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))

    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


def get_logger(
    name: str,
    run_id: Optional[str] = None,
    stage: Optional[str] = None,
    debug_mode: Optional[bool] = None
) -> ImportLogger:
    """
    Get an import logger.

    Args:
        name: Logger name (usually __name__)
        run_id: Optional run identifier
        stage: Optional stage name
        debug_mode: If True, enables DEBUG level. If None, uses global setting.
    """
    return ImportLogger(name, run_id, stage, debug_mode)
