# ──────────────────────────────────────────────────────────────────────
# TwinCosmos — Structured Logging Configuration
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ──────────────────────────────────────────────────────────────────────
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

class TwinJSONFormatter(logging.Formatter):
    """
    JSON Formatter for TwinCosmos.
    Encodes log records as structured machine-readable JSON.
    """
    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "filename": record.filename,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        # Tick-level context passed via extra={"twin_context": {...}}
        if hasattr(record, "twin_context"):
            log_data["twin_context"] = record.twin_context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)

def setup_twin_logging(
    level: int = logging.INFO,
    json_output: bool = True,
    log_file: str | None = None
) -> None:
    """
    Initializes logging for the whole ``twincosmos`` logger tree.
    """
    root_logger = logging.getLogger("twincosmos")
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    if json_output:
        console_handler.setFormatter(TwinJSONFormatter())
    else:
        console_handler.setFormatter(logging.Formatter(
            '[%(asctime)s] %(levelname)s in %(module)s: %(message)s'
        ))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(TwinJSONFormatter() if json_output else logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        root_logger.addHandler(file_handler)

    root_logger.info("Structured logging initialized", extra={"twin_context": {"json": json_output}})
