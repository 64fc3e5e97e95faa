"""Structured logging for the medical-record core.

Services log one line per completed operation with the record it touched
attached as ``record_id``/``record_type`` extras; the logging event
publisher attaches a whole event as ``extra_fields``. ``RecordLogFormatter``
turns both into flat JSON lines, and ``setup_logging`` installs it (or a
plain-text format for development) on the root logger.

Security Impact:
    - Only identifiers, statuses and correction reasons reach the log;
      detail payloads (symptoms, findings, medications) are never attached
    - Log levels prevent information disclosure
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# LogRecord attributes copied into the JSON line when a caller sets them
RECORD_CONTEXT_FIELDS = ("record_id", "record_type", "original_record_id", "veterinarian_id")

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class RecordLogFormatter(logging.Formatter):
    """JSON formatter aware of medical-record context.

    Parameters:
        service_name: Optional service name stamped on every line
    """

    def __init__(self, service_name: Optional[str] = None):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        """Render ``record`` as one JSON object.

        Parameters:
            record: Log record to format

        Returns:
            JSON string with the base fields, any record context and any
            ``extra_fields`` payload
        """
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if self.service_name:
            log_data["service"] = self.service_name

        for name in RECORD_CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_data[name] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # event payloads from LoggingDomainEventPublisher
        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            log_data.update(extra_fields)

        return json.dumps(log_data, default=str)


def setup_logging(use_json: bool = False, log_level: str = "INFO", service_name: Optional[str] = None):
    """Install a single stdout handler on the root logger.

    Parameters:
        use_json: Emit JSON lines through RecordLogFormatter
        log_level: Logging level name; unknown names fall back to INFO
        service_name: Service name stamped on JSON lines
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if use_json:
        handler.setFormatter(RecordLogFormatter(service_name=service_name))
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(handler)
