import logging
import json
from logging.handlers import TimedRotatingFileHandler
import os
from datetime import datetime, timezone

LOG_FILE = "hospital_admin.log"

class JsonFormatter(logging.Formatter):
    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def setup_logger(log_dir: str | None = "logs", level: int = logging.INFO):
    logger = logging.getLogger()
    logger.setLevel(level)

    # create_app() can run many times in one process (tests); attach handlers once
    if getattr(logger, "_hospital_admin_configured", False):
        return logger

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        # — Log file rotates daily, keeps 14 days —
        handler = TimedRotatingFileHandler(
            filename=os.path.join(log_dir, LOG_FILE),
            when="midnight",
            backupCount=14,
            encoding="utf-8"
        )
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)

    # Also log to console for debugging
    console = logging.StreamHandler()
    console.setFormatter(JsonFormatter())
    logger.addHandler(console)

    logger._hospital_admin_configured = True
    return logger
