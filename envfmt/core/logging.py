import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler

import envfmt.service.environment as env
from envfmt.core.constants import LOG_BACKUP_COUNT, LOG_FILE_NAME, LOG_MAX_BYTES

# botocore debug output includes decrypted parameter values
QUIET_LOGGERS = ("botocore", "boto3", "urllib3")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def setup_logging(level: int = logging.WARNING) -> None:
    """Configure stderr logging, plus a JSON rotating file when ENVFMT_LOG_DIR is set.

    Nothing is ever logged to stdout, which carries the rendered parameters.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear any existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    root_logger.addHandler(console_handler)

    log_dir = env.get_log_dir()
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
        )
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
