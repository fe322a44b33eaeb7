import logging
import sys
from datetime import datetime


class CleanFormatter(logging.Formatter):
    def format(self, record):
        timestamp = datetime.now().strftime("%H:%M:%S")
        message = record.getMessage()
        request_id = getattr(record, "request_id", None)
        if request_id:
            message = f"[{request_id}] {message}"
        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"
        return f"{timestamp} [{record.levelname:8}] {record.name:24} | {message}"


def setup_logging(level: str = "INFO"):
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        if getattr(handler, "_starter_api", False):
            root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(CleanFormatter())
    handler._starter_api = True
    root_logger.addHandler(handler)

    # SQLAlchemy echoes through our own query observers instead
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
