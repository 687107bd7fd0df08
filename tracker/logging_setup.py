"""
Logging configuration for rank runs
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_file: Path | None = None, level: int = logging.INFO):
    """Setup logging with framework logs suppressed to WARNING"""
    # Suppress framework logs
    logging.getLogger("playwright").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.getLogger("engineio").setLevel(logging.WARNING)
    logging.getLogger("socketio").setLevel(logging.WARNING)

    for name in ("serp", "tracker"):
        logging.getLogger(name).setLevel(level)

    if log_file is None:
        return

    # Setup file logging for our packages
    log_file = Path(log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    for name in ("serp", "tracker"):
        logging.getLogger(name).addHandler(file_handler)

    logger.debug(f"Logging to {log_file}")
