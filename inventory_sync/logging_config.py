import logging
import os
import sys
from typing import Optional

SUCCESS = 25
DRYRUN = 22

logging.addLevelName(SUCCESS, "SUCCESS")
logging.addLevelName(DRYRUN, "DRYRUN")

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(verbose: bool = False, log_path: Optional[str] = None) -> None:
    """
    Configure root logging for a runbook.

    Args:
        verbose (bool): Log DEBUG lines (per-record classification) when True.
        log_path (Optional[str]): Also write the log to this file when given.
    """
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_path:
        log_dir = os.path.dirname(log_path)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )
    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    if log_path:
        logging.info(f"Logging to file: {log_path}")
