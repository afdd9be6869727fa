import logging
import logging.config
import os
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging() -> None:
    # Load logging config if present
    if os.path.exists("logging.conf"):
        logging.config.fileConfig("logging.conf", disable_existing_loggers=False)
        return

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format=LOG_FORMAT,
        stream=sys.stdout,
        force=True,
    )
