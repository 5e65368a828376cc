import logging
import os


def configure_logging():
    logging.basicConfig(
        level=logging.INFO,
        filename=os.getenv("LOG_FILE", "log.txt"),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
