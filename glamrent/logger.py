import logging
from glamrent.config import ENV, LOG_FILE

logging.basicConfig(
    format="%(filename)s - %(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.FileHandler(LOG_FILE), logging.StreamHandler()],
)
if ENV == "production":
    logging.getLogger().setLevel(logging.INFO)
else:
    logging.getLogger().setLevel(logging.DEBUG)


def get_logger(filename: str) -> logging.Logger:
    return logging.getLogger(filename)
