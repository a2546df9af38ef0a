from __future__ import annotations

import os
import logging

# Logging configuration
LOG_DIR = os.getenv('DECKGEN_LOG_DIR', 'logs')
LOG_FILE = os.path.join(LOG_DIR, 'deckgen.log')
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_LEVEL = getattr(logging, os.getenv('DECKGEN_LOG_LEVEL', 'INFO').upper(), logging.INFO)

# Create logs directory if it doesn't exist
if not os.path.exists(LOG_DIR):
    os.makedirs(LOG_DIR, exist_ok=True)


# Create a formatter that removes double underscores
class NoDunderFormatter(logging.Formatter):
    def format(self, record):
        record.name = record.name.replace("__", "")
        return super().format(record)


# File handler
file_handler = logging.FileHandler(LOG_FILE, mode='a', encoding='utf-8')
file_handler.setFormatter(NoDunderFormatter(LOG_FORMAT))

# Stream handler
stream_handler = logging.StreamHandler()
stream_handler.setFormatter(NoDunderFormatter(LOG_FORMAT))


# Logger assembly helper (idempotent)
def get_logger(name: str = 'deckgen') -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(LOG_LEVEL)
        logger.addHandler(file_handler)
        logger.addHandler(stream_handler)
    return logger
