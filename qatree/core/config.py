import os
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

# Application Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "NONE").upper()
API_PREFIX = os.getenv("API_PREFIX", "/api/qa")

# Prefix used by the human readable rendering of choice answers
READABLE_CHOICE_PREFIX = os.getenv("READABLE_CHOICE_PREFIX", "Selected: ")

import logging

def configure_logging():
    """Applies LOG_LEVEL to the root logger. NONE silences the package."""
    if LOG_LEVEL == "NONE":
        logger = logging.getLogger("qatree")
        if not logger.handlers:
            logger.addHandler(logging.NullHandler())
        logger.propagate = False
        return
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
