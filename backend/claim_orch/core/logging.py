"""
Logging configuration with masking for credentials and contact data
"""
import logging
import re

from claim_orch.core.config import settings


LOGGER_NAME = "claim_orch"

# Patterns to mask in logs
MASK_PATTERNS = [
    (r"Bearer\s+[A-Za-z0-9\-._~+/]+=*", "Bearer ***"),
    (r"'Authorization':\s*'[^']*'", "'Authorization': '***'"),
    (r'"Authorization":\s*"[^"]*"', '"Authorization": "***"'),
    (r'"ContactTelephone":\s*"[^"]*"', '"ContactTelephone": "***"'),
    (r'"telephone":\s*"[^"]*"', '"telephone": "***"'),
]


class MaskingFormatter(logging.Formatter):
    """Custom formatter that masks sensitive fields."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for pattern, replacement in MASK_PATTERNS:
            message = re.sub(pattern, replacement, message, flags=re.IGNORECASE)
        return message


def setup_logging() -> logging.Logger:
    """Configure application logging."""
    logger = logging.getLogger(LOGGER_NAME)
    level = logging.DEBUG if settings.DEBUG else logging.INFO
    logger.setLevel(level)

    # Re-imports must not stack handlers
    if logger.handlers:
        return logger

    formatter = MaskingFormatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Optional debug file, always at DEBUG
    if settings.LOG_FILE:
        file_handler = logging.FileHandler(settings.LOG_FILE)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)

    return logger


# Global logger instance
logger = setup_logging()


def get_logger(name: str) -> logging.Logger:
    """Return a child of the application logger for a module."""
    if name == LOGGER_NAME or name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logger.getChild(name)
