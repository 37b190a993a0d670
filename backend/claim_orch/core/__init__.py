"""
Core module exports
"""
from claim_orch.core.config import settings, get_settings, Settings
from claim_orch.core.logging import logger, get_logger
from claim_orch.core.data_classification import sanitize_for_logging

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "logger",
    "get_logger",
    "sanitize_for_logging",
]
