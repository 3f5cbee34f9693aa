"""
Core package: configuration, logging, database access and error handling
"""
from .config import settings
from .database import db_manager
from .logging import logger, setup_logging

__all__ = ["settings", "db_manager", "logger", "setup_logging"]
