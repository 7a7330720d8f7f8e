"""
Base service for the business logic layer.
Services orchestrate business operations using repositories.
"""

from typing import Optional
from abc import ABC
import logging

from app.config import Settings, settings as default_settings
from app.security import PasswordHasher


class BaseService(ABC):
    """
    Base service providing logging helpers and injected collaborators.
    All service classes should inherit from this class.
    """

    def __init__(
        self,
        logger_name: str,
        settings: Optional[Settings] = None,
        hasher: Optional[PasswordHasher] = None,
    ):
        self.logger = logging.getLogger(logger_name)
        self.settings = settings or default_settings
        self.hasher = hasher or PasswordHasher()

    def log_info(self, message: str, **kwargs):
        """Log info message with structured data"""
        extra_data = " ".join([f"{k}={v}" for k, v in kwargs.items()])
        self.logger.info(f"{message} {extra_data}".strip())

    def log_warning(self, message: str, **kwargs):
        """Log warning message with structured data"""
        extra_data = " ".join([f"{k}={v}" for k, v in kwargs.items()])
        self.logger.warning(f"{message} {extra_data}".strip())

    def log_error(self, message: str, **kwargs):
        """Log error message with structured data"""
        extra_data = " ".join([f"{k}={v}" for k, v in kwargs.items()])
        self.logger.error(f"{message} {extra_data}".strip())
