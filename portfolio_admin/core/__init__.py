"""
Portfolio Admin Core
====================

Core utilities and shared functionality for Portfolio Admin modules.
"""

from .config import Config, get_config_value
from .database import Database
from .logging_service import LoggingService, logger
from .security import login_required, api_login_required, is_confirmed, request_data

__all__ = [
    'Config', 'get_config_value', 'Database', 'LoggingService', 'logger',
    'login_required', 'api_login_required', 'is_confirmed', 'request_data',
]
