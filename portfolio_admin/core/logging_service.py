"""
Application log for Portfolio Admin.

Every entry goes to the standard `portfolio_admin` logger and is mirrored
into the `app_logs` table of the portfolio database, tagged with the
request path and the signed-in admin.
"""

import json
import logging
import traceback
from datetime import datetime
from flask import request, session, has_request_context
from .config import Config
from .database import Database

logger = logging.getLogger('portfolio_admin')

_LOG_COLUMNS = 'id, timestamp, level, source, message, details, request_path, user_id'


class LoggingService:
    """Writes admin activity and failures to the portfolio database"""

    # Database paths whose app_logs table is known to exist
    _ready = set()

    @classmethod
    def _ensure_logs_table(cls):
        path = Database.get_path()
        if path not in cls._ready:
            Database.init_logs_table(path)
            cls._ready.add(path)

    @staticmethod
    def _get_request_context():
        """(request path, admin username), or (None, None) outside a request"""
        if not has_request_context():
            return None, None
        return request.path, session.get('admin_username')

    @classmethod
    def log(cls, level, source, message, details=None, user_id=None):
        """
        Record one entry.

        Args:
            level: DEBUG, INFO, WARNING, ERROR or CRITICAL
            source: Module the entry belongs to (auth, projects, contacts, ...)
            message: One-line summary
            details: Extra context; dicts are stored as JSON
            user_id: Acting user, defaulting to the admin in the session
        """
        level = level.upper()
        logger.log(getattr(logging, level, logging.INFO), "[%s] %s", source, message)

        request_path, session_user = cls._get_request_context()
        if isinstance(details, dict):
            details = json.dumps(details, indent=2, default=str)

        try:
            cls._ensure_logs_table()
            with Database.connect() as conn:
                conn.execute(f"""
                    INSERT INTO {Config.LOGS_TABLE}
                    (timestamp, level, source, message, details, request_path, user_id)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                """, (datetime.now().isoformat(), level, source, message, details,
                      request_path, user_id or session_user))
        except Exception as e:
            # The entry already reached the standard logger above
            logger.warning("Could not store log entry from %s: %s", source, e)

    @classmethod
    def info(cls, source, message, details=None, user_id=None):
        cls.log('INFO', source, message, details, user_id)

    @classmethod
    def warning(cls, source, message, details=None, user_id=None):
        cls.log('WARNING', source, message, details, user_id)

    @classmethod
    def error(cls, source, message, details=None, user_id=None):
        cls.log('ERROR', source, message, details, user_id)

    @classmethod
    def log_user_action(cls, source, action, user_id=None, details=None):
        """Admin changes: login, create, update, delete, restore"""
        cls.info(source, f"User action: {action}", details, user_id)

    @classmethod
    def log_error_with_traceback(cls, source, error, details=None):
        """Store an exception with its type, message and current traceback"""
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': traceback.format_exc(),
        }
        if details:
            error_details['additional_details'] = details
        cls.error(source, f"{type(error).__name__} in {source}: {error}", error_details)

    @classmethod
    def log_security_event(cls, message, details=None):
        cls.warning('security', message, details)

    @classmethod
    def get_recent_logs(cls, limit=50, level=None):
        """Newest entries first, optionally only one level"""
        cls._ensure_logs_table()
        query = f"SELECT {_LOG_COLUMNS} FROM {Config.LOGS_TABLE}"
        params = []
        if level:
            query += " WHERE level = ?"
            params.append(level.upper())
        query += " ORDER BY id DESC LIMIT ?"
        params.append(limit)

        with Database.connect() as conn:
            return [dict(row) for row in conn.execute(query, params).fetchall()]
