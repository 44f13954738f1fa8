import os
import sqlite3
import logging
from contextlib import contextmanager

from .config import Config, get_config_value

logger = logging.getLogger(__name__)


class Database:
    """One short-lived sqlite connection per operation. No pooling."""

    @staticmethod
    def get_path():
        return get_config_value('PORTFOLIO_DB', Config.PORTFOLIO_DB)

    @staticmethod
    @contextmanager
    def connect(path=None):
        """Open a connection, commit on success, roll back on error, always close"""
        conn = sqlite3.connect(path or Database.get_path())
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @staticmethod
    def init_schema(path=None):
        """Create every table if absent"""
        db_path = path or Database.get_path()
        db_dir = os.path.dirname(db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

        with Database.connect(db_path) as conn:
            cursor = conn.cursor()

            cursor.execute(f"""
                CREATE TABLE IF NOT EXISTS {Config.USERS_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username TEXT UNIQUE NOT NULL,
                    password_hash TEXT NOT NULL
                )
            """)

            cursor.execute(f"""
                CREATE TABLE IF NOT EXISTS {Config.SKILLS_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    category TEXT DEFAULT 'General'
                )
            """)
            cursor.execute(f"CREATE INDEX IF NOT EXISTS idx_skills_category ON {Config.SKILLS_TABLE}(category)")

            cursor.execute(f"""
                CREATE TABLE IF NOT EXISTS {Config.ABOUT_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    content TEXT NOT NULL
                )
            """)

            cursor.execute(f"""
                CREATE TABLE IF NOT EXISTS {Config.PROJECTS_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    description TEXT NOT NULL,
                    image_url TEXT DEFAULT NULL,
                    link TEXT DEFAULT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            cursor.execute(f"""
                CREATE TABLE IF NOT EXISTS {Config.CONTACTS_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    platform TEXT DEFAULT NULL,
                    link TEXT DEFAULT NULL,
                    deleted BOOLEAN NOT NULL DEFAULT 0
                )
            """)
            cursor.execute(f"CREATE INDEX IF NOT EXISTS idx_contacts_deleted ON {Config.CONTACTS_TABLE}(deleted)")

        Database.init_logs_table(db_path)
        logger.info("Portfolio database initialized at %s", db_path)

    @staticmethod
    def init_logs_table(path=None):
        """Create the app_logs table used by LoggingService"""
        with Database.connect(path) as conn:
            conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {Config.LOGS_TABLE} (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    level TEXT NOT NULL,
                    source TEXT NOT NULL,
                    message TEXT NOT NULL,
                    details TEXT,
                    request_path TEXT,
                    user_id TEXT
                )
            """)
            conn.execute(f"CREATE INDEX IF NOT EXISTS idx_app_logs_level ON {Config.LOGS_TABLE}(level, id)")
