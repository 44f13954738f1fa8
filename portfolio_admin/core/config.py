import os
from dotenv import load_dotenv

load_dotenv(override=True)


def _env_flag(name, default='0'):
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """
    Base configuration for Portfolio Admin.
    Deployments provide paths and credentials via environment variables.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY', 'dev-secret-key-change-in-production')

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))
    PORTFOLIO_DB = os.getenv('PORTFOLIO_DB', os.path.join(DB_DIR, 'portfolio.db'))

    # Project images: filesystem location and the public URL that serves it
    PROJECT_IMAGE_DIR = os.getenv(
        'PROJECT_IMAGE_DIR', os.path.join(os.getcwd(), 'assets', 'project_images'))
    PROJECT_IMAGE_BASE_URL = os.getenv(
        'PROJECT_IMAGE_BASE_URL', 'http://localhost/portfolio/assets/project_images/')
    IMAGE_PREVIEW_SIZE = int(os.getenv('IMAGE_PREVIEW_SIZE', '250'))

    # Admin bootstrap
    ADMIN_USERNAME = os.getenv('ADMIN_USERNAME')
    ADMIN_PASSWORD = os.getenv('ADMIN_PASSWORD')
    # Dev only: seeds admin/admin123 when no admin exists
    SEED_DEFAULT_ADMIN = _env_flag('SEED_DEFAULT_ADMIN')

    # Origins allowed to read the public portfolio API
    PUBLIC_API_ORIGINS = [
        origin.strip()
        for origin in os.getenv('PUBLIC_API_ORIGINS', 'http://localhost,http://localhost:3000').split(',')
        if origin.strip()
    ]

    # Table names
    USERS_TABLE = "users"
    SKILLS_TABLE = "skills"
    ABOUT_TABLE = "about"
    PROJECTS_TABLE = "projects"
    CONTACTS_TABLE = "contacts"
    LOGS_TABLE = "app_logs"

    # Port for local server
    port = int(os.getenv('PORT', '5000'))


def get_config_value(key, default=None):
    """Get configuration value: Flask app config first, then Config, then env var"""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val is not None:
            return val
    except RuntimeError:
        pass
    val = getattr(Config, key, None)
    if val is not None:
        return val
    return os.getenv(key, default)
