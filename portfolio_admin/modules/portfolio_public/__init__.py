"""
Public Portfolio Module
=======================

Read-only JSON of everything the public portfolio page shows:
about text, projects, skills by category and active contacts.
"""

from flask import Blueprint
from flask_cors import CORS

portfolio_public_bp = Blueprint('portfolio_public', __name__, url_prefix='/api/portfolio')


def init_app(app):
    """Allow the configured site origins to read the public API"""
    origins = app.config.get('PUBLIC_API_ORIGINS') or []
    if isinstance(origins, str):
        origins = [origin.strip() for origin in origins.split(',') if origin.strip()]
    CORS(app, resources={r'/api/portfolio': {'origins': origins}}, supports_credentials=False)


from . import routes

__all__ = ['portfolio_public_bp', 'init_app']
