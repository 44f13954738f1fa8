"""
Dashboard Module
================

Admin shell for Portfolio Admin.

Provides:
- Admin authentication (login/logout)
- First-run admin seeding
- Dashboard menu linking the management views

This is the foundation module that the management views plug into.
"""

from flask import Blueprint

# Blueprint name is 'admin' so other modules can redirect to 'admin.login'
dashboard_bp = Blueprint(
    'admin',
    __name__,
    url_prefix='/admin',
    template_folder='templates'
)

# Import routes after blueprint is created
from . import routes
from .routes import authenticate, hash_password, seed_admin

__all__ = ['dashboard_bp', 'authenticate', 'hash_password', 'seed_admin']
