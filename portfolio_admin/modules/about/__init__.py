"""
About Admin Module
==================

Edits the single "About Me" text of the portfolio.
"""

from flask import Blueprint

about_bp = Blueprint(
    'about_admin',
    __name__,
    url_prefix='/admin/about-editor',
    template_folder='templates'
)

from . import routes

__all__ = ['about_bp']
