"""
Experience Admin Module
=======================

Skills grouped by free-text category. The set of categories is always
derived from the distinct category values stored on skill rows.
"""

from flask import Blueprint

experience_bp = Blueprint(
    'experience_admin',
    __name__,
    url_prefix='/admin/experience-editor',
    template_folder='templates'
)

from . import routes
from .categories import categories, diff_categories, ExperienceSelection

__all__ = ['experience_bp', 'categories', 'diff_categories', 'ExperienceSelection']
