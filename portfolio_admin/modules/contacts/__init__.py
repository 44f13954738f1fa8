"""
Contacts Admin Module
=====================

Contact links with a soft-delete lifecycle:
Active -> Deleted -> Active via restore, and hard delete from either.
"""

from flask import Blueprint

contacts_bp = Blueprint(
    'contacts_admin',
    __name__,
    url_prefix='/admin/contacts-editor',
    template_folder='templates'
)

from . import routes
from .routes import ContactState

__all__ = ['contacts_bp', 'ContactState']
