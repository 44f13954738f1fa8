"""
Public portfolio API for the portfolio site.

GET /api/portfolio

Returns the about text, projects (newest first), skill names grouped by
category, and active contacts. CORS for the site origins is set up in
init_app from PUBLIC_API_ORIGINS.
"""

import logging
from flask import jsonify
from . import portfolio_public_bp
from portfolio_admin.core import Config, Database, LoggingService
from portfolio_admin.modules.projects.routes import get_all_projects_db
from portfolio_admin.modules.experience.routes import get_all_experience_db, group_by_category
from portfolio_admin.modules.contacts.routes import get_contacts_db, ContactState

logger = logging.getLogger(__name__)

NO_ABOUT_CONTENT = 'No about info yet.'


def get_about_content():
    """Read-only: never creates the placeholder row"""
    with Database.connect() as conn:
        cursor = conn.cursor()
        cursor.execute(f'SELECT content FROM {Config.ABOUT_TABLE} ORDER BY id LIMIT 1')
        row = cursor.fetchone()
        return row['content'] if row else NO_ABOUT_CONTENT


@portfolio_public_bp.route('', methods=['GET'])
def portfolio():
    """
    Public portfolio endpoint.

    Returns JSON:
        { "about": str, "projects": [...], "skills": {category: [names]}, "contacts": [...] }
    """
    try:
        skills = {
            category: [row['name'] for row in rows]
            for category, rows in group_by_category(get_all_experience_db()).items()
        }
        contacts = [
            {'platform': c['platform'], 'link': c['link']}
            for c in get_contacts_db()[ContactState.ACTIVE.value]
        ]
        return jsonify({
            'about': get_about_content(),
            'projects': get_all_projects_db(),
            'skills': skills,
            'contacts': contacts,
        })
    except Exception as e:
        LoggingService.log_error_with_traceback('portfolio_public', e)
        return jsonify({'error': 'Portfolio unavailable'}), 500
