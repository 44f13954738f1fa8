"""
About Admin Routes
==================

The first about row is canonical. Its id is remembered in the session
once loaded or created, and saves update that row.
"""

from flask import render_template, request, redirect, url_for, flash, jsonify, session
from . import about_bp
from portfolio_admin.core import Config, Database, LoggingService, login_required, api_login_required, request_data
import logging

logger = logging.getLogger(__name__)

DEFAULT_ABOUT_CONTENT = 'No about info yet. Please edit this section.'
SESSION_KEY = 'about_id'


def load_about_db():
    """
    Return (id, content) of the canonical row, creating the placeholder
    row when the table is empty.
    """
    with Database.connect() as conn:
        cursor = conn.cursor()
        cursor.execute(f'SELECT id, content FROM {Config.ABOUT_TABLE} ORDER BY id LIMIT 1')
        row = cursor.fetchone()
        if row:
            return row['id'], row['content']

        cursor.execute(f'INSERT INTO {Config.ABOUT_TABLE} (content) VALUES (?)', (DEFAULT_ABOUT_CONTENT,))
        logger.info("Created placeholder about content")
        return cursor.lastrowid, DEFAULT_ABOUT_CONTENT


def save_about_db(content, about_id=None):
    """
    Update the canonical row, or insert when no id is known (or the known
    row has gone). Returns the id now holding the content.
    """
    try:
        with Database.connect() as conn:
            cursor = conn.cursor()
            if about_id is not None:
                cursor.execute(f'UPDATE {Config.ABOUT_TABLE} SET content = ? WHERE id = ?', (content, about_id))
                if cursor.rowcount > 0:
                    return about_id
            cursor.execute(f'INSERT INTO {Config.ABOUT_TABLE} (content) VALUES (?)', (content,))
            return cursor.lastrowid
    except Exception as e:
        logger.error(f"Error saving about content: {e}")
        raise


def load_about():
    about_id, content = load_about_db()
    session[SESSION_KEY] = about_id
    return content


def save_about(content):
    """Validate and save; returns an error message or None"""
    if not content or not content.strip():
        return 'About Me content cannot be empty.'
    session[SESSION_KEY] = save_about_db(content, session.get(SESSION_KEY))
    LoggingService.log_user_action('about', 'save about', details={'id': session[SESSION_KEY]})
    return None


# ===== Routes =====

@about_bp.route('/', methods=['GET', 'POST'])
@about_bp.route('/editor', methods=['GET', 'POST'])
@login_required
def about_editor():
    """About editor form"""
    if request.method == 'POST':
        content = request.form.get('content', '')
        try:
            error = save_about(content)
        except Exception as e:
            LoggingService.log_error_with_traceback('about', e)
            error = f'Error saving about content: {e}'

        if error:
            flash(error, 'error')
            return render_template('about/about_editor.html', content=content), 400

        flash('About Me content saved successfully!', 'success')
        return redirect(url_for('about_admin.about_editor'))

    try:
        content = load_about()
    except Exception as e:
        LoggingService.log_error_with_traceback('about', e)
        flash(f'Error loading about content: {e}', 'error')
        content = ''
    return render_template('about/about_editor.html', content=content)


@about_bp.route('/api/about', methods=['GET'])
@api_login_required
def get_about():
    try:
        content = load_about()
        return jsonify({'id': session[SESSION_KEY], 'content': content})
    except Exception as e:
        LoggingService.log_error_with_traceback('about', e)
        return jsonify({'error': f'Error loading about content: {e}'}), 500


@about_bp.route('/api/about', methods=['PUT'])
@api_login_required
def put_about():
    content = request_data().get('content') or ''
    try:
        error = save_about(content)
        if error:
            return jsonify({'error': error}), 400
        return jsonify({'success': True, 'id': session[SESSION_KEY],
                        'message': 'About Me content saved successfully!'})
    except Exception as e:
        LoggingService.log_error_with_traceback('about', e)
        return jsonify({'error': f'Error saving about content: {e}'}), 500
