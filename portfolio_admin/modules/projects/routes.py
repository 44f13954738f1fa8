"""
Projects Admin Routes
=====================

Project portfolio management.
- `image_url`: public URL of a re-encoded copy of the uploaded image
- Deleting a project leaves its image file in place
"""

from flask import render_template, request, jsonify
from . import projects_bp
from portfolio_admin.core import (
    Config, Database, LoggingService, login_required, api_login_required,
    is_confirmed, request_data,
)
from portfolio_admin.core.storage import ImageStorageError, save_image, preview_image
import logging

logger = logging.getLogger(__name__)

# ===== Database Helper Functions =====

_SELECT_COLS = 'id, title, description, image_url, link, created_at'


def _row_to_dict(row):
    """Convert a DB row to a project dict"""
    return {
        'id': row['id'],
        'title': row['title'],
        'description': row['description'],
        'image_url': row['image_url'],
        'link': row['link'],
        'created_at': row['created_at'],
    }


def get_all_projects_db():
    """Get all projects, newest first"""
    with Database.connect() as conn:
        cursor = conn.cursor()
        cursor.execute(f'''
            SELECT {_SELECT_COLS}
            FROM {Config.PROJECTS_TABLE}
            ORDER BY created_at DESC, id DESC
        ''')
        return [_row_to_dict(row) for row in cursor.fetchall()]


def get_project_db(project_id):
    """Get single project by ID"""
    with Database.connect() as conn:
        cursor = conn.cursor()
        cursor.execute(f'SELECT {_SELECT_COLS} FROM {Config.PROJECTS_TABLE} WHERE id = ?', (project_id,))
        row = cursor.fetchone()
        return _row_to_dict(row) if row else None


def create_project_db(title, description, image_url=None, link=None):
    """Create new project in database"""
    try:
        with Database.connect() as conn:
            cursor = conn.cursor()
            cursor.execute(f'''
                INSERT INTO {Config.PROJECTS_TABLE} (title, description, image_url, link)
                VALUES (?, ?, ?, ?)
            ''', (title, description, image_url, link or None))
            return cursor.lastrowid
    except Exception as e:
        logger.error(f"Error creating project: {e}")
        raise


def update_project_db(project_id, title, description, link=None, image_url=None):
    """Update existing project. image_url=None keeps the stored image."""
    try:
        with Database.connect() as conn:
            cursor = conn.cursor()
            if image_url is None:
                cursor.execute(f'''
                    UPDATE {Config.PROJECTS_TABLE}
                    SET title = ?, description = ?, link = ?
                    WHERE id = ?
                ''', (title, description, link or None, project_id))
            else:
                cursor.execute(f'''
                    UPDATE {Config.PROJECTS_TABLE}
                    SET title = ?, description = ?, link = ?, image_url = ?
                    WHERE id = ?
                ''', (title, description, link or None, image_url, project_id))
            return cursor.rowcount > 0
    except Exception as e:
        logger.error(f"Error updating project: {e}")
        raise


def delete_project_db(project_id):
    """Delete project from database (image file is not removed)"""
    try:
        with Database.connect() as conn:
            cursor = conn.cursor()
            cursor.execute(f'DELETE FROM {Config.PROJECTS_TABLE} WHERE id = ?', (project_id,))
            return cursor.rowcount > 0
    except Exception as e:
        logger.error(f"Error deleting project: {e}")
        raise


def _read_project_fields(data):
    title = (data.get('title') or '').strip()
    description = (data.get('description') or '').strip()
    link = (data.get('link') or '').strip()
    return title, description, link


def _validate(title, description):
    if not title:
        return 'Title is required'
    if not description:
        return 'Description is required'
    return None


def _store_uploaded_image():
    """
    Persist the optional 'image' upload.

    Returns:
        (image_url, warning): image_url is None when no file was chosen or
        saving failed; warning explains a failure.
    """
    file = request.files.get('image')
    if file is None or not file.filename:
        return None, None

    try:
        return save_image(file.read(), file.filename), None
    except ImageStorageError as e:
        LoggingService.log_error_with_traceback('projects', e, {'filename': file.filename})
        return None, f'Image could not be saved: {e}'


# ===== Routes =====

@projects_bp.route('/')
@projects_bp.route('/editor')
@login_required
def projects_editor():
    """Projects editor - main interface"""
    return render_template('projects/projects_editor.html', projects=get_all_projects_db())


@projects_bp.route('/api/projects', methods=['GET'])
@api_login_required
def get_projects():
    """Get all projects"""
    try:
        return jsonify(get_all_projects_db())
    except Exception as e:
        LoggingService.log_error_with_traceback('projects', e)
        return jsonify({'error': f'Error loading projects: {e}'}), 500


@projects_bp.route('/api/projects/<int:project_id>', methods=['GET'])
@api_login_required
def get_project(project_id):
    """Get single project"""
    try:
        project = get_project_db(project_id)
        if project:
            return jsonify(project)
        return jsonify({'error': 'Project not found'}), 404
    except Exception as e:
        LoggingService.log_error_with_traceback('projects', e)
        return jsonify({'error': f'Error loading project: {e}'}), 500


@projects_bp.route('/api/projects', methods=['POST'])
@api_login_required
def create_project():
    """Create new project (JSON, or multipart with an optional 'image' file)"""
    title, description, link = _read_project_fields(request_data())
    error = _validate(title, description)
    if error:
        return jsonify({'error': error}), 400

    try:
        # An image failure still saves the project, without an image
        image_url, warning = _store_uploaded_image()
        project_id = create_project_db(title, description, image_url, link)
        LoggingService.log_user_action('projects', 'create project', details={'id': project_id, 'title': title})

        response = {
            'success': True,
            'id': project_id,
            'image_url': image_url,
            'message': 'Project added successfully',
        }
        if warning:
            response['warning'] = warning
        return jsonify(response), 201
    except Exception as e:
        LoggingService.log_error_with_traceback('projects', e)
        return jsonify({'error': f'Error adding project: {e}'}), 500


@projects_bp.route('/api/projects/<int:project_id>', methods=['PUT'])
@api_login_required
def update_project(project_id):
    """Update project; without a new image the stored one is kept"""
    title, description, link = _read_project_fields(request_data())
    error = _validate(title, description)
    if error:
        return jsonify({'error': error}), 400

    try:
        # No image file is written for a project that does not exist
        if not get_project_db(project_id):
            return jsonify({'error': 'Project not found'}), 404

        image_url, warning = _store_uploaded_image()
        success = update_project_db(project_id, title, description, link, image_url)
        if not success:
            return jsonify({'error': 'Project not found'}), 404

        LoggingService.log_user_action('projects', 'update project', details={'id': project_id})
        response = {'success': True, 'message': 'Project updated successfully'}
        if warning:
            response['warning'] = warning
        return jsonify(response)
    except Exception as e:
        LoggingService.log_error_with_traceback('projects', e)
        return jsonify({'error': f'Error updating project: {e}'}), 500


@projects_bp.route('/api/projects/<int:project_id>', methods=['DELETE'])
@api_login_required
def delete_project(project_id):
    """Delete project"""
    if not is_confirmed(request_data()):
        return jsonify({'error': 'Confirm deletion of this project'}), 400

    try:
        success = delete_project_db(project_id)
        if success:
            LoggingService.log_user_action('projects', 'delete project', details={'id': project_id})
            return jsonify({'success': True, 'message': 'Project deleted successfully'})
        return jsonify({'error': 'Project not found'}), 404
    except Exception as e:
        LoggingService.log_error_with_traceback('projects', e)
        return jsonify({'error': f'Error deleting project: {e}'}), 500


@projects_bp.route('/preview-image', methods=['POST'])
@api_login_required
def preview_upload():
    """Bounded-size preview of a chosen image; nothing is stored"""
    file = request.files.get('image')
    if file is None or not file.filename:
        return jsonify({'error': 'No image file provided'}), 400

    try:
        return jsonify({'success': True, **preview_image(file.read(), file.filename)})
    except ImageStorageError as e:
        return jsonify({'error': str(e)}), 400
