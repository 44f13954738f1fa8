"""
Experience Admin Routes
=======================

Skills CRUD plus the category lifecycle. Adding a category inserts a
placeholder skill carrying it; deleting a category removes every skill
that carries it in one statement.
"""

from flask import render_template, request, jsonify, session
from . import experience_bp
from .categories import categories, diff_categories, ExperienceSelection
from portfolio_admin.core import (
    Config, Database, LoggingService, login_required, api_login_required,
    is_confirmed, request_data,
)
import logging

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = 'General'
DEFAULT_ENTRY_NAME = 'Sample Experience'
PLACEHOLDER_ENTRY_NAME = 'New Entry'

# ===== Database Helper Functions =====


def get_categories_db():
    """Distinct non-empty categories, sorted"""
    with Database.connect() as conn:
        cursor = conn.cursor()
        cursor.execute(f'''
            SELECT DISTINCT category FROM {Config.SKILLS_TABLE}
            WHERE category IS NOT NULL AND category != ''
            ORDER BY category
        ''')
        return categories(cursor.fetchall())


def get_all_experience_db():
    """All skill rows ordered by category then id"""
    with Database.connect() as conn:
        cursor = conn.cursor()
        cursor.execute(f'SELECT id, name, category FROM {Config.SKILLS_TABLE} ORDER BY category, id')
        return [dict(row) for row in cursor.fetchall()]


def get_experience_db(experience_id):
    with Database.connect() as conn:
        cursor = conn.cursor()
        cursor.execute(f'SELECT id, name, category FROM {Config.SKILLS_TABLE} WHERE id = ?', (experience_id,))
        row = cursor.fetchone()
        return dict(row) if row else None


def group_by_category(rows):
    """{category: [rows]} for every derived category"""
    grouped = {category: [] for category in categories(rows)}
    for row in rows:
        if row['category']:
            grouped[row['category']].append(row)
    return grouped


def create_experience_db(name, category):
    try:
        with Database.connect() as conn:
            cursor = conn.cursor()
            cursor.execute(f'''
                INSERT INTO {Config.SKILLS_TABLE} (name, category) VALUES (?, ?)
            ''', (name, category))
            return cursor.lastrowid
    except Exception as e:
        logger.error(f"Error creating experience: {e}")
        raise


def update_experience_db(experience_id, name):
    """Rename a skill; its category never changes"""
    try:
        with Database.connect() as conn:
            cursor = conn.cursor()
            cursor.execute(f'UPDATE {Config.SKILLS_TABLE} SET name = ? WHERE id = ?', (name, experience_id))
            return cursor.rowcount > 0
    except Exception as e:
        logger.error(f"Error updating experience: {e}")
        raise


def delete_experience_db(experience_id):
    try:
        with Database.connect() as conn:
            cursor = conn.cursor()
            cursor.execute(f'DELETE FROM {Config.SKILLS_TABLE} WHERE id = ?', (experience_id,))
            return cursor.rowcount > 0
    except Exception as e:
        logger.error(f"Error deleting experience: {e}")
        raise


def delete_category_db(category):
    """Bulk-delete every skill in a category. Returns the number removed."""
    try:
        with Database.connect() as conn:
            cursor = conn.cursor()
            cursor.execute(f'DELETE FROM {Config.SKILLS_TABLE} WHERE category = ?', (category,))
            return cursor.rowcount
    except Exception as e:
        logger.error(f"Error deleting category {category}: {e}")
        raise


def ensure_default_category():
    """Give an empty skills table its 'General' grouping"""
    if not get_categories_db():
        create_experience_db(DEFAULT_ENTRY_NAME, DEFAULT_CATEGORY)
        logger.info(f"Default category '{DEFAULT_CATEGORY}' added")


def _selection():
    return ExperienceSelection(session)


def _state_response(selection, rendered=None, **extra):
    """
    Categories, grouped entries and editor state after a change.

    When the client sends the tabs it currently shows (`rendered`), the
    payload also says which tabs to add and which to drop.
    """
    rows = get_all_experience_db()
    current = categories(rows)
    selection.sync(current)
    payload = {
        'categories': current,
        'entries': group_by_category(rows),
        'state': selection.to_dict(),
    }
    if rendered is not None:
        to_add, to_remove = diff_categories(current, rendered)
        payload['tabs'] = {'add': to_add, 'remove': to_remove}
    payload.update(extra)
    return jsonify(payload)


# ===== Routes =====

@experience_bp.route('/')
@experience_bp.route('/editor')
@login_required
def experience_editor():
    """Experience editor - one tab per category"""
    ensure_default_category()
    rows = get_all_experience_db()
    selection = _selection()
    current = categories(rows)
    selection.sync(current)
    if selection.active_category is None and current:
        selection.activate(current[0])
    return render_template('experience/experience_editor.html',
                           entries=group_by_category(rows),
                           state=selection.to_dict())


@experience_bp.route('/api/experience', methods=['GET'])
@api_login_required
def get_experience():
    """All categories with their entries (?rendered=A&rendered=B adds a tab diff)"""
    rendered = request.args.getlist('rendered') if 'rendered' in request.args else None
    try:
        return _state_response(_selection(), rendered)
    except Exception as e:
        LoggingService.log_error_with_traceback('experience', e)
        return jsonify({'error': f'Error loading experience: {e}'}), 500


@experience_bp.route('/api/categories', methods=['GET'])
@api_login_required
def list_categories():
    try:
        return jsonify(get_categories_db())
    except Exception as e:
        LoggingService.log_error_with_traceback('experience', e)
        return jsonify({'error': f'Error fetching categories: {e}'}), 500


@experience_bp.route('/api/categories', methods=['POST'])
@api_login_required
def add_category():
    """Add a category by inserting a placeholder entry for it"""
    name = (request_data().get('name') or '').strip()
    if not name:
        return jsonify({'error': 'Category name cannot be empty.'}), 400

    try:
        if name in get_categories_db():
            return jsonify({'error': f"Category '{name}' already exists."}), 400

        create_experience_db(PLACEHOLDER_ENTRY_NAME, name)
        LoggingService.log_user_action('experience', 'add category', details={'category': name})

        selection = _selection()
        selection.reset(name)
        selection.activate(name)
        return _state_response(selection, success=True,
                               message=f"Category '{name}' added successfully!")
    except Exception as e:
        LoggingService.log_error_with_traceback('experience', e)
        return jsonify({'error': f'Error adding new category: {e}'}), 500


@experience_bp.route('/api/categories/<path:name>', methods=['DELETE'])
@api_login_required
def delete_category(name):
    """Delete a category and ALL of its entries"""
    if not is_confirmed(request_data()):
        return jsonify({'error': f"Confirm deletion of category '{name}' and all its entries"}), 400

    try:
        if name not in get_categories_db():
            return jsonify({'error': f"Category '{name}' not found"}), 404

        removed = delete_category_db(name)
        LoggingService.log_user_action('experience', 'delete category',
                                       details={'category': name, 'entries_removed': removed})

        selection = _selection()
        selection.reset(name)
        return _state_response(selection, success=True,
                               message=f"Category '{name}' and all its entries deleted successfully!")
    except Exception as e:
        LoggingService.log_error_with_traceback('experience', e)
        return jsonify({'error': f'Error deleting category: {e}'}), 500


@experience_bp.route('/api/active-category', methods=['POST'])
@api_login_required
def set_active_category():
    """Switch tabs: the form is reset, other tabs keep their own state"""
    category = (request_data().get('category') or '').strip()
    try:
        if category not in get_categories_db():
            return jsonify({'error': 'Please select an existing experience category.'}), 400

        selection = _selection()
        selection.activate(category)
        return jsonify({'success': True, 'state': selection.to_dict()})
    except Exception as e:
        LoggingService.log_error_with_traceback('experience', e)
        return jsonify({'error': f'Error switching category: {e}'}), 500


@experience_bp.route('/api/experience/select', methods=['POST'])
@api_login_required
def select_experience():
    """Select a row of the active category for editing"""
    data = request_data()
    selection = _selection()

    try:
        experience_id = int(data.get('id'))
    except (TypeError, ValueError):
        selection.clear()
        return jsonify({'success': True, 'state': selection.to_dict()})

    try:
        entry = get_experience_db(experience_id)
        if not entry:
            return jsonify({'error': 'Experience entry not found'}), 404
        if entry['category'] != selection.active_category:
            return jsonify({'error': 'Entry is not in the active category.'}), 400

        selection.select(entry['category'], entry['id'])
        return jsonify({'success': True, 'entry': entry, 'state': selection.to_dict()})
    except Exception as e:
        LoggingService.log_error_with_traceback('experience', e)
        return jsonify({'error': f'Error selecting entry: {e}'}), 500


@experience_bp.route('/api/experience', methods=['POST'])
@api_login_required
def add_experience():
    """Add an entry to the active category"""
    name = (request_data().get('name') or '').strip()
    selection = _selection()
    category = selection.active_category

    if not category:
        return jsonify({'error': 'Please select an experience category tab first.'}), 400
    if not name:
        return jsonify({'error': 'Name and category cannot be empty.'}), 400

    try:
        experience_id = create_experience_db(name, category)
        LoggingService.log_user_action('experience', 'add experience',
                                       details={'id': experience_id, 'category': category})
        selection.clear(category)
        return _state_response(selection, success=True, id=experience_id,
                               message='Experience added successfully!')
    except Exception as e:
        LoggingService.log_error_with_traceback('experience', e)
        return jsonify({'error': f'Error adding experience: {e}'}), 500


@experience_bp.route('/api/experience/<int:experience_id>', methods=['PUT'])
@api_login_required
def update_experience(experience_id):
    """Rename an entry"""
    name = (request_data().get('name') or '').strip()
    if not name:
        return jsonify({'error': 'Name cannot be empty.'}), 400

    try:
        entry = get_experience_db(experience_id)
        if not entry:
            return jsonify({'error': 'Experience entry not found'}), 404

        update_experience_db(experience_id, name)
        LoggingService.log_user_action('experience', 'update experience', details={'id': experience_id})

        selection = _selection()
        selection.clear(entry['category'])
        return _state_response(selection, success=True, message='Experience updated successfully!')
    except Exception as e:
        LoggingService.log_error_with_traceback('experience', e)
        return jsonify({'error': f'Error updating experience: {e}'}), 500


@experience_bp.route('/api/experience/<int:experience_id>', methods=['DELETE'])
@api_login_required
def delete_experience(experience_id):
    if not is_confirmed(request_data()):
        return jsonify({'error': 'Confirm deletion of this experience entry'}), 400

    try:
        entry = get_experience_db(experience_id)
        if not entry:
            return jsonify({'error': 'Experience entry not found'}), 404

        delete_experience_db(experience_id)
        LoggingService.log_user_action('experience', 'delete experience', details={'id': experience_id})

        selection = _selection()
        selection.clear(entry['category'])
        return _state_response(selection, success=True, message='Experience deleted successfully!')
    except Exception as e:
        LoggingService.log_error_with_traceback('experience', e)
        return jsonify({'error': f'Error deleting experience: {e}'}), 500
