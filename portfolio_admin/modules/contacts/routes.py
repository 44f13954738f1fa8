"""
Contacts Admin Routes
=====================

Two views are always loaded together: active and soft-deleted contacts.
A removed contact has no row, so only ACTIVE and DELETED are stored.
"""

from enum import Enum
from flask import render_template, jsonify, session
from . import contacts_bp
from portfolio_admin.core import (
    Config, Database, LoggingService, login_required, api_login_required,
    is_confirmed, request_data,
)
import logging

logger = logging.getLogger(__name__)

PLATFORMS = [
    'Email', 'Phone', 'LinkedIn', 'GitHub', 'Website', 'Twitter', 'Facebook',
    'Instagram', 'Discord', 'Telegram', 'WhatsApp', 'YouTube', 'Blog', 'Other',
]

SELECTION_KEY = 'contact_selection'


class ContactState(Enum):
    ACTIVE = 'active'
    DELETED = 'deleted'

    @classmethod
    def from_flag(cls, deleted):
        return cls.DELETED if deleted else cls.ACTIVE


# Which state each operation may start from
ALLOWED_FROM = {
    'update': {ContactState.ACTIVE},
    'soft_delete': {ContactState.ACTIVE},
    'restore': {ContactState.DELETED},
    'hard_delete': {ContactState.ACTIVE, ContactState.DELETED},
}

# ===== Database Helper Functions =====


def _row_to_dict(row):
    return {
        'id': row['id'],
        'platform': row['platform'],
        'link': row['link'],
        'state': ContactState.from_flag(row['deleted']).value,
    }


def get_contacts_db():
    """Both partitions: {'active': [...], 'deleted': [...]}"""
    with Database.connect() as conn:
        cursor = conn.cursor()
        cursor.execute(f'SELECT id, platform, link, deleted FROM {Config.CONTACTS_TABLE} ORDER BY id')
        contacts = {ContactState.ACTIVE.value: [], ContactState.DELETED.value: []}
        for row in cursor.fetchall():
            contact = _row_to_dict(row)
            contacts[contact['state']].append(contact)
        return contacts


def get_contact_db(contact_id):
    with Database.connect() as conn:
        cursor = conn.cursor()
        cursor.execute(f'SELECT id, platform, link, deleted FROM {Config.CONTACTS_TABLE} WHERE id = ?',
                       (contact_id,))
        row = cursor.fetchone()
        return _row_to_dict(row) if row else None


def create_contact_db(platform, link):
    """New contacts are always active"""
    try:
        with Database.connect() as conn:
            cursor = conn.cursor()
            cursor.execute(f'''
                INSERT INTO {Config.CONTACTS_TABLE} (platform, link, deleted) VALUES (?, ?, 0)
            ''', (platform, link))
            return cursor.lastrowid
    except Exception as e:
        logger.error(f"Error creating contact: {e}")
        raise


def update_contact_db(contact_id, platform, link):
    try:
        with Database.connect() as conn:
            cursor = conn.cursor()
            cursor.execute(f'''
                UPDATE {Config.CONTACTS_TABLE} SET platform = ?, link = ?
                WHERE id = ? AND deleted = 0
            ''', (platform, link, contact_id))
            return cursor.rowcount > 0
    except Exception as e:
        logger.error(f"Error updating contact: {e}")
        raise


def set_contact_state_db(contact_id, state):
    """Soft-delete (DELETED) or restore (ACTIVE) a contact"""
    try:
        with Database.connect() as conn:
            cursor = conn.cursor()
            cursor.execute(f'UPDATE {Config.CONTACTS_TABLE} SET deleted = ? WHERE id = ?',
                           (1 if state is ContactState.DELETED else 0, contact_id))
            return cursor.rowcount > 0
    except Exception as e:
        logger.error(f"Error setting contact {contact_id} to {state.value}: {e}")
        raise


def hard_delete_contact_db(contact_id):
    try:
        with Database.connect() as conn:
            cursor = conn.cursor()
            cursor.execute(f'DELETE FROM {Config.CONTACTS_TABLE} WHERE id = ?', (contact_id,))
            return cursor.rowcount > 0
    except Exception as e:
        logger.error(f"Error deleting contact: {e}")
        raise


def _read_fields(data):
    return (data.get('platform') or '').strip(), (data.get('link') or '').strip()


def _check_transition(contact_id, operation):
    """
    Load a contact and make sure `operation` is allowed from its state.

    The id in the URL names the row being changed. When the editor holds a
    selection, it must be that same row.

    Returns:
        (contact, None) or (None, error response)
    """
    selection = session.get(SELECTION_KEY)
    if selection and selection.get('id') != contact_id:
        return None, (jsonify({'error': 'Please select the contact you want to change.'}), 400)

    contact = get_contact_db(contact_id)
    if not contact:
        return None, (jsonify({'error': 'Contact not found'}), 404)
    state = ContactState(contact['state'])
    if state not in ALLOWED_FROM[operation]:
        return None, (jsonify({'error': f"Cannot {operation.replace('_', ' ')} a contact that is {state.value}"}), 409)
    return contact, None


def _clear_selection():
    session.pop(SELECTION_KEY, None)


def _contacts_response(**extra):
    payload = {'contacts': get_contacts_db(), 'selection': session.get(SELECTION_KEY)}
    payload.update(extra)
    return jsonify(payload)


# ===== Routes =====

@contacts_bp.route('/')
@contacts_bp.route('/editor')
@login_required
def contacts_editor():
    """Contacts editor - active and deleted tables"""
    return render_template('contacts/contacts_editor.html',
                           contacts=get_contacts_db(), platforms=PLATFORMS)


@contacts_bp.route('/api/contacts', methods=['GET'])
@api_login_required
def list_contacts():
    try:
        return _contacts_response()
    except Exception as e:
        LoggingService.log_error_with_traceback('contacts', e)
        return jsonify({'error': f'Error loading contacts: {e}'}), 500


@contacts_bp.route('/api/platforms', methods=['GET'])
@api_login_required
def list_platforms():
    return jsonify(PLATFORMS)


@contacts_bp.route('/api/contacts/select', methods=['POST'])
@api_login_required
def select_contact():
    """
    Select one row in either view. There is a single selection slot, so
    selecting in one view clears the other.
    """
    data = request_data()
    view = data.get('view')
    if view not in (ContactState.ACTIVE.value, ContactState.DELETED.value):
        _clear_selection()
        return jsonify({'success': True, 'selection': None})

    try:
        contact_id = int(data.get('id'))
    except (TypeError, ValueError):
        return jsonify({'error': 'Please select a contact.'}), 400

    try:
        contact = get_contact_db(contact_id)
        if not contact or contact['state'] != view:
            return jsonify({'error': f'Contact not found in {view} contacts'}), 404
        session[SELECTION_KEY] = {'view': view, 'id': contact_id}
        return jsonify({'success': True, 'contact': contact, 'selection': session[SELECTION_KEY]})
    except Exception as e:
        LoggingService.log_error_with_traceback('contacts', e)
        return jsonify({'error': f'Error selecting contact: {e}'}), 500


@contacts_bp.route('/api/contacts', methods=['POST'])
@api_login_required
def add_contact():
    platform, link = _read_fields(request_data())
    if not platform or not link:
        return jsonify({'error': 'Platform and link cannot be empty.'}), 400

    try:
        contact_id = create_contact_db(platform, link)
        LoggingService.log_user_action('contacts', 'add contact', details={'id': contact_id, 'platform': platform})
        _clear_selection()
        return _contacts_response(success=True, id=contact_id, message='Contact added successfully!'), 201
    except Exception as e:
        LoggingService.log_error_with_traceback('contacts', e)
        return jsonify({'error': f'Error adding contact: {e}'}), 500


@contacts_bp.route('/api/contacts/<int:contact_id>', methods=['PUT'])
@api_login_required
def update_contact(contact_id):
    platform, link = _read_fields(request_data())
    if not platform or not link:
        return jsonify({'error': 'Platform and link cannot be empty.'}), 400

    try:
        _, error = _check_transition(contact_id, 'update')
        if error:
            return error
        update_contact_db(contact_id, platform, link)
        LoggingService.log_user_action('contacts', 'update contact', details={'id': contact_id})
        _clear_selection()
        return _contacts_response(success=True, message='Contact updated successfully!')
    except Exception as e:
        LoggingService.log_error_with_traceback('contacts', e)
        return jsonify({'error': f'Error updating contact: {e}'}), 500


@contacts_bp.route('/api/contacts/<int:contact_id>/soft-delete', methods=['POST'])
@api_login_required
def soft_delete_contact(contact_id):
    """Move an active contact to the deleted view"""
    if not is_confirmed(request_data()):
        return jsonify({'error': 'Confirm moving this contact to deleted contacts'}), 400

    try:
        _, error = _check_transition(contact_id, 'soft_delete')
        if error:
            return error
        set_contact_state_db(contact_id, ContactState.DELETED)
        LoggingService.log_user_action('contacts', 'soft delete contact', details={'id': contact_id})
        _clear_selection()
        return _contacts_response(success=True, message='Contact moved to deleted contacts.')
    except Exception as e:
        LoggingService.log_error_with_traceback('contacts', e)
        return jsonify({'error': f'Error deleting contact: {e}'}), 500


@contacts_bp.route('/api/contacts/<int:contact_id>/restore', methods=['POST'])
@api_login_required
def restore_contact(contact_id):
    """Move a deleted contact back to the active view"""
    if not is_confirmed(request_data()):
        return jsonify({'error': 'Confirm restoring this contact'}), 400

    try:
        _, error = _check_transition(contact_id, 'restore')
        if error:
            return error
        set_contact_state_db(contact_id, ContactState.ACTIVE)
        LoggingService.log_user_action('contacts', 'restore contact', details={'id': contact_id})
        _clear_selection()
        return _contacts_response(success=True, message='Contact restored successfully!')
    except Exception as e:
        LoggingService.log_error_with_traceback('contacts', e)
        return jsonify({'error': f'Error restoring contact: {e}'}), 500


@contacts_bp.route('/api/contacts/<int:contact_id>', methods=['DELETE'])
@api_login_required
def hard_delete_contact(contact_id):
    """Permanently remove a contact from either view"""
    if not is_confirmed(request_data(), permanent=True):
        return jsonify({'error': 'Permanent deletion cannot be undone. Confirm with permanent=true.'}), 400

    try:
        _, error = _check_transition(contact_id, 'hard_delete')
        if error:
            return error
        hard_delete_contact_db(contact_id)
        LoggingService.log_user_action('contacts', 'permanently delete contact', details={'id': contact_id})
        _clear_selection()
        return _contacts_response(success=True, message='Contact permanently deleted.')
    except Exception as e:
        LoggingService.log_error_with_traceback('contacts', e)
        return jsonify({'error': f'Error deleting contact: {e}'}), 500
