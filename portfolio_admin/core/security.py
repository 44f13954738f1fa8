from functools import wraps
from flask import flash, jsonify, redirect, request, session, url_for


def login_required(f):
    """Decorator for admin pages: redirect to the login form"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'admin_id' not in session:
            flash('Please sign in to access this page.', 'error')
            return redirect(url_for('admin.login', next=request.path))
        return f(*args, **kwargs)
    return decorated_function


def api_login_required(f):
    """Decorator for admin JSON endpoints: 401 instead of a redirect"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'admin_id' not in session:
            return jsonify({'error': 'Authentication required'}), 401
        return f(*args, **kwargs)
    return decorated_function


def _truthy(value):
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return value is True or value == 1


def is_confirmed(data, permanent=False):
    """Whether a mutating request carries the user's confirmation.

    Irreversible operations additionally need ``permanent``.
    """
    if not data or not _truthy(data.get('confirm')):
        return False
    if permanent and not _truthy(data.get('permanent')):
        return False
    return True


def request_data():
    """JSON body, form fields for multipart/form posts, else query args"""
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict() if request.form else request.args.to_dict()
    return data
