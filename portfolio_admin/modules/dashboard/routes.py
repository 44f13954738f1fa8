"""
Admin Dashboard Routes
======================

Login gate and dashboard menu. A single shared admin credential is
stored as an unsalted SHA-256 hex digest in the users table.
"""

from flask import render_template, request, redirect, url_for, flash, session
from . import dashboard_bp
from portfolio_admin.core import Config, Database, LoggingService, get_config_value, login_required
import hashlib
import logging

logger = logging.getLogger(__name__)

DEV_ADMIN_USERNAME = 'admin'
DEV_ADMIN_PASSWORD = 'admin123'

MANAGEMENT_VIEWS = [
    ('Manage Projects', 'projects_admin.projects_editor'),
    ('Manage Experience', 'experience_admin.experience_editor'),
    ('Manage About Me', 'about_admin.about_editor'),
    ('Manage Contacts', 'contacts_admin.contacts_editor'),
]


def hash_password(password):
    """SHA-256 over UTF-8, lowercase hex"""
    return hashlib.sha256(password.encode('utf-8')).hexdigest()


def get_admin(username):
    """Get (id, username) for a username, or None"""
    with Database.connect() as conn:
        cursor = conn.cursor()
        cursor.execute(f"""
            SELECT id, username, password_hash FROM {Config.USERS_TABLE}
            WHERE username = ?
        """, (username,))
        return cursor.fetchone()


def authenticate(username, password):
    """Check a username/password pair. Never raises: any failure is False."""
    if not username or not password:
        return False
    try:
        row = get_admin(username)
        return bool(row) and row['password_hash'] == hash_password(password)
    except Exception as e:
        logger.error(f"Error authenticating {username}: {e}")
        return False


def seed_admin():
    """
    Insert the first admin account if the users table is empty.

    Uses ADMIN_USERNAME/ADMIN_PASSWORD when both are configured; otherwise
    falls back to admin/admin123 only when SEED_DEFAULT_ADMIN is enabled.

    Returns:
        The seeded username, or None if nothing was inserted.
    """
    with Database.connect() as conn:
        cursor = conn.cursor()
        cursor.execute(f"SELECT COUNT(*) FROM {Config.USERS_TABLE}")
        if cursor.fetchone()[0] > 0:
            return None

        username = get_config_value('ADMIN_USERNAME')
        password = get_config_value('ADMIN_PASSWORD')
        if not (username and password):
            if not get_config_value('SEED_DEFAULT_ADMIN', False):
                logger.warning("No admin users found. Set ADMIN_USERNAME and ADMIN_PASSWORD "
                               "(or SEED_DEFAULT_ADMIN=1 for development) and restart.")
                return None
            username, password = DEV_ADMIN_USERNAME, DEV_ADMIN_PASSWORD

        cursor.execute(f"""
            INSERT INTO {Config.USERS_TABLE} (username, password_hash) VALUES (?, ?)
        """, (username, hash_password(password)))

    LoggingService.info('auth', f"Seeded admin account '{username}'")
    return username


@dashboard_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Admin login route"""
    if request.method == 'POST':
        username = request.form.get('username', '').strip()
        password = request.form.get('password', '')

        if not username or not password:
            flash('Please enter both username and password', 'error')
            return render_template('dashboard/login.html'), 400

        if authenticate(username, password):
            row = get_admin(username)
            session['admin_id'] = row['id']
            session['admin_username'] = row['username']
            LoggingService.log_user_action('auth', 'login', user_id=username)
            flash('Login successful', 'success')

            next_page = request.args.get('next')
            if not next_page or not next_page.startswith('/'):
                next_page = url_for('admin.dashboard')
            return redirect(next_page)

        LoggingService.log_security_event('Failed admin login', {'username': username})
        flash('Invalid username or password', 'error')
        return render_template('dashboard/login.html'), 401

    return render_template('dashboard/login.html')


@dashboard_bp.route('/logout')
def logout():
    """Admin logout route"""
    admin_username = session.get('admin_username', 'Unknown')
    session.clear()
    LoggingService.log_user_action('auth', 'logout', user_id=admin_username)
    flash('You have been logged out', 'info')
    return redirect(url_for('admin.login'))


@dashboard_bp.route('/dashboard')
@dashboard_bp.route('/')
@login_required
def dashboard():
    """Admin dashboard - menu of management views"""
    return render_template('dashboard/dashboard.html',
                           views=MANAGEMENT_VIEWS,
                           admin_username=session.get('admin_username'))
