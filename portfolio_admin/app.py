"""
Portfolio Admin Application
===========================

Run with:
    python -m portfolio_admin.app

Visit:
    http://localhost:5000/admin        - Admin dashboard
    http://localhost:5000/api/portfolio - Public portfolio JSON
"""

import logging
from flask import Flask, redirect, url_for

from portfolio_admin import PortfolioAdmin
from portfolio_admin.core import Config


def create_app(overrides=None, features=None):
    """Build the Flask app. `overrides` are applied to app.config first."""
    app = Flask(__name__)
    app.config['SECRET_KEY'] = Config.SECRET_KEY

    # Session security
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'

    if overrides:
        app.config.update(overrides)

    PortfolioAdmin(app, {'features': features or {}})

    @app.route('/')
    def index():
        return redirect(url_for('admin.dashboard'))

    return app


def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    app = create_app()

    print("\n" + "=" * 60)
    print("Portfolio Admin")
    print("=" * 60)
    print(f"Admin Panel:     http://localhost:{Config.port}/admin")
    print(f"Public API:      http://localhost:{Config.port}/api/portfolio")
    print("=" * 60 + "\n")

    app.run(host='0.0.0.0', port=Config.port, debug=True)


if __name__ == '__main__':
    main()
