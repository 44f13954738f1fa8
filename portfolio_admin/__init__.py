"""
Portfolio Admin - A Flask admin for a personal portfolio site
=============================================================

Admin views for the portfolio's content:
- Projects with image uploads
- Skills grouped by category
- The "About Me" text
- Contacts with soft delete and restore
- A public read API for the portfolio page

Usage:
    from portfolio_admin import PortfolioAdmin

    app = Flask(__name__)
    PortfolioAdmin(app)
"""

import os
import logging

__version__ = '0.1.0'

logger = logging.getLogger(__name__)

DEFAULT_FEATURES = {
    'portfolio_public': True,
}

# (module name, import path, blueprint attribute)
ADMIN_MODULES = [
    ('dashboard', 'portfolio_admin.modules.dashboard', 'dashboard_bp'),
    ('projects', 'portfolio_admin.modules.projects', 'projects_bp'),
    ('experience', 'portfolio_admin.modules.experience', 'experience_bp'),
    ('about', 'portfolio_admin.modules.about', 'about_bp'),
    ('contacts', 'portfolio_admin.modules.contacts', 'contacts_bp'),
]
OPTIONAL_MODULES = [
    ('portfolio_public', 'portfolio_admin.modules.portfolio_public', 'portfolio_public_bp'),
]


class PortfolioAdmin:
    """
    Flask extension that wires Portfolio Admin into an app.

    Config keys not already set on the app are filled from
    portfolio_admin.core.Config. Optional modules are toggled with
    {'features': {'portfolio_public': False}}.
    """

    def __init__(self, app=None, config=None):
        self._config = dict(config or {})
        self._registered = []
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        from .core import Config, Database
        from .modules.dashboard import seed_admin

        self._apply_config(app, Config)
        self._setup_database_dir(app)
        self._register_modules(app)

        @app.context_processor
        def inject_portfolio_admin():
            return {
                'brand_name': app.config.get('BRAND_NAME', 'Portfolio Admin'),
                'portfolio_admin_modules': list(self._registered),
            }

        with app.app_context():
            Database.init_schema()
            seed_admin()

        app.extensions['portfolio_admin'] = self
        logger.info("Portfolio Admin initialised with modules: %s", ', '.join(self._registered))

    @property
    def features(self):
        features = dict(DEFAULT_FEATURES)
        features.update(self._config.get('features') or {})
        return features

    def get_registered_modules(self):
        return list(self._registered)

    def _apply_config(self, app, config_cls):
        for key in ('SECRET_KEY', 'DB_DIR', 'PORTFOLIO_DB', 'PROJECT_IMAGE_DIR',
                    'PROJECT_IMAGE_BASE_URL', 'IMAGE_PREVIEW_SIZE', 'ADMIN_USERNAME',
                    'ADMIN_PASSWORD', 'SEED_DEFAULT_ADMIN', 'PUBLIC_API_ORIGINS'):
            if app.config.get(key) is None:
                app.config[key] = getattr(config_cls, key)

        # A DB_DIR set on the app moves the default database with it
        if app.config['PORTFOLIO_DB'] == config_cls.PORTFOLIO_DB and app.config['DB_DIR'] != config_cls.DB_DIR:
            app.config['PORTFOLIO_DB'] = os.path.join(app.config['DB_DIR'], 'portfolio.db')

        for key, value in self._config.items():
            if key != 'features':
                app.config[key.upper()] = value

    def _setup_database_dir(self, app):
        os.makedirs(app.config['DB_DIR'], exist_ok=True)
        db_dir = os.path.dirname(app.config['PORTFOLIO_DB'])
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

    def _register_modules(self, app):
        import importlib

        modules = list(ADMIN_MODULES)
        modules += [m for m in OPTIONAL_MODULES if self.features.get(m[0])]

        for name, path, attr in modules:
            module = importlib.import_module(path)
            app.register_blueprint(getattr(module, attr))
            # Optional per-module setup that needs the final app config
            if hasattr(module, 'init_app'):
                module.init_app(app)
            self._registered.append(name)


__all__ = ['PortfolioAdmin', '__version__']
