"""
Critical Integration Tests for Portfolio Admin
==============================================

Focused tests covering the app shell: initialisation, module registration,
login gate, admin seeding and the public portfolio API.
Run with: pytest tests/test_critical.py -v
"""

import os
import shutil
import sqlite3
import tempfile

from flask import Flask

from portfolio_admin import PortfolioAdmin
from portfolio_admin.modules.dashboard import authenticate, hash_password, seed_admin

from conftest import ADMIN_USERNAME, ADMIN_PASSWORD


# ---------------------------------------------------------------------------
# 1. Framework initialisation -- PortfolioAdmin(app) does not raise
# ---------------------------------------------------------------------------

def test_framework_initialisation(tmp_dir):
    """PortfolioAdmin(app) boots without errors and stores itself on the app."""
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = tmp_dir

    admin = PortfolioAdmin(app)

    assert "portfolio_admin" in app.extensions
    assert app.extensions["portfolio_admin"] is admin
    assert app.config["PORTFOLIO_DB"] == os.path.join(tmp_dir, "portfolio.db")


# ---------------------------------------------------------------------------
# 2. Blueprint registration
# ---------------------------------------------------------------------------

EXPECTED_MODULES = [
    "dashboard",
    "projects",
    "experience",
    "about",
    "contacts",
    "portfolio_public",
]


def test_all_blueprints_registered(app):
    registered = app.extensions["portfolio_admin"].get_registered_modules()

    for mod in EXPECTED_MODULES:
        assert mod in registered, (
            f"Module '{mod}' was not registered. Registered: {registered}"
        )
    assert len(registered) == len(EXPECTED_MODULES)


def test_public_module_can_be_disabled(tmp_dir):
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = tmp_dir

    PortfolioAdmin(app, {'features': {'portfolio_public': False}})

    assert "portfolio_public" not in app.extensions["portfolio_admin"].get_registered_modules()
    rules = [rule.rule for rule in app.url_map.iter_rules()]
    assert "/api/portfolio" not in rules


# ---------------------------------------------------------------------------
# 3. Database directory and schema creation
# ---------------------------------------------------------------------------

def test_database_dir_and_schema_creation():
    d = tempfile.mkdtemp(prefix="portfolio-admin-dbtest-")
    target = os.path.join(d, "sub", "databases")

    try:
        app = Flask(__name__)
        app.config["TESTING"] = True
        app.config["SECRET_KEY"] = "test-secret"
        app.config["DB_DIR"] = target

        PortfolioAdmin(app)

        assert os.path.isdir(target), f"DB_DIR was not created at {target}"
        with sqlite3.connect(os.path.join(target, "portfolio.db")) as conn:
            tables = {row[0] for row in conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table'")}
        for table in ("users", "skills", "about", "projects", "contacts"):
            assert table in tables
    finally:
        shutil.rmtree(d, ignore_errors=True)


# ---------------------------------------------------------------------------
# 4. Authentication
# ---------------------------------------------------------------------------

def test_hash_password_is_lowercase_sha256_hex():
    assert hash_password("admin123") == (
        "240be518fabd2724ddb6f04eeb1da5967448d7e831c08c8fa822809f74c720a9"
    )


def test_authenticate(app):
    with app.app_context():
        assert authenticate(ADMIN_USERNAME, ADMIN_PASSWORD) is True
        assert authenticate(ADMIN_USERNAME, "wrong") is False
        assert authenticate("nobody", ADMIN_PASSWORD) is False
        assert authenticate("", "") is False


def test_authenticate_store_failure_is_false(app):
    app.config["PORTFOLIO_DB"] = os.path.join(app.config["DB_DIR"], "missing", "nope.db")
    with app.app_context():
        assert authenticate(ADMIN_USERNAME, ADMIN_PASSWORD) is False


def test_login_success_redirects_to_dashboard(client):
    response = client.post("/admin/login", data={
        "username": ADMIN_USERNAME, "password": ADMIN_PASSWORD,
    })
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/admin/")

    dashboard = client.get("/admin/")
    assert dashboard.status_code == 200
    assert b"Manage Projects" in dashboard.data


def test_dashboard_url_and_alias(app, auth_client):
    from flask import url_for

    with app.test_request_context():
        assert url_for("admin.dashboard") == "/admin/"
    assert auth_client.get("/admin/dashboard").status_code == 200


def test_login_failure_shows_invalid_credentials(client):
    response = client.post("/admin/login", data={
        "username": ADMIN_USERNAME, "password": "nope",
    })
    assert response.status_code == 401
    assert b"Invalid username or password" in response.data


def test_logout_clears_session(auth_client):
    auth_client.get("/admin/logout")
    response = auth_client.get("/admin/projects-editor/api/projects")
    assert response.status_code == 401


# ---------------------------------------------------------------------------
# 5. Admin auth guards
# ---------------------------------------------------------------------------

ADMIN_PAGES = [
    "/admin/",
    "/admin/projects-editor/",
    "/admin/experience-editor/",
    "/admin/about-editor/",
    "/admin/contacts-editor/",
]


def test_admin_pages_redirect_to_login(client):
    for page in ADMIN_PAGES:
        response = client.get(page, follow_redirects=False)
        assert response.status_code == 302, f"{page} did not redirect"
        assert "/admin/login" in response.headers.get("Location", "")


def test_admin_api_requires_auth(client):
    response = client.get("/admin/contacts-editor/api/contacts")
    assert response.status_code == 401
    assert response.get_json() == {"error": "Authentication required"}


def test_admin_pages_render_when_logged_in(auth_client):
    for page in ADMIN_PAGES:
        response = auth_client.get(page)
        assert response.status_code == 200, f"{page} returned {response.status_code}"


# ---------------------------------------------------------------------------
# 6. Admin seeding
# ---------------------------------------------------------------------------

def _user_count(app):
    with sqlite3.connect(app.config["PORTFOLIO_DB"]) as conn:
        return conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]


def test_no_seed_without_credentials_or_dev_flag(app_config):
    from portfolio_admin.app import create_app

    app_config.update({"ADMIN_USERNAME": "", "ADMIN_PASSWORD": "", "SEED_DEFAULT_ADMIN": False})
    app = create_app(app_config)

    assert _user_count(app) == 0


def test_dev_seed_flag_creates_default_admin(app_config):
    from portfolio_admin.app import create_app

    app_config.update({"ADMIN_USERNAME": "", "ADMIN_PASSWORD": "", "SEED_DEFAULT_ADMIN": True})
    app = create_app(app_config)

    assert _user_count(app) == 1
    with app.app_context():
        assert authenticate("admin", "admin123") is True


def test_seed_runs_only_once(app):
    with app.app_context():
        assert seed_admin() is None
    assert _user_count(app) == 1


# ---------------------------------------------------------------------------
# 7. Public portfolio API
# ---------------------------------------------------------------------------

def test_public_portfolio(auth_client):
    auth_client.post("/admin/projects-editor/api/projects", json={
        "title": "Portfolio Site", "description": "A site",
    })
    auth_client.post("/admin/contacts-editor/api/contacts", json={
        "platform": "GitHub", "link": "https://github.com/me",
    })
    removed = auth_client.post("/admin/contacts-editor/api/contacts", json={
        "platform": "Twitter", "link": "https://twitter.com/me",
    }).get_json()["id"]
    auth_client.post(f"/admin/contacts-editor/api/contacts/{removed}/soft-delete", json={"confirm": True})
    auth_client.post("/admin/experience-editor/api/categories", json={"name": "Languages"})
    auth_client.post("/admin/experience-editor/api/experience", json={"name": "Python"})

    auth_client.get("/admin/logout")
    response = auth_client.get("/api/portfolio")

    assert response.status_code == 200
    data = response.get_json()
    assert data["about"] == "No about info yet."
    assert [p["title"] for p in data["projects"]] == ["Portfolio Site"]
    assert data["contacts"] == [{"platform": "GitHub", "link": "https://github.com/me"}]
    assert data["skills"] == {"Languages": ["New Entry", "Python"]}


def test_request_actions_are_logged(app, auth_client):
    from portfolio_admin.core import LoggingService

    auth_client.post("/admin/contacts-editor/api/contacts", json={
        "platform": "Email", "link": "a@b.com",
    })

    with app.app_context():
        logs = LoggingService.get_recent_logs(limit=20)
    messages = [entry["message"] for entry in logs]
    assert "User action: add contact" in messages
    assert "User action: login" in messages


def test_public_api_origins_from_app_config(app_config):
    from portfolio_admin.app import create_app

    app_config["PUBLIC_API_ORIGINS"] = ["https://me.example"]
    client = create_app(app_config).test_client()

    allowed = client.get("/api/portfolio", headers={"Origin": "https://me.example"})
    assert allowed.status_code == 200
    assert allowed.headers.get("Access-Control-Allow-Origin") == "https://me.example"

    other = client.get("/api/portfolio", headers={"Origin": "https://elsewhere.example"})
    assert other.headers.get("Access-Control-Allow-Origin") is None


def test_public_api_origins_as_comma_string(app_config):
    from portfolio_admin.app import create_app

    app_config["PUBLIC_API_ORIGINS"] = "https://a.example, https://b.example"
    client = create_app(app_config).test_client()

    response = client.get("/api/portfolio", headers={"Origin": "https://b.example"})
    assert response.headers.get("Access-Control-Allow-Origin") == "https://b.example"
