"""
Shared fixtures: every test gets a fresh database and image directory.
Run with: pytest tests -v

NOTE: pytest is listed under extras_require["dev"] in setup.py.
Install with: pip install -e ".[dev]"
"""

import io
import os
import shutil
import tempfile

import pytest
from PIL import Image

from portfolio_admin.app import create_app

ADMIN_USERNAME = 'admin'
ADMIN_PASSWORD = 'correct-horse'


@pytest.fixture
def tmp_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="portfolio-admin-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def app_config(tmp_dir):
    return {
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'DB_DIR': tmp_dir,
        'PORTFOLIO_DB': os.path.join(tmp_dir, 'portfolio.db'),
        'PROJECT_IMAGE_DIR': os.path.join(tmp_dir, 'project_images'),
        'PROJECT_IMAGE_BASE_URL': 'http://example.test/assets/project_images/',
        'ADMIN_USERNAME': ADMIN_USERNAME,
        'ADMIN_PASSWORD': ADMIN_PASSWORD,
        'SEED_DEFAULT_ADMIN': False,
    }


@pytest.fixture
def app(app_config):
    """Fully initialised app with all modules registered.

    pytest-flask builds its `client` fixture from this one.
    """
    return create_app(app_config)


@pytest.fixture
def auth_client(client):
    """pytest-flask client logged in through the real login form."""
    response = client.post('/admin/login', data={
        'username': ADMIN_USERNAME,
        'password': ADMIN_PASSWORD,
    })
    assert response.status_code == 302
    return client


def make_image_bytes(fmt='PNG', size=(640, 480), color=(200, 30, 30)):
    """Encode a solid-colour image in memory."""
    img = Image.new('RGB', size, color)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def png_bytes():
    return make_image_bytes('PNG')


@pytest.fixture
def make_image():
    return make_image_bytes
