"""
Pytest configuration file for the materials tests.

Contains shared fixtures, upload factories and configuration for all tests.
"""

import os
import sys
from io import BytesIO
from pathlib import Path

import pytest
from werkzeug.datastructures import FileStorage

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Skip the module-level app in app.py
os.environ["TESTING"] = "True"

from extensions import db  # noqa: E402
from config import TestingConfig  # noqa: E402
from models.material import Material  # noqa: E402

PDF_BYTES = b"%PDF-1.4 fake pdf content"
PNG_BYTES = b"\x89PNG\r\n\x1a\n fake png content"


def make_config(**overrides):
    """Build a TestingConfig subclass with the given settings."""
    return type("TestConfig", (TestingConfig,), overrides)


# --------------------
# Fixtures
# --------------------


@pytest.fixture
def upload_root(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def config_overrides():
    """Override in a test module to change the app configuration."""
    return {}


@pytest.fixture(scope="function")
def app(upload_root, config_overrides):
    """Fixture for creating a new Flask app for each test function."""
    from app import create_app

    app = create_app(
        config_class=make_config(UPLOAD_FOLDER=str(upload_root), **config_overrides)
    )

    # Establish an application context before creating the database tables
    with app.app_context():
        db.create_all()

        yield app

        # Teardown: clean up the database
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """Flask CLI runner."""
    return app.test_cli_runner()


@pytest.fixture
def service(app):
    return app.extensions["materials"]


@pytest.fixture
def store(service):
    return service.store


@pytest.fixture
def repository(service):
    return service.repository


# --------------------
# Factories
# --------------------
class UploadFactory:
    @staticmethod
    def pdf(filename="notes.pdf", content=PDF_BYTES, content_type="application/pdf"):
        return FileStorage(
            stream=BytesIO(content), filename=filename, content_type=content_type
        )

    @staticmethod
    def image(filename="cover.png", content=PNG_BYTES, content_type="image/png"):
        return FileStorage(
            stream=BytesIO(content), filename=filename, content_type=content_type
        )

    @staticmethod
    def form_file(filename, content, content_type):
        """Tuple accepted by the Flask test client for multipart uploads."""
        return (BytesIO(content), filename, content_type)


class MaterialFactory:
    @staticmethod
    def create(service, **kwargs):
        defaults = {
            "name": "Algebra Notes",
            "description": "Ch1-3",
            "category": "Math",
            "document": UploadFactory.pdf(),
            "image": None,
        }
        defaults.update(kwargs)
        return service.create(**defaults)


@pytest.fixture
def uploads():
    return UploadFactory


@pytest.fixture
def material_factory():
    return MaterialFactory


@pytest.fixture
def material_count():
    """Callable returning the number of rows in the materials table."""
    return lambda: db.session.query(Material).count()


# --------------------
# Pytest markers and hooks
# --------------------
def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast, isolated tests")
    config.addinivalue_line("markers", "integration: slower, database tests")


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "app" in item.fixturenames:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)
