"""
Pytest fixtures for the product registration backend tests.

Provides test database setup, demo data and a test client. The pure engine
tests (remap, matcher, scan, query, csv) only use the plain fixtures below
and never touch the database.
"""

import pytest
from prodreg import create_app
from prodreg.extensions import db
from prodreg.models import Category, Product
from prodreg.seed_data import DEMO_PRODUCTS, demo_registrations, seed_demo_data


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'SCAN_KEYBOARD_LAYOUT': 'azerty',
        'SCAN_PATTERN_FIXES': None,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def seeded(db_session):
    """Demo data set: 6 users, 6 products, 3 categories, 13 registrations."""
    seed_demo_data()
    return db_session


@pytest.fixture
def catalog():
    """Unsaved demo products, in catalog order."""
    return [
        Product(id=i, name=name, qr_code=code, category_id=category_index + 1)
        for i, (name, code, category_index) in enumerate(DEMO_PRODUCTS, start=1)
    ]


@pytest.fixture
def categories():
    return [
        Category(id=1, name="Smeermiddelen"),
        Category(id=2, name="Reinigers"),
        Category(id=3, name="Onderhoud"),
    ]


@pytest.fixture
def history():
    """The 13-entry demo registration log (unsaved)."""
    return demo_registrations()
