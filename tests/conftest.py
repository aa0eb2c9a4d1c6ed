"""
Pytest configuration and fixtures.
Ensures tests use an isolated test database, not the production database.
"""

import os
import pytest
import tempfile

# Set test database path BEFORE importing app
# This ensures all tests use an isolated database
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), 'catering_test.db')
os.environ['DATABASE_PATH'] = TEST_DB_PATH

DEMO_EMAIL = 'demo@ezekielcatering.com'
DEMO_PASSWORD = 'demo1234'


@pytest.fixture(scope='session', autouse=True)
def setup_test_environment():
    """Set up test environment before any tests run."""
    # Ensure test database path is set
    os.environ['DATABASE_PATH'] = TEST_DB_PATH
    os.environ['FLASK_ENV'] = 'test'

    yield

    # Cleanup: remove test database after all tests
    for suffix in ('', '-wal', '-shm'):
        path = TEST_DB_PATH + suffix
        if os.path.exists(path):
            try:
                os.remove(path)
            except PermissionError:
                pass  # Windows may have file locked


@pytest.fixture
def app():
    """Create test application with isolated database."""
    from app import create_app
    from database import init_db

    # Ensure test database path
    os.environ['DATABASE_PATH'] = TEST_DB_PATH

    app = create_app('test')
    app.config['TESTING'] = True
    app.config['WTF_CSRF_ENABLED'] = False
    app.config['DATABASE_PATH'] = TEST_DB_PATH

    with app.app_context():
        init_db()
        yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def authenticated_client(app, client):
    """Create client signed in as the demo customer."""
    response = client.post('/auth/login', json={
        'email': DEMO_EMAIL,
        'password': DEMO_PASSWORD,
    })
    assert response.status_code == 200
    return client


@pytest.fixture
def demo_user(app):
    """The seeded demo customer as a Flask-Login user."""
    from models.user import User, get_user_by_email

    return User(get_user_by_email(DEMO_EMAIL))


@pytest.fixture
def make_reservation(app):
    """Factory inserting a reservation record for a user."""
    from models.reservation import add_reservation

    def _make(date='2030-06-15T16:00:00', user_id='demo-user', status='pending', **fields):
        record = {
            'user_id': user_id,
            'user_email': 'demo@ezekielcatering.com',
            'date': date,
            'time_label': '4:00 PM',
            'occasions': ['Wedding'],
            'foods': ['Beef Steak'],
            'pack_name': '100 Pax',
            'pack_price': '₱35,000',
            'venue': {'mobile': '09171234567', 'address': '12 Mabini St'},
            'addons': [],
            'package_price_num': 35000,
            'addons_total': 0,
            'downpayment': 17500,
            'remaining_balance': 17500,
            'total_amount': 35000,
            'payment_method': 'GCash',
            'status': status,
        }
        record.update(fields)
        return add_reservation(record)

    return _make
