"""
Database seed data.
Initial data population for fresh database installations.
"""

from werkzeug.security import generate_password_hash

DEMO_USER = {
    'uid': 'demo-user',
    'email': 'demo@ezekielcatering.com',
    'password': 'demo1234',
    'full_name': 'Demo Customer',
}


def seed_database(db):
    """Insert initial seed data."""

    # Demo customer account
    db.execute('''
        INSERT INTO users (uid, email, email_verified, password_hash, full_name)
        VALUES (?, ?, 1, ?, ?)
    ''', (
        DEMO_USER['uid'],
        DEMO_USER['email'],
        generate_password_hash(DEMO_USER['password']),
        DEMO_USER['full_name'],
    ))
