"""
Database schema definitions.
Table creation, indexes, and structure management.
"""


def drop_tables(db):
    """Drop all existing tables."""
    # Disable foreign key constraints before dropping
    db.execute('PRAGMA foreign_keys = OFF')

    tables = [
        'notifications',
        'reservations',
        'users',
    ]

    for table in tables:
        db.execute(f'DROP TABLE IF EXISTS {table}')

    # Re-enable foreign key constraints
    db.execute('PRAGMA foreign_keys = ON')


def create_tables(db):
    """Create all database tables."""

    # 1. Users (identity + saved contact profile)
    db.execute('''
        CREATE TABLE users (
            uid TEXT PRIMARY KEY,
            email TEXT UNIQUE NOT NULL,
            email_verified INTEGER DEFAULT 0,
            password_hash TEXT NOT NULL,
            full_name TEXT,
            phone TEXT,
            address TEXT,
            active INTEGER DEFAULT 1,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP,
            last_login TEXT
        )
    ''')

    # 2. Reservations
    # List/map fields are JSON text; money fields are whole pesos.
    db.execute('''
        CREATE TABLE reservations (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            user_email TEXT,
            date TEXT,
            date_key TEXT,
            time_label TEXT,
            occasions TEXT DEFAULT '[]',
            foods TEXT DEFAULT '[]',
            pack_name TEXT,
            pack_price TEXT,
            venue TEXT DEFAULT '{}',
            addons TEXT DEFAULT '[]',
            package_price_num INTEGER DEFAULT 0,
            addons_total INTEGER DEFAULT 0,
            downpayment INTEGER DEFAULT 0,
            remaining_balance INTEGER DEFAULT 0,
            total_amount INTEGER DEFAULT 0,
            payment_method TEXT,
            status TEXT NOT NULL DEFAULT 'pending',
            created_at TEXT NOT NULL,
            cancelled_at TEXT,
            updated_at TEXT
        )
    ''')

    # 3. Local notification inbox
    db.execute('''
        CREATE TABLE notifications (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            title TEXT NOT NULL,
            body TEXT NOT NULL,
            data TEXT,
            is_read INTEGER DEFAULT 0,
            created_at TEXT NOT NULL
        )
    ''')


def create_indexes(db):
    """Create performance indexes."""

    # Reservation indexes
    db.execute('CREATE INDEX idx_reservations_user ON reservations(user_id, created_at)')
    db.execute('CREATE INDEX idx_reservations_date_key ON reservations(date_key, status)')

    # Notification indexes
    db.execute('CREATE INDEX idx_notifications_user ON notifications(user_id, is_read)')
