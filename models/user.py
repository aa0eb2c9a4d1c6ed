"""
User model and data access functions.
Handles customer identity, saved contact profile, and Flask-Login integration.
"""

from uuid import uuid4

from werkzeug.security import generate_password_hash, check_password_hash
from database import get_db


class User:
    """
    User class for Flask-Login integration.
    Exposes the identity fields the booking flow reads: uid, email, email_verified.
    """

    def __init__(self, user_dict):
        """
        Initialize User from database row.

        Args:
            user_dict: Dictionary with user data from database
        """
        self.uid = user_dict['uid']
        self.email = user_dict['email']
        self.email_verified = bool(user_dict.get('email_verified'))
        self.full_name = user_dict.get('full_name')
        self.phone = user_dict.get('phone')
        self.address = user_dict.get('address')
        self.active = user_dict.get('active', 1)

    @property
    def id(self):
        return self.uid

    @property
    def is_authenticated(self):
        """Required by Flask-Login."""
        return True

    @property
    def is_active(self):
        """Required by Flask-Login."""
        return self.active == 1

    @property
    def is_anonymous(self):
        """Required by Flask-Login."""
        return False

    def get_id(self):
        """Required by Flask-Login."""
        return str(self.uid)

    def to_dict(self) -> dict:
        return {
            'uid': self.uid,
            'email': self.email,
            'email_verified': self.email_verified,
            'full_name': self.full_name,
            'phone': self.phone,
            'address': self.address,
        }


def get_user_by_uid(uid: str) -> dict:
    """
    Get user by uid.

    Returns:
        User dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM users WHERE uid = ?', (uid,))
    row = cursor.fetchone()
    return dict(row) if row else None


def get_user_by_email(email: str) -> dict:
    """
    Get user by email.

    Returns:
        User dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM users WHERE lower(email) = lower(?)', (email,))
    row = cursor.fetchone()
    return dict(row) if row else None


def create_user(email: str, password: str, full_name: str = None,
                email_verified: bool = False, uid: str = None) -> str:
    """
    Create new user with hashed password.

    Args:
        email: Unique email
        password: Plain text password (will be hashed)
        full_name: User's full name
        email_verified: Whether the email is already verified
        uid: Optional explicit uid (generated otherwise)

    Returns:
        New user uid

    Raises:
        sqlite3.IntegrityError if the email already exists
    """
    db = get_db()
    uid = uid or uuid4().hex
    cursor = db.cursor()
    cursor.execute('''
        INSERT INTO users (uid, email, email_verified, password_hash, full_name)
        VALUES (?, ?, ?, ?, ?)
    ''', (uid, email, int(email_verified), generate_password_hash(password), full_name))

    db.commit()
    return uid


def merge_user_profile(uid: str, phone: str = None, address: str = None) -> bool:
    """
    Merge contact details into the user's profile.

    Only the provided (non-empty) fields are written; others keep their value.

    Args:
        uid: User uid
        phone: Mobile number
        address: Address

    Returns:
        True if the profile was updated
    """
    updates = {}
    if phone:
        updates['phone'] = phone
    if address:
        updates['address'] = address
    if not updates:
        return False

    assignments = ', '.join(f'{field} = ?' for field in updates)
    db = get_db()
    cursor = db.cursor()
    cursor.execute(
        f'UPDATE users SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE uid = ?',
        list(updates.values()) + [uid]
    )
    db.commit()
    return cursor.rowcount > 0


def update_last_login(uid: str) -> None:
    """Update last login timestamp."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        UPDATE users SET last_login = CURRENT_TIMESTAMP
        WHERE uid = ?
    ''', (uid,))
    db.commit()


def check_password(user_dict: dict, password: str) -> bool:
    """
    Verify password against stored hash.

    Args:
        user_dict: User dictionary with password_hash
        password: Plain text password to check

    Returns:
        True if password matches
    """
    return check_password_hash(user_dict['password_hash'], password)
