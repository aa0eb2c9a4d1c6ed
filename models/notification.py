"""
Local notification inbox.

``notify_now`` is the fire-and-forget "show a notification now" primitive;
notifications are kept per user with a read flag.
"""

import logging

from database import get_db
from utils.datetime_helpers import server_timestamp
from utils.helpers import from_json, to_json

logger = logging.getLogger(__name__)


def notify_now(user_id: str, title: str, body: str, data: dict = None) -> int:
    """
    Show a notification to a user right away.

    Args:
        user_id: Recipient uid
        title: Notification title
        body: Notification body
        data: Optional payload (e.g. {'reservation_id': ...})

    Returns:
        New notification ID
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        INSERT INTO notifications (user_id, title, body, data, is_read, created_at)
        VALUES (?, ?, ?, ?, 0, ?)
    ''', (user_id, title, body, to_json(data) if data else None, server_timestamp()))
    db.commit()

    logger.info(f"[Notification] {user_id}: {title}")
    return cursor.lastrowid


def get_notifications(user_id: str) -> list:
    """Get a user's notifications, newest first."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT * FROM notifications
        WHERE user_id = ?
        ORDER BY created_at DESC, id DESC
    ''', (user_id,))
    notifications = []
    for row in cursor.fetchall():
        item = dict(row)
        item['data'] = from_json(item.get('data'), {})
        item['read'] = bool(item.pop('is_read'))
        notifications.append(item)
    return notifications


def get_unread_count(user_id: str) -> int:
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT COUNT(*) AS unread FROM notifications WHERE user_id = ? AND is_read = 0',
                   (user_id,))
    return cursor.fetchone()['unread']


def mark_as_read(user_id: str, notification_id: int) -> bool:
    db = get_db()
    cursor = db.cursor()
    cursor.execute('UPDATE notifications SET is_read = 1 WHERE id = ? AND user_id = ?',
                   (notification_id, user_id))
    db.commit()
    return cursor.rowcount > 0


def mark_all_as_read(user_id: str) -> int:
    db = get_db()
    cursor = db.cursor()
    cursor.execute('UPDATE notifications SET is_read = 1 WHERE user_id = ? AND is_read = 0',
                   (user_id,))
    db.commit()
    return cursor.rowcount


def clear_notifications(user_id: str) -> int:
    db = get_db()
    cursor = db.cursor()
    cursor.execute('DELETE FROM notifications WHERE user_id = ?', (user_id,))
    db.commit()
    return cursor.rowcount
