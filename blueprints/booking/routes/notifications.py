"""
Notification inbox API routes.
"""

from flask_login import login_required, current_user

from models.notification import (
    clear_notifications,
    get_notifications,
    get_unread_count,
    mark_all_as_read,
    mark_as_read,
)
from utils.api_response import api_success, api_error
from utils.messages import MESSAGES


def register_routes(bp):
    """Register notification API routes on the blueprint."""

    @bp.route('/notifications')
    @login_required
    def notification_list():
        """The user's notifications, newest first, with the unread count."""
        return api_success(data={
            'notifications': get_notifications(current_user.uid),
            'unread_count': get_unread_count(current_user.uid),
        })

    @bp.route('/notifications/<int:notification_id>/read', methods=['POST'])
    @login_required
    def notification_read(notification_id):
        if not mark_as_read(current_user.uid, notification_id):
            return api_error(MESSAGES['not_found'], status=404)
        return api_success(data={'unread_count': get_unread_count(current_user.uid)})

    @bp.route('/notifications/read-all', methods=['POST'])
    @login_required
    def notification_read_all():
        updated = mark_all_as_read(current_user.uid)
        return api_success(data={'updated': updated, 'unread_count': 0},
                           message=MESSAGES['notifications_read'])

    @bp.route('/notifications', methods=['DELETE'])
    @login_required
    def notification_clear():
        deleted = clear_notifications(current_user.uid)
        return api_success(data={'deleted': deleted}, message=MESSAGES['notifications_cleared'])
