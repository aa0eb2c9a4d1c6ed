"""
Centralized UI messages.
All user-facing text for consistency.
"""

MESSAGES = {
    # Success messages
    'login_success': 'Welcome {name}',
    'logout_success': 'You have been signed out',
    'reservation_submitted': 'Reservation submitted',
    'reservation_cancelled': 'Reservation cancelled',
    'reservation_deleted': 'Reservation deleted',
    'payment_recorded': 'Payment status updated',
    'notifications_read': 'Notifications marked as read',
    'notifications_cleared': 'Notifications cleared',
    'import_success': 'Import finished: {imported} reservations imported, {skipped} skipped',

    # Error messages
    'invalid_credentials': 'Invalid email or password',
    'sign_in_required': 'Please sign in to continue',
    'reservation_not_found': 'Reservation not found',
    'reservation_forbidden': 'This reservation belongs to another account',
    'already_cancelled': 'This reservation is already cancelled',
    'delete_requires_cancel': 'Only cancelled reservations can be deleted',
    'date_required': 'A date is required',
    'invalid_date': 'Invalid date format (expected YYYY-MM-DD)',
    'date_unavailable': 'That date is not available',
    'review_refused': 'Complete the date, occasion, package and venue details first',
    'submit_refused': 'Open the summary before confirming',
    'submit_in_flight': 'Your reservation is already being submitted',
    'no_packages': 'No packages available for this occasion',
    'invalid_payment_method': 'Unknown payment method',
    'invalid_request': 'Invalid request data',
    'not_found': 'Resource not found',
    'server_error': 'Something went wrong. Please try again.',

    # Info messages
    'press_back_again': 'Press back again to cancel',
    'confirm_exit_title': 'Cancel Reservation?',
    'confirm_exit': 'All your selections will be lost. Are you sure you want to cancel?',
    'confirm_cancel': 'Are you sure you want to cancel this reservation?',
    'confirm_delete': 'Delete this cancelled reservation permanently?',

    # Payment methods
    'payment_advance': 'GCash',
    'payment_counter': 'Over the Counter',

    # Reservation states
    'state_pending': 'Pending',
    'state_confirmed': 'Confirmed',
    'state_cancelled': 'Cancelled',
}


def get_message(key: str, **kwargs) -> str:
    """
    Get message with optional formatting.

    Args:
        key: Message key
        **kwargs: Format parameters

    Returns:
        Formatted message or key if not found
    """
    message = MESSAGES.get(key, key)
    if kwargs:
        return message.format(**kwargs)
    return message
