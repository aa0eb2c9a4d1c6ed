"""
Booking blueprint initialization.
Assembles the booking API from its route modules:
- routes/catalog.py - Occasions, menu, packages, availability
- routes/draft.py - The caller's booking session (draft, review, submit, back)
- routes/reservations.py - Reservation list, schedule, details, cancel/delete
- routes/notifications.py - Notification inbox
"""

from flask import Blueprint

# Create the booking API blueprint
booking_bp = Blueprint('booking', __name__)

# Import and register routes from submodules
from blueprints.booking.routes import catalog
from blueprints.booking.routes import draft
from blueprints.booking.routes import reservations
from blueprints.booking.routes import notifications

# Register all route functions on the blueprint
catalog.register_routes(booking_bp)
draft.register_routes(booking_bp)
reservations.register_routes(booking_bp)
notifications.register_routes(booking_bp)
