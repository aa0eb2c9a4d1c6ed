"""
Catalog and availability API routes.
"""

from flask import current_app, request

from extensions import booking_runtime
from models.availability import clamp_month_offset
from models.catalog import catalog_as_dict, get_inclusions, get_package_options, validate_occasion
from utils.api_response import api_success, api_error
from utils.datetime_helpers import add_months, get_today
from utils.messages import MESSAGES
from utils.validators import parse_int_param


def register_routes(bp):
    """Register catalog API routes on the blueprint."""

    @bp.route('/catalog')
    def catalog():
        """Occasions, time slots, menu, add-ons and package inclusions."""
        return api_success(data=catalog_as_dict())

    @bp.route('/catalog/packages')
    def packages():
        """
        Package tiers for an occasion.

        Query params:
            occasion: Occasion name
        """
        occasion = request.args.get('occasion', '')
        try:
            validate_occasion(occasion)
        except ValueError as e:
            return api_error(str(e), status=400)

        options = get_package_options(occasion)
        return api_success(
            data={
                'occasion': occasion,
                'packages': [{'name': o.name, 'price': o.price, 'amount': o.amount} for o in options],
                'inclusions': get_inclusions(),
            },
            message=None if options else MESSAGES['no_packages'],
            packages_empty=not options,
        )

    @bp.route('/availability')
    def availability():
        """
        Booking calendar for a month.

        Query params:
            month_offset: Months from the current month (0..BOOKING_MAX_MONTH_OFFSET)
        """
        offset = parse_int_param(request.args.get('month_offset'))
        if offset is None:
            return api_error(MESSAGES['invalid_request'], status=400)

        offset = clamp_month_offset(offset, 0, current_app.config['BOOKING_MAX_MONTH_OFFSET'])
        today = get_today()
        days = booking_runtime.state.availability.month_dates(offset, today)

        return api_success(data={
            'month_offset': offset,
            'month_label': add_months(today, offset).strftime('%B %Y'),
            'today': today.isoformat(),
            'days': [day.to_dict() for day in days],
        })
