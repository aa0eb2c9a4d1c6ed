"""
Tests for the JSON API: auth, catalog, booking flow and reservation lifecycle.
"""

from datetime import timedelta

import pytest

from utils.datetime_helpers import get_today


def event_day(days=5):
    return (get_today() + timedelta(days=days)).isoformat()


def fill_draft(client, day=None):
    """Build a submittable draft through the API."""
    day = day or event_day()
    assert client.post('/api/booking/date', json={'date': day}).status_code == 200
    assert client.post('/api/booking/time', json={'time_label': '4:00 PM'}).status_code == 200
    assert client.post('/api/booking/occasion', json={'occasion': 'Wedding'}).status_code == 200
    assert client.post('/api/booking/package', json={'name': '100 Pax'}).status_code == 200
    response = client.post('/api/booking/venue', json={
        'mobile': '09171234567',
        'address': '12 Mabini St',
    })
    assert response.get_json()['data']['is_submittable'] is True
    return day


def submit(client, payment_method='advance'):
    assert client.post('/api/booking/review').status_code == 200
    return client.post('/api/booking/confirm', json={'payment_method': payment_method})


class TestAuth:
    """Tests for auth routes."""

    def test_login_success(self, client):
        response = client.post('/auth/login', json={
            'email': 'demo@ezekielcatering.com',
            'password': 'demo1234',
        })
        data = response.get_json()
        assert response.status_code == 200
        assert data['data']['uid'] == 'demo-user'

    def test_login_wrong_password(self, client):
        response = client.post('/auth/login', json={
            'email': 'demo@ezekielcatering.com',
            'password': 'wrong',
        })
        assert response.status_code == 401
        assert response.get_json()['success'] is False

    def test_login_form_validation(self, client):
        response = client.post('/auth/login', json={'email': 'not-an-email', 'password': 'x'})
        assert response.status_code == 400

    def test_me_requires_login(self, client):
        response = client.get('/auth/me')
        assert response.status_code == 401
        assert response.get_json()['redirect'] == '/signin'

    def test_logout(self, authenticated_client):
        assert authenticated_client.post('/auth/logout').status_code == 200
        assert authenticated_client.get('/auth/me').status_code == 401


class TestCatalogRoutes:
    """Tests for catalog and availability routes."""

    def test_catalog(self, client):
        data = client.get('/api/catalog').get_json()['data']
        assert 'Wedding' in data['occasions']

    def test_packages(self, client):
        data = client.get('/api/catalog/packages?occasion=Wedding').get_json()
        assert data['packages_empty'] is False
        assert {'name': '100 Pax', 'price': '₱35,000', 'amount': 35000} in data['data']['packages']

    def test_packages_empty(self, client):
        data = client.get('/api/catalog/packages?occasion=House Blessing').get_json()
        assert data['packages_empty'] is True
        assert data['message'] == 'No packages available for this occasion'

    def test_packages_unknown_occasion(self, client):
        assert client.get('/api/catalog/packages?occasion=Funeral').status_code == 400

    def test_availability_marks_past_days(self, client):
        data = client.get('/api/availability?month_offset=0').get_json()['data']
        today = get_today()
        for day in data['days']:
            if day['date'] < today.isoformat():
                assert day['disabled'] is True

    def test_availability_offset_is_clamped(self, client):
        assert client.get('/api/availability?month_offset=99').get_json()['data']['month_offset'] == 12
        assert client.get('/api/availability?month_offset=x').status_code == 400


class TestBookingFlow:
    """Tests for the booking session routes."""

    def test_anonymous_can_draft(self, client):
        data = client.get('/api/booking').get_json()
        assert data['success'] is True
        assert data['data']['workflow']['stage'] == 'drafting'

    def test_review_refused_until_complete(self, authenticated_client):
        response = authenticated_client.post('/api/booking/review')
        assert response.status_code == 409

    def test_submit_advance(self, authenticated_client):
        day = fill_draft(authenticated_client)
        response = submit(authenticated_client, 'advance')
        data = response.get_json()

        assert response.status_code == 201
        assert data['destination'] == f"/payment?rid={data['reservation_id']}"
        assert {'action': 'replace', 'route': data['destination']} in data['navigation']
        assert data['data']['draft']['date'] is None

        listing = authenticated_client.get('/api/reservations').get_json()['data']
        assert [r['id'] for r in listing['reservations']] == [data['reservation_id']]
        assert day in listing['marked_dates']

        # A fresh session starts after submission
        state = authenticated_client.get('/api/booking').get_json()['data']
        assert state['workflow']['stage'] == 'drafting'

    def test_submit_counter_goes_to_receipt(self, authenticated_client):
        fill_draft(authenticated_client)
        data = submit(authenticated_client, 'counter').get_json()
        assert data['destination'].startswith('/receipt?rid=')

        receipt = authenticated_client.get(f"/api/reservations/{data['reservation_id']}/receipt")
        assert receipt.get_json()['data']['payment_method'] == 'Over the Counter'

    def test_submitted_date_becomes_unavailable(self, authenticated_client):
        day = fill_draft(authenticated_client)
        submit(authenticated_client)

        response = authenticated_client.post('/api/booking/date', json={'date': day})
        assert response.status_code == 409

    def test_anonymous_submit_redirects_and_keeps_draft(self, client):
        fill_draft(client)
        response = submit(client)
        data = response.get_json()

        assert response.status_code == 401
        assert data['redirect'] == '/signin'
        assert {'action': 'push', 'route': '/signin'} in data['navigation']

        client.post('/auth/login', json={'email': 'demo@ezekielcatering.com', 'password': 'demo1234'})
        state = client.get('/api/booking').get_json()['data']
        assert state['is_submittable'] is True
        assert state['workflow']['stage'] == 'reviewing'

    def test_invalid_inputs(self, authenticated_client):
        assert authenticated_client.post('/api/booking/date', json={}).status_code == 400
        assert authenticated_client.post('/api/booking/date', json={'date': '12/01/2025'}).status_code == 400
        assert authenticated_client.post('/api/booking/occasion', json={'occasion': 'Funeral'}).status_code == 400
        assert authenticated_client.post('/api/booking/food', json={'category_id': 'x'}).status_code == 400
        assert authenticated_client.post('/api/booking/package', json={'name': '100 Pax'}).status_code == 400
        assert authenticated_client.post('/api/booking/confirm', json={'payment_method': 'cash'}).status_code == 400

    def test_food_exclusivity(self, authenticated_client):
        authenticated_client.post('/api/booking/food', json={'category_id': 1, 'name': 'Beef Steak'})
        response = authenticated_client.post('/api/booking/food', json={'category_id': 2, 'name': 'Pork Adobo'})
        assert response.get_json()['data']['draft']['foods'] == ['Pork Adobo']

    def test_pricing_follows_draft(self, authenticated_client):
        fill_draft(authenticated_client)
        response = authenticated_client.post('/api/booking/add-on', json={'name': 'Smoke Machine'})
        pricing = response.get_json()['data']['pricing']

        assert pricing['package_price'] == 35000
        assert pricing['downpayment'] == 17500
        assert pricing['total_amount'] == 35350


class TestGuardedExitRoutes:
    """Tests for back handling over the API."""

    def test_back_back_confirm(self, authenticated_client):
        fill_draft(authenticated_client)
        authenticated_client.post('/api/booking/review')

        first = authenticated_client.post('/api/booking/back', json={'source': 'gesture'}).get_json()
        assert first['outcome'] == 'modal_closed'
        assert first['navigation'] == []
        assert first['data']['is_submittable'] is True

        second = authenticated_client.post('/api/booking/back', json={'source': 'gesture'}).get_json()
        assert second['outcome'] == 'prompt'
        assert second['data']['exit_guard']['prompt']['title'] == 'Cancel Reservation?'

        confirmed = authenticated_client.post('/api/booking/exit/confirm').get_json()
        assert confirmed['navigation'] == [{'action': 'replace', 'route': '/home'}]
        assert confirmed['data']['draft']['date'] is None

    def test_hardware_back_shows_toast(self, authenticated_client):
        data = authenticated_client.post('/api/booking/back', json={'source': 'hardware'}).get_json()
        assert data['outcome'] == 'toast'
        assert data['toast'] == 'Press back again to cancel'

    def test_dismiss_prompt(self, authenticated_client):
        authenticated_client.post('/api/booking/exit')
        data = authenticated_client.post('/api/booking/exit/dismiss').get_json()
        assert data['data']['exit_guard']['prompt_open'] is False

    def test_inclusions_modal(self, authenticated_client):
        data = authenticated_client.post('/api/booking/modal', json={
            'name': 'package_inclusions', 'open': True,
        }).get_json()
        assert data['data']['exit_guard']['open_modals'] == ['package_inclusions']

        back = authenticated_client.post('/api/booking/back', json={'source': 'hardware'}).get_json()
        assert back['outcome'] == 'modal_closed'


class TestReservationRoutes:
    """Tests for reservation lifecycle routes."""

    def test_cancel_then_delete(self, authenticated_client, make_reservation):
        reservation_id = make_reservation()

        response = authenticated_client.delete(f'/api/reservations/{reservation_id}')
        assert response.status_code == 409

        response = authenticated_client.post(f'/api/reservations/{reservation_id}/cancel')
        assert response.status_code == 200
        assert response.get_json()['data']['status'] == 'Cancelled'

        response = authenticated_client.post(f'/api/reservations/{reservation_id}/cancel')
        assert response.status_code == 409

        response = authenticated_client.delete(f'/api/reservations/{reservation_id}')
        assert response.status_code == 200
        assert authenticated_client.get(f'/api/reservations/{reservation_id}').status_code == 404

    def test_other_users_reservation(self, authenticated_client, make_reservation):
        reservation_id = make_reservation(user_id='someone-else')
        assert authenticated_client.get(f'/api/reservations/{reservation_id}').status_code == 403
        assert authenticated_client.post(f'/api/reservations/{reservation_id}/cancel').status_code == 403

    def test_details_and_calendar_event(self, authenticated_client, make_reservation):
        reservation_id = make_reservation(date='2030-06-15T16:00:00')

        details = authenticated_client.get(f'/api/reservations/{reservation_id}').get_json()['data']
        assert details['details']['date'] == 'June 15, 2030'

        event = authenticated_client.get(f'/api/reservations/{reservation_id}/calendar-event').get_json()['data']
        assert event['start'] == '2030-06-15T16:00:00'
        assert event['end'] == '2030-06-15T18:00:00'

    def test_payment(self, authenticated_client, make_reservation):
        reservation_id = make_reservation()
        response = authenticated_client.post(f'/api/reservations/{reservation_id}/payment', json={'paid': True})
        assert response.get_json()['data']['status_kind'] == 'confirmed'
        assert authenticated_client.post(f'/api/reservations/{reservation_id}/payment',
                                         json={'paid': 'yes'}).status_code == 400

    def test_schedule(self, authenticated_client, make_reservation):
        make_reservation(date=event_day(0))
        data = authenticated_client.get(
            f'/api/reservations/schedule?month_offset=0&date={event_day(0)}'
        ).get_json()['data']

        assert len(data['reservations']) == 1
        assert any(d['has_reservation'] for d in data['days'])

    def test_list_requires_login(self, client):
        assert client.get('/api/reservations').status_code == 401


class TestNotificationRoutes:
    """Tests for the notification inbox."""

    def test_booking_creates_notification(self, authenticated_client):
        fill_draft(authenticated_client)
        submit(authenticated_client)

        data = authenticated_client.get('/api/notifications').get_json()['data']
        assert data['unread_count'] == 1
        notification_id = data['notifications'][0]['id']

        response = authenticated_client.post(f'/api/notifications/{notification_id}/read')
        assert response.get_json()['data']['unread_count'] == 0

    def test_clear(self, authenticated_client):
        from models.notification import notify_now

        notify_now('demo-user', 'Hello', 'World')
        data = authenticated_client.delete('/api/notifications').get_json()
        assert data['data']['deleted'] == 1


@pytest.mark.parametrize('path', ['/missing', '/api/reservations/x/unknown'])
def test_not_found_is_json(client, path):
    response = client.get(path)
    assert response.status_code == 404
    assert response.get_json()['success'] is False
