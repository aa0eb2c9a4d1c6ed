"""
Booking submission workflow.

Moves a draft through drafting -> reviewing -> submitting -> submitted,
persisting the reservation and running post-commit hooks. Persistence
failures put the workflow back in reviewing with the draft intact.
"""

import logging
import time
from dataclasses import dataclass, field

from .exit_guard import MODAL_SUMMARY, ExitGuard
from .navigation import PAYMENT, RECEIPT, SIGN_IN
from .notification import notify_now
from .pricing import DEFAULT_DOWNPAYMENT_RATIO, calculate_pricing
from .reservation import add_reservation
from .user import merge_user_profile

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

STAGE_DRAFTING = 'drafting'
STAGE_REVIEWING = 'reviewing'
STAGE_SUBMITTING = 'submitting'
STAGE_SUBMITTED = 'submitted'
STAGE_FAILED = 'failed'

PAYMENT_ADVANCE = 'advance'
PAYMENT_COUNTER = 'counter'

# payment path -> (stored payment method, destination after success)
PAYMENT_METHODS = {
    PAYMENT_ADVANCE: ('GCash', PAYMENT),
    PAYMENT_COUNTER: ('Over the Counter', RECEIPT),
}

RESULT_SUBMITTED = 'submitted'
RESULT_FAILED = STAGE_FAILED
RESULT_SIGN_IN_REQUIRED = 'sign_in_required'
RESULT_IN_FLIGHT = 'in_flight'
RESULT_REFUSED = 'refused'

SUBMISSION_FAILED_MESSAGE = 'We could not save your reservation. Please try again.'


@dataclass
class BookingCommitted:
    """Event passed to post-commit hooks."""

    reservation_id: str
    record: dict
    user: object


@dataclass
class SubmissionResult:
    status: str
    reservation_id: str | None = None
    destination: str | None = None
    error: str | None = None
    hook_failures: list = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == RESULT_SUBMITTED

    def to_dict(self) -> dict:
        return {
            'status': self.status,
            'reservation_id': self.reservation_id,
            'destination': self.destination,
            'error': self.error,
        }


# =============================================================================
# RECORD + HOOKS
# =============================================================================

def build_reservation_record(draft, pricing, user, payment_method: str) -> dict:
    """
    Build the persisted reservation record for a draft.

    Args:
        draft: ReservationDraft
        pricing: PricingSummary of the draft
        user: Authenticated user (uid, email)
        payment_method: Stored payment method label

    Returns:
        dict ready for add_reservation
    """
    return {
        'user_id': user.uid,
        'user_email': user.email,
        'date': draft.event_datetime,
        'time_label': draft.time_label,
        'occasions': list(draft.occasions),
        'foods': draft.foods,
        'pack_name': draft.pack.name if draft.pack else None,
        'pack_price': draft.pack.price if draft.pack else None,
        'venue': {'mobile': draft.venue.mobile, 'address': draft.venue.address},
        'addons': [{'name': a.name, 'price': a.price} for a in draft.add_ons.values()],
        'package_price_num': pricing.package_price,
        'addons_total': pricing.add_ons_total,
        'downpayment': pricing.downpayment,
        'remaining_balance': pricing.remaining_balance,
        'total_amount': pricing.total_amount,
        'payment_method': payment_method,
        'status': 'pending',
    }


def merge_profile_hook(event: BookingCommitted) -> None:
    """Save the venue contact info on the user's profile."""
    venue = event.record.get('venue') or {}
    mobile = venue.get('mobile') or None
    address = venue.get('address') or None
    if mobile or address:
        merge_user_profile(event.user.uid, phone=mobile, address=address)


def booking_notification_hook(event: BookingCommitted) -> None:
    """Acknowledge the booking with a local notification."""
    pack_name = event.record.get('pack_name') or 'package'
    notify_now(
        event.user.uid,
        'Reservation Submitted',
        f'Your {pack_name} reservation has been received and is pending confirmation.',
        data={'reservation_id': event.reservation_id},
    )


DEFAULT_HOOKS = (merge_profile_hook, booking_notification_hook)


# =============================================================================
# WORKFLOW
# =============================================================================

class BookingWorkflow:
    """
    Submission state machine for one booking session.

    Args:
        store: SelectionStore owning the draft
        navigator: NavigationHost
        persist: Callable(record) -> reservation id
        hooks: Post-commit hooks, each called with a BookingCommitted event
        downpayment_ratio: Down payment ratio for pricing
        clock: Clock passed to the exit guard
        double_press_window: Double back-press window for the exit guard
    """

    def __init__(self, store, navigator, persist=add_reservation, hooks=DEFAULT_HOOKS,
                 downpayment_ratio: float = DEFAULT_DOWNPAYMENT_RATIO,
                 clock=time.monotonic, double_press_window: float = 1.5):
        self.store = store
        self.navigator = navigator
        self.persist = persist
        self.hooks = list(hooks)
        self.downpayment_ratio = downpayment_ratio

        self.stage = STAGE_DRAFTING
        self.in_flight = False
        self.last_error = None
        self.reservation_id = None

        self.exit_guard = ExitGuard(
            store, navigator,
            on_modal_closed=self._on_modal_closed,
            clock=clock,
            double_press_window=double_press_window,
        )

    @property
    def pricing(self):
        return calculate_pricing(self.store.draft, self.downpayment_ratio)

    # -------------------------------------------------------------------------
    # Review
    # -------------------------------------------------------------------------

    def open_review(self) -> bool:
        """
        Open the summary for review.

        Returns:
            False (refused) when the draft is not submittable
        """
        if self.stage not in (STAGE_DRAFTING, STAGE_REVIEWING):
            return False
        if not self.store.is_submittable:
            return False

        self.stage = STAGE_REVIEWING
        self.last_error = None
        self.exit_guard.open_modal(MODAL_SUMMARY)
        return True

    def close_review(self) -> None:
        self.exit_guard.close_modal(MODAL_SUMMARY, notify=False)
        if self.stage == STAGE_REVIEWING:
            self.stage = STAGE_DRAFTING

    def _on_modal_closed(self, name: str) -> None:
        if name == MODAL_SUMMARY and self.stage == STAGE_REVIEWING:
            self.stage = STAGE_DRAFTING

    # -------------------------------------------------------------------------
    # Submit
    # -------------------------------------------------------------------------

    def submit(self, payment_method: str, user) -> SubmissionResult:
        """
        Submit the reviewed draft.

        Args:
            payment_method: 'advance' or 'counter'
            user: Current user (anonymous users are sent to sign-in)

        Returns:
            SubmissionResult
        """
        if payment_method not in PAYMENT_METHODS:
            raise ValueError(f'Unknown payment method: {payment_method}')

        if self.in_flight:
            return SubmissionResult(RESULT_IN_FLIGHT)

        if user is None or not getattr(user, 'is_authenticated', False):
            self.navigator.push(SIGN_IN)
            return SubmissionResult(RESULT_SIGN_IN_REQUIRED, destination=SIGN_IN)

        if self.stage != STAGE_REVIEWING or not self.store.is_submittable:
            return SubmissionResult(RESULT_REFUSED)

        method_label, route = PAYMENT_METHODS[payment_method]
        record = build_reservation_record(self.store.draft, self.pricing, user, method_label)

        self.exit_guard.close_modal(MODAL_SUMMARY, notify=False)
        self.exit_guard.suspend()
        self.stage = STAGE_SUBMITTING
        self.in_flight = True
        try:
            reservation_id = self.persist(record)
        except Exception as e:
            logger.error(f"[Booking] Submission failed for {user.uid}: {e}", exc_info=True)
            self.stage = STAGE_REVIEWING
            self.last_error = SUBMISSION_FAILED_MESSAGE
            self.exit_guard.resume()
            self.exit_guard.open_modal(MODAL_SUMMARY)
            return SubmissionResult(RESULT_FAILED, error=SUBMISSION_FAILED_MESSAGE)
        finally:
            self.in_flight = False

        self.stage = STAGE_SUBMITTED
        self.reservation_id = reservation_id
        self.last_error = None
        logger.info(f"[Booking] Reservation {reservation_id} submitted by {user.uid} ({method_label})")

        failures = self._run_hooks(BookingCommitted(reservation_id, record, user))

        self.store.reset()
        self.exit_guard.release()
        destination = f'{route}?rid={reservation_id}'
        self.navigator.replace(destination)
        return SubmissionResult(RESULT_SUBMITTED, reservation_id, destination,
                                hook_failures=failures)

    def _run_hooks(self, event: BookingCommitted) -> list:
        failures = []
        for hook in self.hooks:
            try:
                hook(event)
            except Exception:
                name = getattr(hook, '__name__', repr(hook))
                logger.warning(f"[Booking] Post-commit hook {name} failed for "
                               f"{event.reservation_id}", exc_info=True)
                failures.append(name)
        return failures

    def restart(self) -> None:
        """Start a fresh booking (after submission or exit)."""
        self.stage = STAGE_DRAFTING
        self.in_flight = False
        self.last_error = None
        self.reservation_id = None
        self.exit_guard.rearm()

    def to_dict(self) -> dict:
        return {
            'stage': self.stage,
            'in_flight': self.in_flight,
            'error': self.last_error,
            'reservation_id': self.reservation_id,
            'can_review': self.store.is_submittable,
        }
