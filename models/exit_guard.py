"""
Guarded exit for the booking flow.

While a booking is being drafted or reviewed every back action is
intercepted: an open modal is closed first, then a confirmation prompt is
required before the draft is discarded and the user is sent home.
"""

import logging
import time

from .navigation import HOME

logger = logging.getLogger(__name__)

# Back sources
BACK_HARDWARE = 'hardware'
BACK_GESTURE = 'gesture'
BACK_PROGRAMMATIC = 'programmatic'
BACK_SOURCES = (BACK_HARDWARE, BACK_GESTURE, BACK_PROGRAMMATIC)

# Modals
MODAL_CANCEL_CONFIRMATION = 'cancel_confirmation'
MODAL_PACKAGE_INCLUSIONS = 'package_inclusions'
MODAL_SUMMARY = 'summary'
MODALS = (MODAL_CANCEL_CONFIRMATION, MODAL_PACKAGE_INCLUSIONS, MODAL_SUMMARY)

# Guard states
GUARD_ACTIVE = 'active'
GUARD_SUSPENDED = 'suspended'
GUARD_RELEASED = 'released'

# Outcomes of a back action
OUTCOME_MODAL_CLOSED = 'modal_closed'
OUTCOME_TOAST = 'toast'
OUTCOME_PROMPT = 'prompt'
OUTCOME_PROMPT_DISMISSED = 'prompt_dismissed'
OUTCOME_BLOCKED = 'blocked'
OUTCOME_PASSED_THROUGH = 'passed_through'

DOUBLE_BACK_TOAST = 'Press back again to cancel'
EXIT_PROMPT = {
    'title': 'Cancel Reservation?',
    'message': 'All your selections will be lost. Are you sure you want to cancel?',
}


class ExitGuard:
    """
    Back-action interceptor for one booking session.

    Args:
        store: SelectionStore whose draft is discarded on confirmed exit
        navigator: NavigationHost
        on_modal_closed: Called with the modal name whenever a modal closes
        clock: Monotonic clock used for double-press detection
        double_press_window: Seconds within which a second hardware back
            press opens the prompt directly
    """

    def __init__(self, store, navigator, on_modal_closed=None,
                 clock=time.monotonic, double_press_window: float = 1.5):
        self.store = store
        self.navigator = navigator
        self.on_modal_closed = on_modal_closed
        self.clock = clock
        self.double_press_window = double_press_window

        self.state = GUARD_ACTIVE
        self.open_modals = []
        self.prompt_open = False
        self._last_hardware_back = None

    @property
    def is_active(self) -> bool:
        return self.state == GUARD_ACTIVE

    # -------------------------------------------------------------------------
    # Modals
    # -------------------------------------------------------------------------

    def open_modal(self, name: str) -> None:
        if name not in MODALS:
            raise ValueError(f'Unknown modal: {name}')
        if name not in self.open_modals:
            self.open_modals.append(name)

    def close_modal(self, name: str, notify: bool = True) -> bool:
        if name not in self.open_modals:
            return False
        self.open_modals.remove(name)
        if notify and self.on_modal_closed:
            self.on_modal_closed(name)
        return True

    def is_modal_open(self, name: str) -> bool:
        return name in self.open_modals

    # -------------------------------------------------------------------------
    # Back handling
    # -------------------------------------------------------------------------

    def handle_back(self, source: str = BACK_GESTURE) -> str:
        """
        Handle one back action.

        Args:
            source: 'hardware', 'gesture' or 'programmatic'

        Returns:
            Outcome constant (OUTCOME_*)
        """
        if source not in BACK_SOURCES:
            raise ValueError(f'Unknown back source: {source}')

        if self.state == GUARD_RELEASED:
            self.navigator.go_back()
            return OUTCOME_PASSED_THROUGH

        if self.state == GUARD_SUSPENDED:
            return OUTCOME_BLOCKED

        if self.prompt_open:
            self.prompt_open = False
            return OUTCOME_PROMPT_DISMISSED

        if self.open_modals:
            self.close_modal(self.open_modals[-1])
            return OUTCOME_MODAL_CLOSED

        if source == BACK_HARDWARE:
            now = self.clock()
            last = self._last_hardware_back
            self._last_hardware_back = now
            if last is None or now - last > self.double_press_window:
                return OUTCOME_TOAST

        self.request_exit()
        return OUTCOME_PROMPT

    def request_exit(self) -> bool:
        """Open the confirmation prompt (the header cancel button does this directly)."""
        if not self.is_active:
            return False
        self.prompt_open = True
        return True

    def dismiss_prompt(self) -> None:
        self.prompt_open = False

    def confirm_exit(self) -> bool:
        """
        Discard the draft and leave the booking flow.

        Returns:
            False when the guard is not active (nothing to confirm)
        """
        if not self.is_active:
            return False

        self.prompt_open = False
        for name in list(self.open_modals):
            self.close_modal(name)
        self.store.reset()
        self.release()
        self.navigator.replace(HOME)
        logger.debug('[Booking] Draft discarded on exit')
        return True

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    def suspend(self) -> None:
        """Block back actions while a submission is in flight."""
        if self.state == GUARD_ACTIVE:
            self.state = GUARD_SUSPENDED

    def resume(self) -> None:
        if self.state == GUARD_SUSPENDED:
            self.state = GUARD_ACTIVE

    def release(self) -> None:
        """Stop intercepting; later back actions pass through to the host."""
        self.state = GUARD_RELEASED
        self.prompt_open = False
        self._last_hardware_back = None

    def rearm(self) -> None:
        self.state = GUARD_ACTIVE
        self.open_modals = []
        self.prompt_open = False
        self._last_hardware_back = None

    def to_dict(self) -> dict:
        return {
            'state': self.state,
            'open_modals': list(self.open_modals),
            'prompt_open': self.prompt_open,
            'prompt': EXIT_PROMPT if self.prompt_open else None,
        }
