"""
Navigation host used by the booking flow.

The booking workflow and the exit guard only ever talk to a host through
``replace``, ``push`` and ``go_back``. Over HTTP the host records what the
client should do next; the API hands those events back in its response.
"""

HOME = '/home'
SIGN_IN = '/signin'
PAYMENT = '/payment'
RECEIPT = '/receipt'


class NavigationHost:
    """Interface of a navigation host."""

    def replace(self, route: str) -> None:
        raise NotImplementedError

    def push(self, route: str) -> None:
        raise NotImplementedError

    def go_back(self) -> None:
        raise NotImplementedError


class ResponseNavigator(NavigationHost):
    """
    Navigation host that queues instructions for the client.

    Events are plain dicts ({'action': 'replace', 'route': '/home'}) and are
    drained once per response with ``drain``.
    """

    def __init__(self):
        self.events = []

    def replace(self, route: str) -> None:
        self.events.append({'action': 'replace', 'route': route})

    def push(self, route: str) -> None:
        self.events.append({'action': 'push', 'route': route})

    def go_back(self) -> None:
        self.events.append({'action': 'back'})

    def drain(self) -> list:
        events, self.events = self.events, []
        return events

    @property
    def last_route(self) -> str | None:
        for event in reversed(self.events):
            if 'route' in event:
                return event['route']
        return None
