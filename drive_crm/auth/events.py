"""
Auth event channel.

Consumers register a handler to hear about sign-in, sign-out
and token refresh. subscribe() returns a Subscription whose
unsubscribe() removes the handler again.
"""

import enum
from typing import Callable

from drive_crm.logging_config import get_logger

log = get_logger("auth.events")


class AuthEvent(str, enum.Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"


AuthEventHandler = Callable[[AuthEvent, object], None]


class Subscription:

    def __init__(self, channel: "AuthEventChannel", handler: AuthEventHandler):
        self._channel = channel
        self.handler = handler
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._channel._remove(self)
            self.active = False


class AuthEventChannel:

    def __init__(self):
        self._subscriptions: list[Subscription] = []

    def subscribe(self, handler: AuthEventHandler) -> Subscription:
        subscription = Subscription(self, handler)
        self._subscriptions.append(subscription)
        return subscription

    def publish(self, event: AuthEvent, identity=None) -> None:
        """
        Deliver an event to every current subscriber.

        A failing handler is logged and does not stop delivery to
        the others.
        """
        for subscription in list(self._subscriptions):
            try:
                subscription.handler(event, identity)
            except Exception:
                log.exception("Auth event handler failed for %s", event.value)

    def clear(self) -> None:
        """Drop every subscription."""
        for subscription in list(self._subscriptions):
            subscription.unsubscribe()

    def _remove(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def __len__(self) -> int:
        return len(self._subscriptions)
