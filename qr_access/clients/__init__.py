"""Expose constructed client wrappers."""

from .event_log import EventLogClient, EventLogError
from .qr_renderer import QRCodeRenderer
from .solapi import MessageDeliveryError, SolapiMessagingClient

__all__ = [
    "EventLogClient",
    "EventLogError",
    "MessageDeliveryError",
    "QRCodeRenderer",
    "SolapiMessagingClient",
]
