"""Protocols separating the construction pipeline from its collaborators."""

from __future__ import annotations

from .locator import ErrorLocatorPort
from .queue import Delivery, QueuePort
from .time import ClockPort, IdProvider
from .transport import TransportPort

__all__ = [
    "ClockPort",
    "Delivery",
    "ErrorLocatorPort",
    "IdProvider",
    "QueuePort",
    "TransportPort",
]
