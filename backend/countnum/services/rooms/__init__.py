"""Room domain services: the room store, input validators and expiry.

This package contains the pure domain logic imported by HTTP routes,
keeping transport concerns separated from the room/score state machine.
"""
from .store import DEFAULT_MAX_AGE_MS, TRANSFER_WINDOW_MS, RoomStore

__all__ = ['DEFAULT_MAX_AGE_MS', 'TRANSFER_WINDOW_MS', 'RoomStore']
