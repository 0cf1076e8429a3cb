"""
Adapters layer - Store implementations for windows and bookings.
"""

from .memory_store import InMemoryBookingStore, InMemoryWindowStore, load_fixture

__all__ = ["InMemoryBookingStore", "InMemoryWindowStore", "load_fixture"]
