"""
Service layer helpers that orchestrate stores and domain logic.
"""

from .availability_service import AvailabilityService, BookingStoreProtocol, WindowStoreProtocol

__all__ = ["AvailabilityService", "BookingStoreProtocol", "WindowStoreProtocol"]
