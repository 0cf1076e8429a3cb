"""
slotengine - recurring availability windows to bookable time slots.
"""

__version__ = "0.1.0"
