"""
Market Pulse: crypto market signal scoring for a static dashboard.
"""

__version__ = "2.0.0"
