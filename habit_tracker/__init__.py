"""
habit-tracker - local habit tracking with streak and success-rate statistics.
"""

__version__ = "1.0.0"
