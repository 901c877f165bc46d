"""Chartwise: CSV analytics dashboard with AI insights."""
__version__ = "0.2.0"
