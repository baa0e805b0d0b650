"""
Services that derive state from stored records.
"""

from fintrack.services import portfolio, reminders, summary

__all__ = ["portfolio", "reminders", "summary"]
