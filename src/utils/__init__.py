"""
MassBan - Utils Package
=======================

Helpers used by the entry point.

Available Utilities:
    ErrorHandler: Categorized fatal error reporting
"""

from .error_handler import ErrorContext, ErrorHandler

__all__ = [
    "ErrorContext",
    "ErrorHandler",
]
