"""
Middleware package for the Rentals API.
"""

from .validation import ValidationMiddleware, RequestTooLargeError

__all__ = [
    "ValidationMiddleware",
    "RequestTooLargeError"
]
