"""Services for API business logic."""

from . import alerts

__all__ = [
    'alerts',
]
