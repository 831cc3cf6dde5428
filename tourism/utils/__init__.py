"""Utility functions and helpers."""

from .exceptions import (
    raise_not_found,
    raise_too_many_requests,
    raise_unauthorized,
)

__all__ = [
    "raise_not_found",
    "raise_too_many_requests",
    "raise_unauthorized",
]
