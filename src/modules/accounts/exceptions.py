"""Account domain exceptions.

Raised by the Service Layer; views translate them into HTTP responses.
"""

from __future__ import annotations


class UserAlreadyExists(Exception):
    """A user with the same username or email already exists."""


class UserNotFound(Exception):
    """The requested user does not exist."""
