"""Catalog domain exceptions.

Raised by the Service Layer and the stock-adjusting repository; the API
layer translates them into HTTP responses.
"""

from __future__ import annotations


class CatalogItemNotFound(Exception):
    """The requested catalog item does not exist or has been soft-deleted."""


class CatalogItemUnavailable(Exception):
    """A selected item is flagged unavailable and cannot be ordered."""


class InsufficientStock(Exception):
    """A stock decrement would take an item below zero."""
