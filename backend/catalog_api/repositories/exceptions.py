"""Repository exceptions.

Raised by product repositories; the API layer translates them into error
envelopes.
"""

from __future__ import annotations


class ProductNotFound(Exception):
    """No product exists for the requested SKU."""

    def __init__(self, sku: str) -> None:
        super().__init__(f"Product {sku!r} does not exist")
        self.sku = sku


class RepositoryError(Exception):
    """The store failed to answer a query or to commit a write."""
