from abc import ABC, abstractmethod
from typing import List

from catalog_api.api.schemas.product import Product


class ProductOps(ABC):
    """Operations for persisting products to the underlying storage."""

    @abstractmethod
    def lookup(self, sku: str) -> Product:
        """Return the product for ``sku`` or raise ProductNotFound."""

    @abstractmethod
    def list_products(self, lo: int, hi: int) -> List[Product]:
        """Return at most ``hi`` products whose row sequence number is >= ``lo``."""

    @abstractmethod
    def store(self, sku: str, product: Product) -> None:
        """Insert the product, or replace the attributes of an existing SKU."""
