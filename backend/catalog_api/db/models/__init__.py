"""Database models package."""
from catalog_api.db.models.product import ProductRecord

__all__ = ["ProductRecord"]
