"""SQLAlchemy model for product records."""

from sqlalchemy import Column, Integer, Text

from catalog_api.db.base import Base
from catalog_api.db.types import AttrsJSON


class ProductRecord(Base):
    __tablename__ = "product"

    # Only used to order range listings; never exposed to clients.
    id = Column(Integer, primary_key=True, autoincrement=True)
    sku = Column(Text, unique=True, nullable=False)
    attrs = Column(AttrsJSON, nullable=False)
