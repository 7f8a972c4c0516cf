"""SQL-backed product repository."""

from __future__ import annotations

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catalog_api.api.schemas.product import Product
from catalog_api.db.models.product import ProductRecord
from catalog_api.db.session import make_session_factory
from catalog_api.repositories.exceptions import ProductNotFound, RepositoryError
from catalog_api.repositories.interfaces import ProductOps
from catalog_api.utils.attrs_codec import AttrsCodecError

logger = logging.getLogger(__name__)

# Dialect-specific INSERT constructs supporting ON CONFLICT DO UPDATE
UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class SqlProductRepository(ProductOps):
    def __init__(self, engine: Engine):
        self.engine = engine
        self.session_factory = make_session_factory(engine)

    def lookup(self, sku: str) -> Product:
        session: Session = self.session_factory()
        try:
            row = session.execute(
                select(ProductRecord.sku, ProductRecord.attrs).where(
                    ProductRecord.sku == sku
                )
            ).one_or_none()
        except (SQLAlchemyError, AttrsCodecError) as e:
            logger.error(f"Database error looking up product {sku!r}: {e}", exc_info=True)
            raise RepositoryError("Failed to look up product") from e
        finally:
            session.close()

        if row is None:
            raise ProductNotFound(sku)
        return Product(sku=row.sku, attrs=row.attrs)

    def list_products(self, lo: int, hi: int) -> List[Product]:
        session: Session = self.session_factory()
        try:
            rows = session.execute(
                select(ProductRecord.sku, ProductRecord.attrs)
                .where(ProductRecord.id >= lo)
                .order_by(ProductRecord.id)
                .limit(max(hi, 0))
            ).all()
        except (SQLAlchemyError, AttrsCodecError) as e:
            logger.error(f"Database error listing products [{lo}, {hi}]: {e}", exc_info=True)
            raise RepositoryError("Failed to list products") from e
        finally:
            session.close()

        return [Product(sku=row.sku, attrs=row.attrs) for row in rows]

    def store(self, sku: str, product: Product) -> None:
        insert = UPSERT_INSERTS.get(self.engine.dialect.name)
        if insert is None:
            raise RepositoryError(
                f"Upsert is not supported for dialect {self.engine.dialect.name!r}"
            )

        stmt = insert(ProductRecord).values(sku=sku, attrs=product.attrs)
        stmt = stmt.on_conflict_do_update(
            index_elements=["sku"],
            set_={"attrs": stmt.excluded.attrs},
        )

        session: Session = self.session_factory()
        try:
            session.execute(stmt)
            session.commit()
        except (SQLAlchemyError, AttrsCodecError) as e:
            session.rollback()
            logger.error(f"Database error storing product {sku!r}: {e}", exc_info=True)
            raise RepositoryError("Failed to store product") from e
        finally:
            session.close()

        logger.info(f"Stored product with SKU {sku}")
