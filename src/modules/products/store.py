"""SQLAlchemy-backed product store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.modules.products.models import Product
from src.modules.products.schemas import ProductPayload
from src.shared.ulid import is_ulid

logger = logging.getLogger(__name__)


class ProductNotFoundError(Exception):
    """Raised when no product exists for the requested id."""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__("product not found")


class StoreError(Exception):
    """Raised for any persistence failure; carries a client-safe message."""


@dataclass(frozen=True, slots=True)
class ProductPage:
    items: list[Product]
    total: int


class ProductStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self, limit: int, offset: int) -> ProductPage:
        logger.debug("Fetching products, limit=%d offset=%d", limit, offset)
        try:
            total = (await self.db.execute(select(func.count()).select_from(Product))).scalar_one()
            result = await self.db.execute(
                select(Product).order_by(Product.created_at, Product.product_id).limit(limit).offset(offset)
            )
        except SQLAlchemyError as exc:
            logger.error("Error listing products: %s", exc)
            raise StoreError("failed to list products") from exc
        return ProductPage(items=list(result.scalars().all()), total=total)

    async def get(self, product_id: str) -> Product:
        logger.debug("Fetching product %s", product_id)
        if not is_ulid(product_id):
            raise ProductNotFoundError(product_id)
        try:
            product = await self.db.get(Product, product_id)
        except SQLAlchemyError as exc:
            logger.error("Error fetching product %s: %s", product_id, exc)
            raise StoreError("failed to fetch product") from exc
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    async def create(self, payload: ProductPayload) -> Product:
        product = Product(**payload.model_dump())
        self.db.add(product)
        await self._commit(product, "create")
        logger.debug("Created product %s", product.product_id)
        return product

    async def update(self, product_id: str, payload: ProductPayload) -> Product:
        return await self.patch(product_id, payload.model_dump())

    async def patch(self, product_id: str, changes: dict[str, Any]) -> Product:
        product = await self.get(product_id)
        for field, value in changes.items():
            setattr(product, field, value)
        await self._commit(product, "update")
        logger.debug("Updated product %s fields=%s", product_id, sorted(changes))
        return product

    async def delete(self, product_id: str) -> None:
        product = await self.get(product_id)
        try:
            await self.db.delete(product)
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Error deleting product %s: %s", product_id, exc)
            raise StoreError("failed to delete product") from exc
        logger.debug("Deleted product %s", product_id)

    async def _commit(self, product: Product, action: str) -> None:
        try:
            await self.db.commit()
            await self.db.refresh(product)
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Error during product %s: %s", action, exc)
            raise StoreError(f"failed to {action} product") from exc
