"""Product request handlers.

Each handler returns a HandlerResult; nothing here writes a response.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Mapping
from typing import Any, TypeVar

from fastapi import status

from src.core.errors import ErrorKind, GenericFailure, PipelineError, ValidationErrorSet
from src.modules.products.models import Product
from src.modules.products.schemas import ProductPublic, validate_product, validate_product_patch
from src.modules.products.store import ProductNotFoundError, ProductStore, StoreError
from src.shared.envelope import HandlerResult
from src.shared.pagination import resolve_pagination
from src.shared.schemas import PaginationMeta

logger = logging.getLogger(__name__)

T = TypeVar("T")

STORE_TIMEOUT_MESSAGE = "product store timed out"


def _public(products: list[Product]) -> list[dict[str, Any]]:
    return [ProductPublic.model_validate(product).model_dump(mode="json", by_alias=True) for product in products]


def _not_found() -> HandlerResult:
    error = PipelineError(ErrorKind.RESOURCE_NOT_FOUND)
    return HandlerResult(status=error.status_code, error=GenericFailure(error.message))


def _store_failure(exc: StoreError) -> HandlerResult:
    # No explicit status: an unclassified store error resolves to 500.
    return HandlerResult(error=GenericFailure(str(exc) or ErrorKind.STORE_FAILURE.default_message))


class ProductService:
    def __init__(self, store: ProductStore, timeout_seconds: float):
        self.store = store
        self.timeout_seconds = timeout_seconds

    async def _call(self, operation: Awaitable[T]) -> T:
        try:
            async with asyncio.timeout(self.timeout_seconds):
                return await operation
        except TimeoutError as exc:
            logger.error("Product store call exceeded %.1fs", self.timeout_seconds)
            raise StoreError(STORE_TIMEOUT_MESSAGE) from exc

    async def list_products(self, raw_limit: str | None, raw_offset: str | None) -> HandlerResult:
        try:
            params = resolve_pagination(raw_limit, raw_offset)
            page = await self._call(self.store.list(params.limit, params.offset))
        except PipelineError as exc:
            return HandlerResult.from_exception(exc)
        except StoreError as exc:
            return _store_failure(exc)

        pagination = PaginationMeta(
            limit=params.limit,
            offset=params.offset,
            total=page.total,
            count=len(page.items),
        )
        return HandlerResult(data=_public(page.items), pagination=pagination)

    async def get_product(self, product_id: str) -> HandlerResult:
        try:
            product = await self._call(self.store.get(product_id))
        except ProductNotFoundError:
            return _not_found()
        except StoreError as exc:
            return _store_failure(exc)
        return HandlerResult(data=_public([product]))

    async def create_product(self, payload: Mapping[str, Any]) -> HandlerResult:
        try:
            product_in = validate_product(payload)
            product = await self._call(self.store.create(product_in))
        except ValidationErrorSet as exc:
            return HandlerResult.from_exception(exc)
        except StoreError as exc:
            return _store_failure(exc)
        return HandlerResult(status=status.HTTP_201_CREATED, data=_public([product]))

    async def replace_product(self, product_id: str, payload: Mapping[str, Any]) -> HandlerResult:
        try:
            product_in = validate_product(payload)
            product = await self._call(self.store.update(product_id, product_in))
        except ValidationErrorSet as exc:
            return HandlerResult.from_exception(exc)
        except ProductNotFoundError:
            return _not_found()
        except StoreError as exc:
            return _store_failure(exc)
        return HandlerResult(data=_public([product]))

    async def patch_product(self, product_id: str, payload: Mapping[str, Any]) -> HandlerResult:
        try:
            changes = validate_product_patch(payload)
            product = await self._call(self.store.patch(product_id, changes))
        except (ValidationErrorSet, PipelineError) as exc:
            return HandlerResult.from_exception(exc)
        except ProductNotFoundError:
            return _not_found()
        except StoreError as exc:
            return _store_failure(exc)
        return HandlerResult(data=_public([product]))

    async def delete_product(self, product_id: str) -> HandlerResult:
        try:
            await self._call(self.store.delete(product_id))
        except ProductNotFoundError:
            return _not_found()
        except StoreError as exc:
            return _store_failure(exc)
        return HandlerResult(status=status.HTTP_204_NO_CONTENT)
