"""FastAPI dependencies for authentication and product handlers."""

from typing import Any

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings
from src.core.database import get_db
from src.core.security import AuthConfig, verify
from src.modules.products.service import ProductService
from src.modules.products.store import ProductStore

_auth_config = AuthConfig.from_settings(settings)


def get_auth_config() -> AuthConfig:
    return _auth_config


async def require_token(
    authorization: str | None = Header(default=None),
    config: AuthConfig = Depends(get_auth_config),
) -> dict[str, Any]:
    """Gate a route on a valid bearer token when auth is enabled."""
    return verify(authorization, config)


async def get_product_service(db: AsyncSession = Depends(get_db)) -> ProductService:
    return ProductService(ProductStore(db), timeout_seconds=settings.store_timeout_seconds)
