"""Product CRUD routes."""

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response

from src.core.deps import get_product_service, require_token
from src.modules.products.service import ProductService
from src.shared.envelope import render_envelope
from src.shared.request import read_json_object

router = APIRouter(prefix="/products", tags=["products"], dependencies=[Depends(require_token)])


@router.get("")
async def list_products(
    limit: str | None = Query(default=None),
    offset: str | None = Query(default=None),
    service: ProductService = Depends(get_product_service),
) -> Response:
    return render_envelope(await service.list_products(limit, offset))


@router.get("/{product_id}")
async def get_product(product_id: str, service: ProductService = Depends(get_product_service)) -> Response:
    return render_envelope(await service.get_product(product_id))


@router.post("")
async def create_product(
    request: Request,
    service: ProductService = Depends(get_product_service),
) -> Response:
    payload = await read_json_object(request)
    return render_envelope(await service.create_product(payload))


@router.put("/{product_id}")
async def replace_product(
    product_id: str,
    request: Request,
    service: ProductService = Depends(get_product_service),
) -> Response:
    payload = await read_json_object(request)
    return render_envelope(await service.replace_product(product_id, payload))


@router.patch("/{product_id}")
async def patch_product(
    product_id: str,
    request: Request,
    service: ProductService = Depends(get_product_service),
) -> Response:
    payload = await read_json_object(request)
    return render_envelope(await service.patch_product(product_id, payload))


@router.delete("/{product_id}")
async def delete_product(product_id: str, service: ProductService = Depends(get_product_service)) -> Response:
    return render_envelope(await service.delete_product(product_id))
