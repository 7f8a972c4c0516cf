"""Lookup, range listing and create-or-update endpoints for products."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from catalog_api.api.dependencies.context import RequestContext, get_request_context
from catalog_api.api.dependencies.repository import get_repository
from catalog_api.api.errors import UNPROCESSABLE_ENTITY, APIError
from catalog_api.api.routing import GatedRoute
from catalog_api.api.schemas.product import Product, ProductLocation
from catalog_api.repositories.exceptions import ProductNotFound
from catalog_api.repositories.interfaces import ProductOps

logger = logging.getLogger(__name__)

router = APIRouter(route_class=GatedRoute)

# Business routes accept every method so that the content-type and health
# gates answer before any method check.
ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
WRITE_METHODS = ("POST", "PUT")

# Bounds are bound as BIGINT
INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1


def _int_param(value: str | None) -> int:
    """Parse an integer query parameter, falling back to 0 on missing or bad input.

    Values outside the signed 64-bit range are clamped to it.
    """
    if value is None:
        return 0
    try:
        parsed = int(value)
    except ValueError:
        return 0
    return max(INT64_MIN, min(parsed, INT64_MAX))


@router.api_route(
    "/list",
    methods=ANY_METHOD,
    summary="List a range of products in insertion order",
    response_model=list[Product],
)
@router.api_route("/list/", methods=ANY_METHOD, include_in_schema=False)
def list_products(
    lo: str | None = Query(None, description="Lowest row sequence number"),
    hi: str | None = Query(None, description="Maximum number of products"),
    repository: ProductOps = Depends(get_repository),
    context: RequestContext = Depends(get_request_context),
) -> list[Product]:
    """Return at most ``hi`` products starting at sequence number ``lo``.

    Missing or unparsable bounds default to 0, so a bare request returns an
    empty list.
    """
    lower, upper = _int_param(lo), _int_param(hi)
    products = repository.list_products(lower, upper)
    logger.debug(f"Listed {len(products)} products [{lower}, {upper}] for {context.user_agent!r}")
    return products


@router.api_route(
    "/get",
    methods=ANY_METHOD,
    summary="Fetch a single product by SKU",
    response_model=Product,
)
@router.api_route("/get/", methods=ANY_METHOD, include_in_schema=False)
def get_product(
    sku: str = Query("", description="SKU of the product"),
    repository: ProductOps = Depends(get_repository),
) -> Product:
    try:
        return repository.lookup(sku)
    except ProductNotFound as e:
        raise APIError(status.HTTP_404_NOT_FOUND, "Product does not exist") from e


@router.api_route(
    "/create",
    methods=ANY_METHOD,
    summary="Create a product or replace its attributes",
    status_code=status.HTTP_201_CREATED,
    response_model=ProductLocation,
)
@router.api_route("/create/", methods=ANY_METHOD, include_in_schema=False)
async def create_product(
    request: Request,
    repository: ProductOps = Depends(get_repository),
    context: RequestContext = Depends(get_request_context),
) -> JSONResponse:
    """Upsert a product by SKU.

    An existing product's attributes are replaced, not merged. The response
    carries the location of the created/updated resource.
    """
    if request.method not in WRITE_METHODS:
        raise APIError(status.HTTP_405_METHOD_NOT_ALLOWED, "Supported methods: POST, PUT")

    body = await request.body()
    try:
        product = Product.model_validate_json(body)
    except ValidationError as e:
        logger.info(f"Malformed product body from {context.client_addr}: {e.error_count()} error(s)")
        raise APIError(UNPROCESSABLE_ENTITY, "Unprocessable Entity") from e

    await run_in_threadpool(repository.store, product.sku, product)

    logger.info(f"Stored product {product.sku} for {context.client_addr} ({context.user_agent})")
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=ProductLocation.for_sku(product.sku).model_dump(),
    )
