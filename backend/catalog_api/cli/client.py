"""Batch client: POST a file of JSON-lines products, or print a product range."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import httpx
from pydantic import TypeAdapter, ValidationError

from catalog_api.api.schemas.product import Product
from catalog_api.core.logging import configure_logging

logger = logging.getLogger("catalog_api.client")

DEFAULT_URL = "http://localhost:8080"
TIMEOUT_SECONDS = 10
JSON_HEADERS = {"Content-Type": "application/json; charset=utf-8"}

_product_list = TypeAdapter(list[Product])


def post_products(path: Path, client: httpx.Client) -> int:
    """POST every well-formed line of ``path`` to the create endpoint.

    Malformed lines and failed requests are logged and skipped. Returns the
    number of products the server accepted.
    """
    posted = 0
    for line_no, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        if not line.strip():
            continue
        # Check the JSON is well-formed before attempting to POST it
        try:
            product = Product.model_validate_json(line)
        except ValidationError:
            logger.warning(f"ignoring malformed JSON on line: {line_no}")
            continue

        payload = product.model_dump_json()
        print(payload)
        try:
            response = client.post("/product/create", content=payload, headers=JSON_HEADERS)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"API error for {product.sku}: {e}")
            continue
        posted += 1
    return posted


def list_products(client: httpx.Client, lo: int = 0, hi: int = 100) -> list[Product]:
    response = client.get("/product/list", params={"lo": lo, "hi": hi})
    response.raise_for_status()
    return _product_list.validate_json(response.content)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalog-client",
        description="Load products into the catalog API or list them.",
    )
    parser.add_argument("--file", help="JSON-lines file of products, relative to the working directory")
    parser.add_argument("--list", action="store_true", help="print a range of products")
    parser.add_argument("--lo", type=int, default=0, help="first row sequence number for --list")
    parser.add_argument("--hi", type=int, default=100, help="maximum number of products for --list")
    parser.add_argument("--url", default=DEFAULT_URL, help=f"API base URL (default: {DEFAULT_URL})")
    return parser


def main(argv: list[str] | None = None, transport: httpx.BaseTransport | None = None) -> int:
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list and args.file:
        parser.error("--list does not take a --file")
    if not args.list and not args.file:
        parser.error("one of --file or --list is required")

    with httpx.Client(base_url=args.url, timeout=TIMEOUT_SECONDS, transport=transport) as client:
        if args.list:
            try:
                products = list_products(client, args.lo, args.hi)
            except httpx.HTTPError as e:
                logger.error(f"API error listing products: {e}")
                return 1
            for product in products:
                print(product.model_dump_json())
            return 0

        path = Path.cwd() / args.file
        try:
            posted = post_products(path, client)
        except OSError as e:
            logger.error(f"Cannot read {path}: {e}")
            return 1
        logger.info(f"Posted {posted} product(s) from {path}")
        return 0


if __name__ == "__main__":
    sys.exit(main())
