"""
Catalog Module - Service Layer
================================
Load the static catalog dataset and resolve product identifiers coming from
the page.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from config.settings import CATALOG_PATH, MAX_PRODUCT_ID
from common.exceptions import InvalidProductError, NotFoundError
from common.security import validate_number
from modules.catalog.models import Catalog, Product, is_valid_product

logger = logging.getLogger("storefront.catalog")


def product_from_record(record: Dict[str, Any]) -> Optional[Product]:
    """Build a Product from a raw JSON record. Returns None if the record is malformed."""
    if not isinstance(record, dict):
        return None
    product = Product(
        id=record.get("id"),
        name=record.get("name"),
        price=record.get("price"),
        description=record.get("description") or "",
        image=record.get("image") or None,
        is_new=bool(record.get("isNew", record.get("is_new", False))),
    )
    return product if is_valid_product(product) else None


def build_catalog(data: Dict[str, Any]) -> Catalog:
    """
    Build a Catalog from {category: [record, ...]}.
    Malformed records and duplicate ids are skipped with a warning.
    """
    if not isinstance(data, dict):
        raise ValueError("Catalog data must map category names to product lists")

    seen_ids = set()
    categories = {}
    for category_name, records in data.items():
        products = []
        for record in records or []:
            product = product_from_record(record)
            if product is None:
                logger.warning("Invalid product data in %s: %r", category_name, record)
                continue
            if product.id in seen_ids:
                logger.warning("Duplicate product id %s in %s skipped", product.id, category_name)
                continue
            seen_ids.add(product.id)
            products.append(product)
        categories[str(category_name)] = tuple(products)

    return Catalog(categories)


def load_catalog(path: str = CATALOG_PATH) -> Catalog:
    """Read the catalog JSON file."""
    with Path(path).open("r", encoding="utf-8") as f:
        data = json.load(f)
    catalog = build_catalog(data)
    logger.info("Loaded %d products from %s", len(catalog), path)
    return catalog


def resolve_product(catalog: Catalog, raw_id) -> Product:
    """
    Turn a product id coming from the page into a Product.
    Raises InvalidProductError for a malformed id, NotFoundError if unknown.
    """
    id_check = validate_number(raw_id, 1, MAX_PRODUCT_ID)
    if not id_check.is_valid:
        logger.error("Invalid product ID: %r", raw_id)
        raise InvalidProductError()

    product = catalog.get(id_check.value)
    if product is None:
        logger.error("Product not found: %s", id_check.value)
        raise NotFoundError("Product not found")
    return product
