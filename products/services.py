"""Product services: SKU generation, creation and soft deletion."""

import logging
import re

from django.db import transaction

from .models import Product

logger = logging.getLogger("stockmaster.inventory")

_SKU_SEQUENCE = re.compile(r"^[A-Z0-9]{3}-(\d+)$")


def sku_prefix(category: str) -> str:
    """First three alphanumeric characters of the category, uppercased, X-padded."""
    cleaned = re.sub(r"[^A-Za-z0-9]", "", category or "")
    return cleaned[:3].upper().ljust(3, "X")


def generate_sku(category: str) -> str:
    """Return the next free `CAT-0001` style SKU for the category prefix."""
    prefix = sku_prefix(category)
    highest = 0
    for sku in Product.objects.filter(sku__startswith=f"{prefix}-").values_list("sku", flat=True):
        match = _SKU_SEQUENCE.match(sku)
        if match:
            highest = max(highest, int(match.group(1)))
    candidate = highest + 1
    while Product.objects.filter(sku=f"{prefix}-{candidate:04d}").exists():
        candidate += 1
    return f"{prefix}-{candidate:04d}"


@transaction.atomic
def create_product(*, name: str, category: str, uom: str, sku: str = "", **fields) -> Product:
    """Create a product with an empty stock map, generating a SKU when omitted."""
    sku = (sku or "").strip().upper() or generate_sku(category)
    product = Product.objects.create(name=name, category=category, uom=uom, sku=sku, total_stock=0, **fields)
    logger.info(
        "product_created",
        extra={"event": "product_created", "product_id": product.id, "sku": product.sku},
    )
    return product


def deactivate_product(*, product: Product) -> Product:
    """Soft delete: products referenced by ledger rows are never removed."""
    if product.status != Product.STATUS_INACTIVE:
        product.status = Product.STATUS_INACTIVE
        product.save(update_fields=["status", "updated_at"])
        logger.info(
            "product_deactivated",
            extra={"event": "product_deactivated", "product_id": product.id, "sku": product.sku},
        )
    return product


# EOF
