# lazada_erp/services/lazada/payloads.py
"""
Builders for the XML documents lazada.product.create expects.

The document is generated with xmltodict.unparse so free text (names,
descriptions, image URLs) is escaped rather than pasted into markup.
"""

import logging
from typing import Any, Dict, List, Optional

import xmltodict

from lazada_erp.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_PACKAGE_DIMENSION = "1"
REQUIRED_PRODUCT_FIELDS = ("sku", "name", "price", "quantity")


def validate_product_fields(item: Any) -> None:
    """
    Required-field check for a product create, run before any remote call.

    Works for both InventoryItem models and request schemas.

    Raises:
        ValidationError: naming every missing or invalid field
    """
    missing = []
    for field in REQUIRED_PRODUCT_FIELDS:
        value = getattr(item, field, None)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    if missing:
        raise ValidationError(f"Missing required fields for product creation: {', '.join(missing)}")

    if float(item.price) < 0:
        raise ValidationError("Price must not be negative")
    if int(item.quantity) < 0:
        raise ValidationError("Quantity must not be negative")


def validate_stock_update(remote_id: Any, quantity: Any) -> None:
    if remote_id is None or str(remote_id).strip() == "":
        raise ValidationError("Item ID is required for a stock update")
    if quantity is None or isinstance(quantity, bool):
        raise ValidationError("Quantity is required for a stock update")
    try:
        quantity = int(quantity)
    except (TypeError, ValueError):
        raise ValidationError(f"Quantity must be an integer, got: {quantity!r}")
    if quantity < 0:
        raise ValidationError("Quantity must not be negative")


def _image_block(images: Optional[List[str]]) -> Dict[str, List[str]]:
    return {"Image": [str(url) for url in (images or [])]}


def build_product_payload(item: Any) -> Dict[str, Any]:
    """Nested document for one product with a single SKU entry."""
    images = list(getattr(item, "images", None) or [])
    return {
        "Request": {
            "Product": {
                "PrimaryCategory": item.category or "",
                "SPUId": "",
                "AssociatedSku": "",
                "Images": _image_block(images),
                "Attributes": {
                    "name": item.name,
                    "short_description": item.description or "",
                },
                "Skus": {
                    "Sku": [
                        {
                            "SellerSku": item.sku,
                            "quantity": str(int(item.quantity)),
                            "price": f"{float(item.price):.2f}",
                            "package_length": DEFAULT_PACKAGE_DIMENSION,
                            "package_height": DEFAULT_PACKAGE_DIMENSION,
                            "package_weight": DEFAULT_PACKAGE_DIMENSION,
                            "package_width": DEFAULT_PACKAGE_DIMENSION,
                            "Images": _image_block(images),
                        }
                    ]
                },
            }
        }
    }


def render_product_xml(item: Any) -> str:
    """
    Render the product create payload.

    Raises:
        ValidationError: If required fields are missing
    """
    validate_product_fields(item)
    xml = xmltodict.unparse(build_product_payload(item), encoding="UTF-8")
    logger.debug(f"Built product payload for {item.sku} ({len(xml)} chars)")
    return xml
