"""Frozen product descriptors stored alongside cart and order lines.

A snapshot is captured when a product enters a cart or an order so the line
keeps rendering after the catalog row is edited or deleted. Snapshots are
persisted in JSON columns through `ProductSnapshot.as_json()` and read back
with `build_snapshot()`, which fills any missing field from fallbacks.
"""

import uuid
from dataclasses import dataclass
from typing import Any, Optional

from common.normalize import parse_opaque_json, to_non_negative_int
from django.conf import settings

DEFAULT_CURRENCY = "COP"
DEFAULT_IMAGE = "/plancha.png"


def default_currency() -> str:
    return getattr(settings, "STOREFRONT_DEFAULT_CURRENCY", DEFAULT_CURRENCY)


def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def _images(data: dict) -> tuple[str, ...]:
    raw = data.get("images")
    if isinstance(raw, (list, tuple)):
        images = tuple(_text(url) for url in raw if _text(url))
        if images:
            return images
    for key in ("image", "imageUrl"):
        url = _text(data.get(key))
        if url:
            return (url,)
    return ()


@dataclass(frozen=True)
class ProductSnapshot:
    """Self-contained product descriptor.

    `id`, `name`, `price` and `currency` are always present; the remaining
    fields are optional decoration carried over from the catalog.
    """

    id: str
    name: str
    price: int
    currency: str
    sku: Optional[str] = None
    stock: Optional[int] = None
    category: Optional[str] = None
    short_description: Optional[str] = None
    images: tuple[str, ...] = ()

    @property
    def image(self) -> str:
        if self.images:
            return self.images[0]
        return getattr(settings, "STOREFRONT_DEFAULT_PRODUCT_IMAGE", DEFAULT_IMAGE)

    def as_json(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "currency": self.currency,
            "images": list(self.images) or [self.image],
            "image": self.image,
            "imageUrl": self.image,
        }
        if self.sku:
            data["sku"] = self.sku
        if self.stock is not None:
            data["stock"] = self.stock
        if self.category:
            data["category"] = self.category
        if self.short_description:
            data["shortDescription"] = self.short_description
        return data


def build_snapshot(raw: Any, *, id: Any = None, name: Any = None, unit_price: Any = 0) -> ProductSnapshot:
    """Normalize a raw snapshot, falling back field by field.

    Each of id, name, price and currency is taken from `raw` when usable,
    then from the keyword fallbacks, then synthesized (random id,
    "Producto {id}" name, default currency).
    """
    if isinstance(raw, ProductSnapshot):
        data = raw.as_json()
    else:
        data = parse_opaque_json(raw) or {}

    known_id = _text(data.get("id")) or _text(id)
    snapshot_id = known_id or str(uuid.uuid4())
    snapshot_name = _text(data.get("name")) or _text(name) or (f"Producto {known_id}" if known_id else "Producto")
    price = to_non_negative_int(data.get("price"), to_non_negative_int(unit_price))
    currency = _text(data.get("currency")).upper()
    if len(currency) != 3:
        currency = default_currency()
    stock = data.get("stock")

    return ProductSnapshot(
        id=snapshot_id,
        name=snapshot_name,
        price=price,
        currency=currency,
        sku=_text(data.get("sku")) or None,
        stock=to_non_negative_int(stock) if stock is not None else None,
        category=_text(data.get("category")) or None,
        short_description=_text(data.get("shortDescription") or data.get("short_description")) or None,
        images=_images(data),
    )


def snapshot_from_product(product) -> ProductSnapshot:
    """Capture the live catalog state of `product`."""
    return build_snapshot(
        {
            "id": product.pk,
            "name": product.name,
            "price": product.price_cents,
            "currency": product.currency,
            "sku": product.sku,
            "stock": product.stock,
            "category": product.category,
            "shortDescription": product.short_description,
            "images": product.images,
        }
    )
