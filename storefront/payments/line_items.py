"""
Normalisation des lignes d'une session Checkout reçue par webhook.

Selon la version d'API Stripe, la session porte ses lignes sous deux formes:
- inline: `display_items` (ancienne API) ou `line_items.data` (liste expansée)
- par référence: pas de liste inline, les lignes doivent être relues via l'API

classify() énumère explicitement la forme présente; toute autre forme est
Unrecognized et la commande n'est pas devinée.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from storefront.orders.models import OrderLine
from .cart import CENT, from_minor_units


class UnrecognizedShape(ValueError):
    pass


@dataclass(frozen=True)
class InlineItems:
    source: str  # "display_items" | "line_items"
    items: List[Dict[str, Any]]


@dataclass(frozen=True)
class FetchRequired:
    session_id: str


@dataclass(frozen=True)
class Unrecognized:
    reason: str


LineItemsShape = Union[InlineItems, FetchRequired, Unrecognized]


def _is_list_of_objects(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, dict) for v in value)


def classify(session: Dict[str, Any]) -> LineItemsShape:
    """Détermine la forme des lignes portées par la session (union étiquetée)."""
    session_id = session.get("id")
    display_items = session.get("display_items")
    line_items = session.get("line_items")

    if display_items is not None:
        if not _is_list_of_objects(display_items):
            return Unrecognized("display_items is not a list of objects")
        if display_items:
            return InlineItems("display_items", display_items)
    elif isinstance(line_items, dict):
        data = line_items.get("data")
        if data is None:
            if line_items.get("object") != "list":
                return Unrecognized("line_items is neither a list nor a list reference")
        elif not _is_list_of_objects(data):
            return Unrecognized("line_items.data is not a list of objects")
        elif data and not line_items.get("has_more"):
            return InlineItems("line_items", data)
    elif isinstance(line_items, list):
        if not _is_list_of_objects(line_items):
            return Unrecognized("line_items is not a list of objects")
        if line_items:
            return InlineItems("line_items", line_items)
    elif line_items is not None:
        return Unrecognized(f"line_items has unexpected type {type(line_items).__name__}")

    # Liste absente, vide ou partielle: Stripe fait foi
    if not session_id:
        return Unrecognized("session id missing, cannot fetch line items")
    return FetchRequired(str(session_id))


def _object(value: Any, field: str) -> Dict[str, Any]:
    # Champ imbriqué absent => {}; tout autre type que dict => forme inconnue
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise UnrecognizedShape(f"{field} is not an object")
    return value


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value.strip() else None


def _first_image(images: Any) -> Optional[str]:
    if isinstance(images, list) and images and isinstance(images[0], str):
        return images[0]
    return None


def _quantity(item: Dict[str, Any]) -> int:
    qty = item.get("quantity")
    if isinstance(qty, bool) or not isinstance(qty, int) or qty <= 0:
        raise UnrecognizedShape(f"invalid quantity {qty!r}")
    return qty


def _unit_price(unit_amount: Any) -> Decimal:
    try:
        return from_minor_units(unit_amount)
    except ValueError as e:
        raise UnrecognizedShape(str(e)) from e


def normalize_display_item(item: Dict[str, Any]) -> OrderLine:
    """display_items[i]: {amount (centimes, unitaire), quantity, custom{name, images} | sku{attributes.name, image}}."""
    custom = _object(item.get("custom"), "custom")
    sku = _object(item.get("sku"), "sku")
    attributes = _object(sku.get("attributes"), "sku.attributes")
    title = _text(custom.get("name")) or _text(attributes.get("name")) or _text(item.get("description"))
    if not title:
        raise UnrecognizedShape("display item without a name")
    image_url = _first_image(custom.get("images")) or _text(sku.get("image"))
    return OrderLine(
        title=title,
        unit_price=_unit_price(item.get("amount")),
        quantity=_quantity(item),
        image_url=image_url,
    )


def normalize_line_item(item: Dict[str, Any]) -> OrderLine:
    """line_items.data[i]: {description, quantity, price{unit_amount, product}, amount_subtotal}."""
    qty = _quantity(item)
    price = _object(item.get("price"), "price")
    # product non expansé: simple identifiant "prod_..."
    product = price.get("product")
    if isinstance(product, str):
        product = None
    product = _object(product, "price.product")
    title = _text(item.get("description")) or _text(product.get("name"))
    if not title:
        raise UnrecognizedShape("line item without a description")

    unit_amount = price.get("unit_amount")
    if unit_amount is not None:
        unit_price = _unit_price(unit_amount)
    else:
        subtotal = item.get("amount_subtotal")
        if isinstance(subtotal, bool) or not isinstance(subtotal, int):
            raise UnrecognizedShape("line item without unit_amount nor amount_subtotal")
        unit_price = (_unit_price(subtotal) / qty).quantize(CENT)

    return OrderLine(
        title=title,
        unit_price=unit_price,
        quantity=qty,
        image_url=_first_image(product.get("images")),
    )


def normalize(source: str, items: List[Dict[str, Any]]) -> List[OrderLine]:
    """Forme canonique des lignes, dans l'ordre reçu."""
    if source == "display_items":
        return [normalize_display_item(i) for i in items]
    if source == "line_items":
        return [normalize_line_item(i) for i in items]
    raise UnrecognizedShape(f"unknown line item source {source!r}")
