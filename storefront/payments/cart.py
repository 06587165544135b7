"""
Logique panier pure (pas de Stripe, pas de DB).
Conversion unique et déterministe des prix décimaux en unités mineures (centimes).
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import List, Dict, Any, Iterable

from storefront.errors import ValidationError
from .models import CartItem

CENTS = Decimal("100")
CENT = Decimal("0.01")

# module storefront.payments.cart
def to_minor_units(price: Any) -> int:
    """
    Convertit un prix décimal en centimes entiers: round(price * 100), arrondi au plus proche (half-up).
    - Accepte Decimal, int, float (via sa représentation str) ou str.
    - Soulève ValidationError si le prix est illisible, infini/NaN ou négatif.
    """
    if isinstance(price, bool):
        raise ValidationError(f"Prix invalide: {price!r}")
    try:
        amount = price if isinstance(price, Decimal) else Decimal(str(price).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Prix invalide: {price!r}")
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"Prix invalide: {price!r}")
    return int((amount * CENTS).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

def from_minor_units(amount: int) -> Decimal:
    """Centimes -> montant décimal à deux chiffres (1999 -> Decimal('19.99'))."""
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"Montant en centimes invalide: {amount!r}")
    return (Decimal(amount) / CENTS).quantize(CENT)

def to_line_items(cart: Iterable[CartItem], currency: str) -> List[Dict[str, Any]]:
    """
    Construit les line_items Stripe (price_data) dans l'ordre du panier.
    - unit_amount en centimes via to_minor_units
    - product_data.images si l'article a une image
    - Soulève ValidationError si le panier est vide ou si une quantité n'est pas un entier positif.
    """
    line_items: List[Dict[str, Any]] = []
    for item in cart or []:
        qty = item.quantity
        if isinstance(qty, bool) or not isinstance(qty, int) or qty <= 0:
            raise ValidationError(f"Quantité invalide pour {item.title!r}: {qty!r}")
        product_data: Dict[str, Any] = {"name": item.title}
        if item.image_url:
            product_data["images"] = [item.image_url]
        line_items.append({
            "quantity": qty,
            "price_data": {
                "currency": currency,
                "unit_amount": to_minor_units(item.unit_price),
                "product_data": product_data,
            },
        })
    if not line_items:
        raise ValidationError("Panier vide")
    return line_items

def cart_total(cart: Iterable[CartItem]) -> Decimal:
    """Total attendu du panier, calculé sur les montants en centimes envoyés à Stripe."""
    cents = sum(to_minor_units(item.unit_price) * item.quantity for item in cart)
    return from_minor_units(cents)
