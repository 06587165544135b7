"""
Module 'payments' (feature-first): point d'entrée public.
Réunit logique panier, client Stripe, normalisation des lignes et services (checkout, réconciliation).
"""

from .cart import to_minor_units, from_minor_units, to_line_items, cart_total
from .line_items import classify, normalize, InlineItems, FetchRequired, Unrecognized
from .stripe_client import require_stripe, create_session, list_line_items, verify_event
from .service import initiate_checkout, reconcile_event, ReconcileResult

__all__ = [
    # cart
    "to_minor_units",
    "from_minor_units",
    "to_line_items",
    "cart_total",
    # line items
    "classify",
    "normalize",
    "InlineItems",
    "FetchRequired",
    "Unrecognized",
    # stripe
    "require_stripe",
    "create_session",
    "list_line_items",
    "verify_event",
    # services
    "initiate_checkout",
    "reconcile_event",
    "ReconcileResult",
]
