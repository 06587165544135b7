"""
Cas d'usage 'payments': orchestre cart, stripe_client, line_items et le repository orders.

Réconciliation d'un webhook (par livraison):
  Received -> SignatureVerified (vue) -> Classified -> Reconciled | AlreadyReconciled
                                                    -> Ignored (type sans intérêt)
                                                    -> Skipped (forme de lignes inconnue)
                                                    -> ReconciliationFailed (non acquitté)
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import uuid4
import logging

import stripe

from storefront import config
from storefront.errors import CheckoutInitiationFailed, ReconciliationFailed, UpstreamUnavailable
from storefront.orders import repository as orders_repository
from storefront.orders.models import Order, OrderLine
from . import cart as cart_logic
from . import line_items
from . import stripe_client
from .models import CartItem

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"

RECONCILED = "reconciled"
ALREADY_RECONCILED = "already_reconciled"
IGNORED = "ignored"
SKIPPED = "skipped"

@dataclass(frozen=True)
class ReconcileResult:
    state: str
    session_id: Optional[str] = None
    order_id: Optional[str] = None

def initiate_checkout(
    *,
    cart: List[CartItem],
    customer_email: str,
    success_url: str,
    cancel_url: str,
) -> Dict[str, Any]:
    """
    Crée la session Stripe Checkout d'un panier.
    - Valide et convertit le panier avant tout appel sortant (ValidationError).
    - Aucune écriture locale: seul Stripe détient l'état de la session.
    - Échec Stripe (montant, devise, réseau, timeout) => CheckoutInitiationFailed.
    Retour: {"id": <session id>, "url": <page hébergée>}
    """
    stripe_line_items = cart_logic.to_line_items(cart, config.CHECKOUT_CURRENCY)
    expected_total = cart_logic.cart_total(cart)
    try:
        session = stripe_client.create_session(
            line_items=stripe_line_items,
            customer_email=customer_email,
            success_url=success_url,
            cancel_url=cancel_url,
            mode="payment",
        )
    except stripe.StripeError as e:
        logger.warning("payments.initiate_checkout rejected by Stripe email=%s reason=%s", customer_email, e)
        raise CheckoutInitiationFailed(f"Unable to create checkout session: {e.user_message or e}") from e
    if not session.get("id"):
        raise CheckoutInitiationFailed("Stripe returned a session without id")
    logger.info(
        "payments.initiate_checkout session_id=%s items=%s total=%s",
        session.get("id"), len(stripe_line_items), expected_total,
    )
    return {"id": session.get("id"), "url": session.get("url")}

def _order_lines(shape: line_items.LineItemsShape) -> List[OrderLine]:
    if isinstance(shape, line_items.InlineItems):
        return line_items.normalize(shape.source, shape.items)
    if isinstance(shape, line_items.FetchRequired):
        try:
            fetched = stripe_client.list_line_items(shape.session_id)
        except stripe.StripeError as e:
            logger.error("payments.reconcile line item fetch failed session_id=%s reason=%s", shape.session_id, e)
            raise ReconciliationFailed(f"Line item fetch failed: {e.user_message or e}") from e
        return line_items.normalize("line_items", fetched)
    raise line_items.UnrecognizedShape(shape.reason)

def _total_amount(session: Dict[str, Any], lines: List[OrderLine]) -> Decimal:
    amount_total = session.get("amount_total")
    if isinstance(amount_total, int) and not isinstance(amount_total, bool):
        return cart_logic.from_minor_units(amount_total)
    return sum((line.subtotal for line in lines), Decimal("0.00"))

def build_order(session: Dict[str, Any], lines: List[OrderLine]) -> Order:
    email = session.get("customer_email") or (session.get("customer_details") or {}).get("email")
    return Order(
        order_id=str(uuid4()),
        customer_email=email,
        line_items=lines,
        total_amount=_total_amount(session, lines),
        payment_status=session.get("payment_status") or "unpaid",
        created_at=datetime.now(timezone.utc),
        source_session_id=str(session["id"]),
    )

def reconcile_event(event: Dict[str, Any], storage) -> ReconcileResult:
    """
    Matérialise au plus une commande par session Checkout complétée.
    - L'événement doit déjà avoir passé la vérification de signature.
    - Types autres que checkout.session.completed: IGNORED, rien n'est persisté.
    - Forme de lignes inconnue: journalisée puis SKIPPED (on ne devine pas).
    - Session déjà réconciliée (relivraison): ALREADY_RECONCILED, sans doublon.
    - Échec Stripe ou stockage: ReconciliationFailed, à ne pas acquitter.
    """
    event_id = (event or {}).get("id")
    event_type = (event or {}).get("type")
    if event_type != CHECKOUT_COMPLETED:
        logger.info("payments.reconcile ignored event_id=%s type=%s", event_id, event_type)
        return ReconcileResult(IGNORED)

    session = ((event or {}).get("data") or {}).get("object")
    if not isinstance(session, dict) or not session.get("id"):
        logger.error("payments.reconcile skipped event_id=%s reason=missing checkout session", event_id)
        return ReconcileResult(SKIPPED)
    session_id = str(session["id"])

    shape = line_items.classify(session)
    try:
        lines = _order_lines(shape)
    except line_items.UnrecognizedShape as e:
        logger.error("payments.reconcile skipped event_id=%s session_id=%s reason=%s", event_id, session_id, e)
        return ReconcileResult(SKIPPED, session_id=session_id)
    if not lines:
        logger.error("payments.reconcile skipped event_id=%s session_id=%s reason=no line items", event_id, session_id)
        return ReconcileResult(SKIPPED, session_id=session_id)

    order = build_order(session, lines)
    try:
        row, created = orders_repository.insert_order_if_absent(storage, order.to_row())
    except UpstreamUnavailable as e:
        raise ReconciliationFailed(e.detail) from e

    order_id = (row or {}).get("id") if row else None
    if not created:
        logger.info("payments.reconcile already reconciled event_id=%s session_id=%s", event_id, session_id)
        return ReconcileResult(ALREADY_RECONCILED, session_id=session_id, order_id=order_id)
    logger.info(
        "payments.reconcile order created event_id=%s session_id=%s order_id=%s lines=%s total=%s",
        event_id, session_id, order_id, len(lines), order.total_amount,
    )
    return ReconcileResult(RECONCILED, session_id=session_id, order_id=order_id)
