import logging
from typing import Any, Dict

from fastapi import APIRouter, Request, Depends, HTTPException
from starlette.concurrency import run_in_threadpool

from storefront import config
from storefront.errors import ReconciliationFailed, SignatureInvalid
from storefront.infra.supabase_client import get_storage
from storefront.utils.security import require_user
from storefront.utils.rate_limit import optional_rate_limit
from storefront.payments import stripe_client
from storefront.payments import service as payments_service
from storefront.payments.models import CheckoutRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/payments", tags=["Payments API"])
# Chemin historique du webhook, conservé pour les endpoints déjà déclarés chez Stripe
legacy_router = APIRouter(tags=["Payments API"])

# module storefront.payments.views
@router.post("/checkout", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_checkout_session(body: CheckoutRequest, user: Dict[str, Any] = Depends(require_user)):
    """
    Crée une session Checkout Stripe pour le panier de l'utilisateur authentifié.
    - Entrée JSON: { "cart": [ {"title", "price", "quantity", "image"?}, ... ], "email"?: "..." }
    - Sécurité: require_user + rate limit (10 req / 60s); l'email doit être celui du jeton
    - Réponse: {"id": <session id>, "url": <page de paiement hébergée>}
    - Erreurs: 400 panier invalide, 403 email d'un autre compte, 502 refus/indisponibilité Stripe
    """
    email = user["email"]
    if body.email and body.email.lower() != email.lower():
        raise HTTPException(status_code=403, detail="Email différent de celui du jeton")
    return payments_service.initiate_checkout(
        cart=body.cart,
        customer_email=email,
        success_url=config.CHECKOUT_SUCCESS_URL,
        cancel_url=config.CHECKOUT_CANCEL_URL,
    )

async def _receive_webhook(request: Request, storage) -> Dict[str, Any]:
    # Corps brut: aucun parsing avant la vérification de signature
    payload = await request.body()
    signature = request.headers.get("stripe-signature")
    try:
        event = stripe_client.verify_event(payload, signature)
    except SignatureInvalid as e:
        logger.warning("payments.webhook rejected reason=%s", e.detail)
        raise
    try:
        result = await run_in_threadpool(payments_service.reconcile_event, event, storage)
    except ReconciliationFailed as e:
        # Détail interne gardé dans les logs; réponse générique pour Stripe
        logger.exception("payments.webhook not acknowledged event_id=%s reason=%s", event.get("id"), e.detail)
        raise ReconciliationFailed() from e
    except Exception as e:
        logger.exception("Erreur webhook_stripe event_id=%s", event.get("id"))
        raise ReconciliationFailed() from e
    return {"received": True, "status": result.state}

@router.post("/webhook", include_in_schema=False)
async def webhook_stripe(request: Request, storage=Depends(get_storage)):
    """
    Webhook Stripe (Checkout): matérialise la commande sur checkout.session.completed.
    - Signature: stripe_client.verify_event sur les octets bruts (Stripe-Signature + STRIPE_WEBHOOK_SECRET)
    - Réponses: 200 {"received": true, "status": reconciled|already_reconciled|ignored|skipped}
    - Erreurs: 400 signature/payload invalide, 500 si la commande n'a pas pu être persistée (Stripe relivre)
    """
    return await _receive_webhook(request, storage)

@legacy_router.post("/webhook", include_in_schema=False)
async def webhook_stripe_legacy(request: Request, storage=Depends(get_storage)):
    return await _receive_webhook(request, storage)
