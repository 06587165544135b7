"""
Adaptateur Stripe: centralise les appels et la configuration Stripe.
Tous les appels sortants passent par un client HTTP à timeout borné (STRIPE_TIMEOUT_SECONDS).
"""
import json
import stripe
from typing import Any, Dict, List, Optional

from storefront import config
from storefront.errors import SignatureInvalid

_http_timeout: Optional[int] = None

# module storefront.payments.stripe_client
def require_stripe():
    """
    Prépare et retourne le module stripe prêt à l'emploi.
    - Configure stripe.api_key via STRIPE_SECRET_KEY si disponible.
    - Installe un client HTTP avec timeout borné, sans retry réseau implicite.
    """
    global _http_timeout
    if config.STRIPE_SECRET_KEY:
        stripe.api_key = config.STRIPE_SECRET_KEY
    if _http_timeout != config.STRIPE_TIMEOUT_SECONDS:
        stripe.default_http_client = stripe.RequestsClient(timeout=config.STRIPE_TIMEOUT_SECONDS)
        stripe.max_network_retries = 0
        _http_timeout = config.STRIPE_TIMEOUT_SECONDS
    return stripe

def _as_dict(obj) -> Dict[str, Any]:
    # stripe retourne des StripeObject; on les traite comme dict
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return dict(obj)

def create_session(
    *,
    line_items: List[Dict[str, Any]],
    customer_email: str,
    success_url: str,
    cancel_url: str,
    mode: str = "payment",
    metadata: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """
    Crée une session Stripe Checkout.
    - line_items: lignes Stripe (price_data/quantity)
    - mode: "payment" (paiement unique)
    Retour: dict session (ex: {"id": "cs_test_...", "url": "https://..."})
    """
    require_stripe()
    session = stripe.checkout.Session.create(
        line_items=line_items,
        mode=mode,
        customer_email=customer_email,
        success_url=success_url,
        cancel_url=cancel_url,
        metadata=metadata or {},
        payment_method_types=["card"],
    )
    return _as_dict(session)

def list_line_items(session_id: str) -> List[Dict[str, Any]]:
    """
    Récupère toutes les lignes d'une session Checkout (pagination automatique).
    - price.product est expansé pour disposer du nom et des images du produit.
    """
    require_stripe()
    page = stripe.checkout.Session.list_line_items(
        session_id,
        limit=100,
        expand=["data.price.product"],
    )
    return [_as_dict(item) for item in page.auto_paging_iter()]

def verify_event(payload: bytes, sig_header: Optional[str]) -> Dict[str, Any]:
    """
    Vérifie un événement Stripe signé (webhook) puis le parse.
    - La signature est contrôlée sur les octets bruts reçus, avant tout parsing JSON.
    - Soulève SignatureInvalid si l'en-tête manque, si la signature/l'horodatage est invalide
      ou si le corps n'est pas un objet JSON.
    Retour: l'événement sous forme de dict.
    """
    if not sig_header:
        raise SignatureInvalid("Missing Stripe-Signature header")
    if not config.STRIPE_WEBHOOK_SECRET:
        raise SignatureInvalid("Webhook signing secret is not configured")
    try:
        text = payload.decode("utf-8")
    except UnicodeDecodeError:
        raise SignatureInvalid("Payload is not valid UTF-8")
    try:
        stripe.WebhookSignature.verify_header(
            text,
            sig_header,
            config.STRIPE_WEBHOOK_SECRET,
            config.STRIPE_WEBHOOK_TOLERANCE,
        )
    except stripe.SignatureVerificationError as e:
        raise SignatureInvalid(str(e.user_message or e)) from e
    try:
        event = json.loads(text)
    except ValueError:
        raise SignatureInvalid("Invalid JSON payload")
    if not isinstance(event, dict):
        raise SignatureInvalid("Event payload is not an object")
    return event
