"""
Taxonomie d'erreurs du storefront.
Chaque exception porte le code HTTP vers lequel elle est traduite par
app_setup.exceptions (réponse JSON {"detail": ...}).
"""


class StorefrontError(Exception):
    status_code = 500
    default_detail = "Erreur interne"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthenticated(StorefrontError):
    status_code = 401
    default_detail = "Authorization token is missing."


class InvalidToken(StorefrontError):
    status_code = 401
    default_detail = "Invalid token."


class ValidationError(StorefrontError):
    status_code = 400
    default_detail = "Requête invalide"


class SignatureInvalid(StorefrontError):
    status_code = 400
    default_detail = "Invalid webhook signature"


class UpstreamUnavailable(StorefrontError):
    status_code = 503
    default_detail = "Service tiers indisponible"


class CheckoutInitiationFailed(UpstreamUnavailable):
    status_code = 502
    default_detail = "Unable to create checkout session"


class ReconciliationFailed(UpstreamUnavailable):
    """Le webhook ne doit pas être acquitté: Stripe relivrera l'événement."""
    status_code = 500
    default_detail = "Order reconciliation failed"
