"""
Registre central des routers (API v1, webhook, health).
- API v1: users, products, payments, orders
- Webhook Stripe: /api/v1/payments/webhook et chemin historique /webhook
- Health: health_router
"""
from fastapi import FastAPI
from storefront.auth.views import api_router as users_api_router
from storefront.products import views as products_views
from storefront.payments import views as payments_views
from storefront.orders import views as orders_views
from storefront.health.router import router as health_router

def register_routers(app: FastAPI) -> None:
    # API v1
    app.include_router(users_api_router)
    app.include_router(products_views.router)
    app.include_router(payments_views.router)
    app.include_router(orders_views.router)
    # Webhook (chemin historique)
    app.include_router(payments_views.legacy_router)
    # Health & monitoring
    app.include_router(health_router)
