"""
Middlewares transverses de l'application.
- register_basic_middlewares: CORS.
Notes:
- Aucun middleware ne lit le corps des requêtes: le webhook Stripe doit recevoir les octets bruts.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.config import CORS_ORIGINS

def register_basic_middlewares(app: FastAPI) -> None:
    """CORSMiddleware: autorise les origines définies (dev/prod), jeton bearer en en-tête."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials="*" not in CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
