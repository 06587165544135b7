"""
Factory d'application recommandée pour les entrypoints (ex: storefront.asgi).
Ordonne les étapes d'initialisation de manière lisible et testable.
"""
from fastapi import FastAPI
from .lifespan import lifespan
from .middlewares import register_basic_middlewares
from .exceptions import register_exception_handlers
from .routers import register_routers

def create_app(storage=None) -> FastAPI:
    """
    Construit l'app FastAPI avec le lifespan et enregistre:
      - middlewares de base (CORS)
      - gestionnaires d'exceptions
      - tous les routers (API, webhook, health)
    storage: collaborateur de stockage à injecter (sinon ouvert par le lifespan).
    """
    app = FastAPI(title="Storefront API", lifespan=lifespan)
    app.state.storage = storage
    register_basic_middlewares(app)
    register_exception_handlers(app)
    register_routers(app)

    @app.get("/", include_in_schema=False)
    def root():
        return {"ok": True, "service": "storefront"}

    return app
