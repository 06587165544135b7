"""
Collaborateur de stockage (Supabase/PostgREST).
- create_storage: ouvre le client au démarrage (lifespan), jamais à l'import.
- close_storage: libère les connexions HTTP du client à l'arrêt.
- get_storage: dépendance FastAPI qui renvoie le client porté par app.state.
"""
import logging
from fastapi import Request
from supabase import create_client, Client

from storefront.config import SUPABASE_URL, SUPABASE_KEY

logger = logging.getLogger(__name__)

def create_storage() -> Client:
    if not SUPABASE_URL or not SUPABASE_KEY:
        raise RuntimeError("SUPABASE_URL / SUPABASE_SERVICE_KEY manquants pour create_storage()")
    return create_client(SUPABASE_URL, SUPABASE_KEY)

def close_storage(client) -> None:
    """Ferme la session HTTP PostgREST si le client en expose une."""
    postgrest = getattr(client, "postgrest", None)
    closer = getattr(postgrest, "aclose", None) or getattr(postgrest, "close", None)
    if not callable(closer):
        return
    try:
        closer()
    except Exception:
        logger.warning("infra.supabase_client.close_storage failed", exc_info=True)

def get_storage(request: Request):
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise RuntimeError("Stockage non initialisé (lifespan non exécuté)")
    return storage
