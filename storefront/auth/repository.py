"""Accès aux données (Supabase) de la table users.
Les erreurs de stockage sont journalisées puis remontées en UpstreamUnavailable (503).
"""
from typing import Any, Dict, Optional
import logging

from storefront.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

USERS_TABLE = "users"

def get_user_by_email(storage, email: str) -> Optional[dict]:
    """Récupère un utilisateur par email (table users), None si introuvable."""
    if not email:
        return None
    try:
        res = (
            storage
            .table(USERS_TABLE)
            .select("*")
            .eq("email", email)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.exception("auth.repository.get_user_by_email failed email=%s", email)
        raise UpstreamUnavailable("Lecture users impossible") from e
    rows = res.data or []
    return rows[0] if rows else None

def insert_user(storage, user: Dict[str, Any]) -> Optional[dict]:
    payload = {k: v for k, v in user.items() if v is not None}
    try:
        res = storage.table(USERS_TABLE).insert(payload).execute()
    except Exception as e:
        logger.exception("auth.repository.insert_user failed email=%s", user.get("email"))
        raise UpstreamUnavailable("Écriture users impossible") from e
    rows = res.data or []
    return rows[0] if rows else None
