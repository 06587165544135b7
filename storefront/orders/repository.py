"""
Accès aux données pour la table 'orders'.
L'unicité par session Stripe repose sur la contrainte UNIQUE (source_session_id)
de la table (voir sql/schema.sql): l'insertion passe par un upsert
ON CONFLICT DO NOTHING, atomique côté base.
"""
from typing import Any, Dict, List, Optional, Tuple
import logging

from storefront.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

ORDERS_TABLE = "orders"
SESSION_KEY = "source_session_id"

# module storefront.orders.repository
def insert_order_if_absent(storage, row: Dict[str, Any]) -> Tuple[Optional[dict], bool]:
    """
    Insère la commande si aucune n'existe pour row["source_session_id"].
    Retour: (ligne persistée, created) avec created=False si la session était déjà réconciliée.
    Soulève UpstreamUnavailable si le stockage échoue.
    """
    session_id = row.get(SESSION_KEY)
    if not session_id:
        raise ValueError("source_session_id requis")
    try:
        res = (
            storage
            .table(ORDERS_TABLE)
            .upsert(row, on_conflict=SESSION_KEY, ignore_duplicates=True)
            .execute()
        )
    except Exception as e:
        logger.exception("orders.repository.insert_order_if_absent failed session_id=%s", session_id)
        raise UpstreamUnavailable("Écriture orders impossible") from e
    rows = res.data or []
    if rows:
        return rows[0], True
    return get_order_by_session(storage, session_id), False

def get_order_by_session(storage, session_id: str) -> Optional[dict]:
    try:
        res = (
            storage
            .table(ORDERS_TABLE)
            .select("*")
            .eq(SESSION_KEY, session_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.exception("orders.repository.get_order_by_session failed session_id=%s", session_id)
        raise UpstreamUnavailable("Lecture orders impossible") from e
    rows = res.data or []
    return rows[0] if rows else None

def list_orders_for_customer(storage, email: str) -> List[dict]:
    """Commandes d'un client, de la plus récente à la plus ancienne ([] si aucune)."""
    if not email:
        return []
    try:
        res = (
            storage
            .table(ORDERS_TABLE)
            .select("*")
            .eq("customer_email", email)
            .order("created_at", desc=True)
            .execute()
        )
    except Exception as e:
        logger.exception("orders.repository.list_orders_for_customer failed email=%s", email)
        raise UpstreamUnavailable("Lecture orders impossible") from e
    return res.data or []
