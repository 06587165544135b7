"""Accès aux données (Supabase) de la table products.
Toute erreur de stockage est journalisée puis remontée en UpstreamUnavailable (503):
une panne ne doit jamais ressembler à un catalogue vide ou à un produit absent.
"""
from typing import List, Optional, Dict, Any
import logging

from storefront.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

PRODUCTS_TABLE = "products"

def list_products(storage) -> List[dict]:
    try:
        res = storage.table(PRODUCTS_TABLE).select("*").execute()
    except Exception as e:
        logger.exception("products.repository.list_products failed")
        raise UpstreamUnavailable("Lecture products impossible") from e
    return res.data or []

def get_product(storage, product_id: str) -> Optional[dict]:
    if not product_id:
        return None
    try:
        res = (
            storage
            .table(PRODUCTS_TABLE)
            .select("*")
            .eq("id", product_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.exception("products.repository.get_product failed id=%s", product_id)
        raise UpstreamUnavailable("Lecture products impossible") from e
    rows = res.data or []
    return rows[0] if rows else None

def create_product(storage, data: Dict[str, Any]) -> Optional[dict]:
    try:
        res = storage.table(PRODUCTS_TABLE).insert(data).execute()
    except Exception as e:
        logger.exception("products.repository.create_product failed data=%s", data)
        raise UpstreamUnavailable("Écriture products impossible") from e
    rows = getattr(res, "data", None) or []
    return rows[0] if isinstance(rows, list) and rows else None

def update_product(storage, product_id: str, data: Dict[str, Any]) -> Optional[dict]:
    """None si aucune ligne ne correspond à product_id."""
    try:
        res = (
            storage
            .table(PRODUCTS_TABLE)
            .update(data)
            .eq("id", product_id)
            .execute()
        )
    except Exception as e:
        logger.exception("products.repository.update_product failed id=%s data=%s", product_id, data)
        raise UpstreamUnavailable("Écriture products impossible") from e
    rows = getattr(res, "data", None) or []
    return rows[0] if isinstance(rows, list) and rows else None

def delete_product(storage, product_id: str) -> bool:
    try:
        res = storage.table(PRODUCTS_TABLE).delete().eq("id", product_id).execute()
    except Exception as e:
        logger.exception("products.repository.delete_product failed id=%s", product_id)
        raise UpstreamUnavailable("Écriture products impossible") from e
    return bool(res.data)
