# module storefront.orders.views
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from storefront.infra.supabase_client import get_storage
from storefront.utils.security import require_user
from . import service

router = APIRouter(prefix="/api/v1/orders", tags=["Orders API"])

@router.get("")
def list_my_orders(user: Dict[str, Any] = Depends(require_user), storage=Depends(get_storage)) -> List[Dict[str, Any]]:
    """Commandes du client authentifié (email du jeton), plus récentes d'abord."""
    orders = service.list_orders_for_customer(storage, user["email"])
    return [o.model_dump(mode="json") for o in orders]
