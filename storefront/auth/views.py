from fastapi import APIRouter, Depends, HTTPException
from typing import Dict, Any

from storefront.infra.supabase_client import get_storage
from storefront.utils.rate_limit import optional_rate_limit
from storefront.utils.security import require_user
from .models import UserRequest
from . import repository
from .service import register_or_login

# --- API Router (/api/v1/users) ---

api_router = APIRouter(prefix="/api/v1/users", tags=["Users API"])

@api_router.post("", dependencies=[Depends(optional_rate_limit(times=5, seconds=60))])
def api_register_or_login(req: UserRequest, storage=Depends(get_storage)):
    """Inscription ou connexion par email (API JSON).
    - Émet un jeton bearer valable TOKEN_TTL_DAYS jours.
    - Crée le profil dans 'users' s'il n'existe pas encore.
    - Retourne {token} et un message de connexion si l'utilisateur existait déjà.
    """
    result = register_or_login(storage, req.model_dump())
    if not result["created"]:
        return {"message": "Login successful", "token": result["token"]}
    return {"token": result["token"]}

@api_router.get("/me")
def api_me(user: Dict[str, Any] = Depends(require_user), storage=Depends(get_storage)):
    profile = repository.get_user_by_email(storage, user["email"])
    if not profile:
        raise HTTPException(status_code=404, detail="Utilisateur introuvable")
    return profile
