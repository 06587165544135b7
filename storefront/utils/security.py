from fastapi import Request, HTTPException, Depends
from typing import Optional, Dict, Any

from storefront.auth.service import verify_token
from storefront.errors import InvalidToken, Unauthenticated

def bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None

def get_current_user(request: Request) -> Dict[str, Any]:
    """
    Contrôle synchrone du jeton bearer, avant toute I/O de la route protégée.
    - 401 "Authorization token is missing." si absent
    - 401 "Invalid token." si signature/expiration/claim email invalides
    """
    check = verify_token(bearer_token(request))
    if not check.success:
        err = Unauthenticated if check.is_unauthenticated else InvalidToken
        raise HTTPException(status_code=err.status_code, detail=err.default_detail)
    return {"email": check.email}

def require_user(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    return user
