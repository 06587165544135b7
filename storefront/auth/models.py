from typing import Optional, Dict, Any
from pydantic import BaseModel, EmailStr

UNAUTHENTICATED = "unauthenticated"
INVALID_TOKEN = "invalid_token"

class TokenCheck:
    """Résultat typé de verify_token: jamais d'exception, succès ou motif d'échec."""
    def __init__(
        self,
        success: bool,
        email: Optional[str] = None,
        error: Optional[str] = None,
        claims: Optional[Dict[str, Any]] = None,
    ):
        self.success = success
        self.email = email
        self.error = error
        self.claims = claims or {}

    @property
    def is_unauthenticated(self) -> bool:
        return self.error == UNAUTHENTICATED

class UserRequest(BaseModel):
    email: EmailStr
    name: Optional[str] = None
    photo_url: Optional[str] = None
