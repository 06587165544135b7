"""
Service d'identification: jetons bearer signés (JWT HS256) liés à un email.
Sans état: aucune écriture, la validité repose uniquement sur la signature et l'expiration.
"""
from datetime import datetime, timedelta, timezone
from typing import Dict, Any
import logging
import jwt

from storefront import config
from storefront.errors import ValidationError
from .models import TokenCheck, UNAUTHENTICATED, INVALID_TOKEN
from . import repository

logger = logging.getLogger(__name__)

def issue_token(identity: Dict[str, Any]) -> str:
    """
    Émet un jeton {email, exp = maintenant + TOKEN_TTL_DAYS}.
    - identity doit contenir un email non vide.
    """
    email = str((identity or {}).get("email") or "").strip()
    if not email:
        raise ValidationError("Email manquant")
    exp = datetime.now(timezone.utc) + timedelta(days=config.TOKEN_TTL_DAYS)
    return jwt.encode({"email": email, "exp": exp}, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)

def verify_token(token: str | None) -> TokenCheck:
    """
    Vérifie un jeton et renvoie toujours un TokenCheck:
    - absent/vide => error="unauthenticated"
    - signature invalide, expiré, illisible ou sans email => error="invalid_token"
    """
    if not token or not str(token).strip():
        return TokenCheck(False, error=UNAUTHENTICATED)
    try:
        claims = jwt.decode(
            str(token).strip(),
            config.JWT_SECRET,
            algorithms=[config.JWT_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError:
        return TokenCheck(False, error=INVALID_TOKEN)
    except jwt.PyJWTError as e:
        logger.info("auth.verify_token rejected reason=%s", type(e).__name__)
        return TokenCheck(False, error=INVALID_TOKEN)
    email = claims.get("email") if isinstance(claims, dict) else None
    if not isinstance(email, str) or not email.strip():
        return TokenCheck(False, error=INVALID_TOKEN)
    return TokenCheck(True, email=email.strip(), claims=claims)

# --- Cas d'usage exposés aux vues ---

def register_or_login(storage, user: Dict[str, Any]) -> Dict[str, Any]:
    """
    Inscription ou connexion par email:
    - émet le jeton d'abord (pas d'I/O si l'identité est invalide)
    - crée le profil dans 'users' s'il est absent
    - retourne {token, created}
    """
    token = issue_token(user)
    existing = repository.get_user_by_email(storage, user["email"])
    if existing:
        return {"token": token, "created": False}
    repository.insert_user(storage, user)
    return {"token": token, "created": True}
