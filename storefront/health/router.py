from urllib.parse import urlparse
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from storefront.config import SUPABASE_URL
from storefront.infra.supabase_client import get_storage
from storefront.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])

TABLES = ("products", "users", "orders")

def _check_table(storage, name: str):
    try:
        res = storage.table(name).select("*").limit(1).execute()
        return {"ok": True, "rows": len(res.data or [])}
    except Exception as e:
        return {"ok": False, "error": str(e)}

def health_storage_info(storage):
    parsed = urlparse(SUPABASE_URL) if SUPABASE_URL else None
    tables = {t: _check_table(storage, t) for t in TABLES}
    return {
        "hostname": parsed.hostname if parsed else None,
        "connect_ok": all(t["ok"] for t in tables.values()),
        "tables": tables,
    }

@router.get("")
def health_root():
    return {"ok": True}

@router.get("/storage")
def health_storage(storage=Depends(get_storage)):
    info = health_storage_info(storage)
    return JSONResponse(info, status_code=200 if info["connect_ok"] else 503)

@router.get("/rate-limit")
def health_rate_limit(request: Request):
    return rate_limit_health_info(request)
