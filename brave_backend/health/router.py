from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from brave_backend.health import service as health_service
from brave_backend.bkash.service import pending_checkouts
from brave_backend.utils.rate_limit import rate_limit_health_info

router = APIRouter(prefix="/health", tags=["Health"])

@router.get("")
def health_root():
    return {"ok": True, "pending_checkouts": len(pending_checkouts)}

@router.get("/supabase")
def health_supabase():
    info = health_service.health_supabase_info()
    return JSONResponse(info, status_code=200 if info.get("connect_ok") else 503)

@router.get("/rate-limit")
def health_rate_limit(request: Request):
    return rate_limit_health_info(request)
