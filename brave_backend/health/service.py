import logging
from typing import Any, Dict
import brave_backend.infra.supabase_client as supabase_client
from brave_backend.config import SUPABASE_URL

logger = logging.getLogger(__name__)

def health_supabase_info() -> Dict[str, Any]:
    """Ping Supabase avec une lecture minimale sur 'courses'."""
    info: Dict[str, Any] = {"url_configured": bool(SUPABASE_URL), "connect_ok": False}
    try:
        supabase_client.get_supabase().table("courses").select("id").limit(1).execute()
        info["connect_ok"] = True
    except Exception as e:
        logger.warning("health.supabase ping failed: %s", e)
        info["error"] = str(e)
    return info
