from typing import Optional
from supabase import create_client, Client
from brave_backend.config import SUPABASE_URL, SUPABASE_KEY, SUPABASE_SERVICE_KEY

_supabase: Optional[Client] = None
_service_supabase: Optional[Client] = None

def get_supabase() -> Client:
    """Client 'anon' partagé, utilisé pour les lectures (courses, schedule, registrations)."""
    global _supabase
    if _supabase is None:
        if not SUPABASE_URL or not SUPABASE_KEY:
            raise RuntimeError("SUPABASE_URL / SUPABASE_KEY manquants pour get_supabase()")
        _supabase = create_client(SUPABASE_URL, SUPABASE_KEY)
    return _supabase

def get_service_supabase() -> Client:
    """
    Client service-role pour les écritures (inscriptions).
    Retombe sur le client anon si aucune clé service n'est configurée.
    """
    global _service_supabase
    if not SUPABASE_SERVICE_KEY:
        return get_supabase()
    if _service_supabase is None:
        _service_supabase = create_client(SUPABASE_URL, SUPABASE_SERVICE_KEY)
    return _service_supabase
