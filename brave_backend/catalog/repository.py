"""
Accès aux données du catalogue (tables 'courses' et 'schedule'), en lecture seule.
Les filtres sont des dicts {colonne: valeur} construits par l'appelant (catalog.service).
"""
from typing import Any, Dict, List, Optional
import logging
import brave_backend.infra.supabase_client as supabase_client
from brave_backend.errors import PersistenceError

logger = logging.getLogger(__name__)

# module brave_backend.catalog.repository
def _select(table: str, filters: Optional[Dict[str, Any]] = None) -> List[dict]:
    query = supabase_client.get_supabase().table(table).select("*")
    for column, value in (filters or {}).items():
        query = query.eq(column, value)
    return query.execute().data or []

def find_courses(filters: Optional[Dict[str, Any]] = None) -> List[dict]:
    """
    Retourne les cours correspondant aux filtres d'égalité donnés.
    - Lève PersistenceError si Supabase refuse la requête (ex: id mal formé).
    """
    try:
        return _select("courses", filters)
    except Exception as e:
        logger.exception("catalog.repository.find_courses failed filters=%s", filters)
        raise PersistenceError(str(e)) from e

def get_course(course_id: str) -> Optional[dict]:
    """Un cours par son id, ou None s'il n'existe pas."""
    if not course_id:
        return None
    rows = find_courses({"id": course_id})
    return rows[0] if rows else None

def find_schedule(filters: Optional[Dict[str, Any]] = None) -> List[dict]:
    try:
        return _select("schedule", filters)
    except Exception as e:
        logger.exception("catalog.repository.find_schedule failed filters=%s", filters)
        raise PersistenceError(str(e)) from e
