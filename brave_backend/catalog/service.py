from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from . import repository


def course_filters(course_id: Optional[str] = None, include_all: Optional[str] = None) -> Dict[str, Any]:
    """
    Construit le filtre des cours:
    - active=True sauf si le drapeau `all` est présent (toute valeur non vide)
    - id optionnel
    """
    filters: Dict[str, Any] = {}
    if not include_all:
        filters["active"] = True
    if course_id:
        filters["id"] = course_id
    return filters

def list_courses(course_id: Optional[str] = None, include_all: Optional[str] = None) -> List[dict]:
    return repository.find_courses(course_filters(course_id, include_all))

def list_schedule(course: Optional[str] = None, date: Optional[str] = None) -> List[dict]:
    filters: Dict[str, Any] = {}
    if course:
        filters["course"] = course
    if date:
        filters["date"] = date
    return repository.find_schedule(filters)

def offer_price(course: Dict[str, Any]) -> Optional[Decimal]:
    """
    Prix d'offre exact d'un cours (Decimal, sans passer par float).
    - Retourne None si absent, non numérique ou non fini (NaN, Infinity).
    """
    value = (course or {}).get("offer_price")
    if value is None or isinstance(value, bool):
        return None
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return price if price.is_finite() else None
