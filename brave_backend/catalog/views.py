"""Endpoints publics du catalogue: cours et planning (lecture seule).
- /api/v1/courses?id=&all= : cours actifs par défaut, tous si `all` est fourni.
- /api/v1/schedule?course=&date= : entrées de planning filtrées.
- Erreurs: 400 {message: "error", error} (via le handler BraveError ou ici pour l'imprévu).
"""
import logging
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from brave_backend.catalog import service as catalog_service
from brave_backend.errors import BraveError
from brave_backend.utils.responses import error_response

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["Catalog API"])

@router.get("/courses")
def list_courses(id: Optional[str] = None, all: Optional[str] = None):
    try:
        return JSONResponse(catalog_service.list_courses(course_id=id, include_all=all))
    except BraveError:
        raise
    except Exception as e:
        logger.exception("Erreur list_courses")
        return error_response(e)

@router.get("/schedule")
def list_schedule(course: Optional[str] = None, date: Optional[str] = None):
    try:
        return JSONResponse(catalog_service.list_schedule(course=course, date=date))
    except BraveError:
        raise
    except Exception as e:
        logger.exception("Erreur list_schedule")
        return error_response(e)
