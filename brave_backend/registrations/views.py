import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from brave_backend.errors import DuplicateRegistrationError
from brave_backend.registrations import service as registrations_service
from brave_backend.registrations.models import parse_checkout_request
from brave_backend.utils.rate_limit import optional_rate_limit

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["Registrations API"])

# module brave_backend.registrations.views
@router.post("/physical-checkout", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def physical_checkout(request: Request):
    """
    Inscription avec paiement sur place.
    - Entrée JSON: { "courseId": "<id>", "details": { "name": ..., "phone": ..., ... } }
    - Réponses: {"message": "success", "uid", "paid"}
      ou {"message": "You already registered in this course."} si doublon (aucune insertion)
    - Erreurs: 400 {message: "error", error} (payload invalide, cours introuvable, échec DB)
    """
    try:
        body = await request.json()
    except ValueError:
        body = None
    checkout = parse_checkout_request(body)
    try:
        result = registrations_service.physical_checkout(checkout.course_id, checkout.details)
    except DuplicateRegistrationError as e:
        return JSONResponse({"message": e.message})
    return JSONResponse(result)
