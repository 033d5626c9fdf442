import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.status import HTTP_303_SEE_OTHER

from brave_backend.bkash import service as bkash_service
from brave_backend.bkash.models import CheckoutState
from brave_backend.registrations.models import parse_checkout_request
from brave_backend.utils.rate_limit import optional_rate_limit

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["bKash API"])

# module brave_backend.bkash.views
@router.post("/bkash-checkout", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def bkash_checkout(request: Request):
    """
    Crée un paiement bKash pour l'inscription à un cours.
    - Entrée JSON: { "courseId": "<id>", "details": { "name": ..., "phone": ..., ... } }
    - Étapes: token bKash -> lecture du cours -> création du paiement -> contexte en attente (paymentID)
    - Réponse: {"bkashURL": "<url bKash>"} vers laquelle le front redirige l'utilisateur
    - Erreurs: 400 {message: "error", error} (payload, doublon, cours, passerelle)
    """
    try:
        body = await request.json()
    except ValueError:
        body = None
    checkout = parse_checkout_request(body)
    bkash_url = await bkash_service.start_checkout(checkout.course_id, checkout.details)
    return JSONResponse({"bkashURL": bkash_url})

@router.get("/bkash-execute-payment", include_in_schema=False)
async def bkash_execute_payment(
    status: Optional[str] = None,
    payment_id: Optional[str] = Query(default=None, alias="paymentID"),
):
    """
    Callback bKash: toujours une redirection vers le front (jamais de JSON),
    /checkout?status=canceled|failed|successful&uid=...|failed_to_post_in_db
    """
    try:
        outcome = await bkash_service.handle_callback(status, payment_id)
    except Exception:
        logger.exception("Erreur bkash_execute_payment payment_id=%s", payment_id)
        outcome = bkash_service.CallbackOutcome(
            CheckoutState.FAILED, bkash_service.REDIRECT_FAILED, payment_id=payment_id
        )
    return RedirectResponse(url=outcome.redirect_url(), status_code=HTTP_303_SEE_OTHER)
