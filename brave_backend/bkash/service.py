"""
Cas d'usage 'bkash': orchestre token, création de paiement, callback et commit de l'inscription.

Machine à états d'un checkout:
  INITIATED -> TOKEN_GRANTED -> PAYMENT_CREATED -> AWAITING_CALLBACK -> CONFIRMED | CANCELED | FAILED
- start_checkout couvre les trois premières transitions et renvoie l'URL bKash.
- handle_callback consomme le contexte en attente (indexé par paymentID) et décide de l'état final.
Le token obtenu est porté par le contexte et passé explicitement à execute_payment.
"""
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode
from uuid import uuid4
import logging

from brave_backend import config
from brave_backend.catalog import repository as catalog_repository
from brave_backend.catalog.service import offer_price
from brave_backend.errors import (
    DuplicateRegistrationError,
    GatewayError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from brave_backend.registrations import service as registrations_service
from brave_backend.registrations.models import RegistrantDetails

from . import client as bkash_client
from .models import CheckoutState, PendingCheckoutContext
from .pending import PendingCheckoutStore

logger = logging.getLogger(__name__)

# Valeurs de ?status= renvoyées au front
REDIRECT_CANCELED = "canceled"
REDIRECT_FAILED = "failed"
REDIRECT_SUCCESSFUL = "successful"
REDIRECT_FAILED_TO_POST_IN_DB = "failed_to_post_in_db"

pending_checkouts = PendingCheckoutStore(ttl_seconds=config.PENDING_CHECKOUT_TTL_SECONDS)


@dataclass(frozen=True)
class CallbackOutcome:
    state: CheckoutState
    redirect_status: str
    uid: Optional[str] = None
    payment_id: Optional[str] = None

    def redirect_url(self, frontend_url: Optional[str] = None) -> str:
        params = {"status": self.redirect_status}
        if self.uid:
            params["uid"] = self.uid
        base = (frontend_url or config.FRONTEND_URL).rstrip("/")
        return f"{base}/checkout?{urlencode(params)}"


def generate_invoice_ref() -> str:
    return "Inv" + uuid4().hex[:5]

# module brave_backend.bkash.service
async def start_checkout(course_id: str, details: RegistrantDetails) -> str:
    """
    Démarre un checkout bKash et retourne l'URL de paiement bKash.
    - DuplicateRegistrationError si déjà inscrit (évite un double débit)
    - GatewayAuthError si le token est refusé
    - NotFoundError si le cours n'existe pas, ValidationError si son prix d'offre n'est pas payable
    - GatewayRequestError si bKash refuse la création du paiement
    """
    registrations_service.ensure_not_registered(course_id, details)

    token = await bkash_client.grant_token()

    course = catalog_repository.get_course(course_id)
    if not course:
        raise NotFoundError("Course not found", resource=course_id)
    amount = offer_price(course)
    if amount is None or not amount.is_finite() or amount <= 0:
        raise ValidationError("Course has no payable offer price")

    invoice_ref = generate_invoice_ref()
    payment = await bkash_client.create_payment(
        token,
        amount,
        config.BKASH_CURRENCY,
        config.BKASH_CALLBACK_URL,
        invoice_ref,
    )
    context = PendingCheckoutContext(
        payment_id=payment.payment_id,
        course_id=course_id,
        details=details,
        token=token,
        amount=amount,
        invoice_ref=invoice_ref,
        state=CheckoutState.PAYMENT_CREATED,
    )
    pending_checkouts.put(context)
    context.state = CheckoutState.AWAITING_CALLBACK
    logger.info(
        "bkash.start_checkout course=%s payment_id=%s invoice=%s amount=%s",
        course_id, payment.payment_id, invoice_ref, amount,
    )
    return payment.bkash_url

def _finish(context: Optional[PendingCheckoutContext], outcome: CallbackOutcome) -> CallbackOutcome:
    if context is not None:
        context.state = outcome.state
    logger.info(
        "bkash.callback payment_id=%s state=%s status=%s uid=%s",
        outcome.payment_id, outcome.state.value, outcome.redirect_status, outcome.uid,
    )
    return outcome

async def handle_callback(status: Optional[str], payment_id: Optional[str]) -> CallbackOutcome:
    """
    Traite le retour bKash (?status=&paymentID=) et retourne l'issue (jamais d'exception).
    - cancel  -> CANCELED
    - failure, statut inconnu, paymentID absent ou checkout inconnu/expiré -> FAILED
    - success -> execute_payment; "0000" => insertion (paid=True) => CONFIRMED,
      sinon FAILED; échec d'insertion => failed_to_post_in_db
    Le contexte en attente est toujours retiré (réclamé avant l'exécution: un seul commit par paiement).
    """
    status = (status or "").strip().lower()
    context = pending_checkouts.discard(payment_id) if payment_id else None

    if status == "cancel":
        return _finish(context, CallbackOutcome(CheckoutState.CANCELED, REDIRECT_CANCELED, payment_id=payment_id))
    if status != "success" or not payment_id:
        return _finish(context, CallbackOutcome(CheckoutState.FAILED, REDIRECT_FAILED, payment_id=payment_id))
    if context is None:
        logger.warning("bkash.callback unknown or expired payment_id=%s", payment_id)
        return _finish(None, CallbackOutcome(CheckoutState.FAILED, REDIRECT_FAILED, payment_id=payment_id))

    try:
        result = await bkash_client.execute_payment(context.token, payment_id)
    except GatewayError as e:
        logger.warning("bkash.callback execute_payment failed payment_id=%s error=%s", payment_id, e)
        return _finish(context, CallbackOutcome(CheckoutState.FAILED, REDIRECT_FAILED, payment_id=payment_id))

    if not result.succeeded:
        logger.warning(
            "bkash.callback payment not completed payment_id=%s status_code=%s message=%s",
            payment_id, result.status_code, result.status_message,
        )
        return _finish(context, CallbackOutcome(CheckoutState.FAILED, REDIRECT_FAILED, payment_id=payment_id))

    try:
        uid = registrations_service.commit_registration(context.course_id, context.details, paid=True)
    except (PersistenceError, DuplicateRegistrationError) as e:
        # Paiement encaissé mais inscription non enregistrée: réconciliation manuelle
        logger.error(
            "bkash.callback paid but registration not saved payment_id=%s trx_id=%s course=%s error=%s",
            payment_id, result.trx_id, context.course_id, e,
        )
        return _finish(
            context,
            CallbackOutcome(CheckoutState.FAILED, REDIRECT_FAILED_TO_POST_IN_DB, payment_id=payment_id),
        )

    logger.info("bkash.callback confirmed payment_id=%s trx_id=%s uid=%s", payment_id, result.trx_id, uid)
    return _finish(
        context,
        CallbackOutcome(CheckoutState.CONFIRMED, REDIRECT_SUCCESSFUL, uid=uid, payment_id=payment_id),
    )
