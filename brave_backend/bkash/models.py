# module brave_backend.bkash.models
"""Types du checkout bKash: identifiants, token, réponses passerelle et contexte en attente."""
import time
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from brave_backend.registrations.models import RegistrantDetails

# statusCode bKash signifiant "succès"
SUCCESS_CODE = "0000"


@dataclass(frozen=True)
class GatewayCredentials:
    app_key: str
    app_secret: str
    username: str
    password: str


@dataclass(frozen=True)
class AccessToken:
    id_token: str
    token_type: Optional[str] = None
    expires_in: Optional[int] = None
    refresh_token: Optional[str] = None


@dataclass(frozen=True)
class CreatedPayment:
    payment_id: str
    bkash_url: str
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ExecutionResult:
    status_code: Optional[str]
    status_message: Optional[str] = None
    trx_id: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status_code == SUCCESS_CODE


class CheckoutState(str, Enum):
    INITIATED = "initiated"
    TOKEN_GRANTED = "token_granted"
    PAYMENT_CREATED = "payment_created"
    AWAITING_CALLBACK = "awaiting_callback"
    CONFIRMED = "confirmed"
    CANCELED = "canceled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (CheckoutState.CONFIRMED, CheckoutState.CANCELED, CheckoutState.FAILED)


@dataclass
class PendingCheckoutContext:
    """
    Checkout bKash en cours, indexé par le paymentID renvoyé au callback.
    Porte son propre token: aucun état partagé entre deux checkouts.
    """
    payment_id: str
    course_id: str
    details: RegistrantDetails
    token: AccessToken
    amount: Decimal
    invoice_ref: str
    state: CheckoutState = CheckoutState.PAYMENT_CREATED
    created_at: float = field(default_factory=time.monotonic)

    def is_expired(self, ttl_seconds: float, now: Optional[float] = None) -> bool:
        now = time.monotonic() if now is None else now
        return now - self.created_at >= ttl_seconds
