"""
Module 'bkash' (feature-first): point d'entrée public.
Réunit le client HTTP bKash, le stockage des checkouts en attente et l'orchestration du checkout.
"""

from .models import (
    AccessToken,
    CheckoutState,
    CreatedPayment,
    ExecutionResult,
    GatewayCredentials,
    PendingCheckoutContext,
)
from .client import require_credentials, grant_token, create_payment, execute_payment
from .pending import PendingCheckoutStore
from .service import CallbackOutcome, start_checkout, handle_callback, pending_checkouts

__all__ = [
    # models
    "AccessToken",
    "CheckoutState",
    "CreatedPayment",
    "ExecutionResult",
    "GatewayCredentials",
    "PendingCheckoutContext",
    # client
    "require_credentials",
    "grant_token",
    "create_payment",
    "execute_payment",
    # pending
    "PendingCheckoutStore",
    # service
    "CallbackOutcome",
    "start_checkout",
    "handle_callback",
    "pending_checkouts",
]
