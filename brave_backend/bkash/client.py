"""
Adaptateur bKash (tokenized checkout): centralise les appels HTTP vers la passerelle.
- grant_token: obtient un id_token à partir de app_key/app_secret + username/password
- create_payment: crée une session de paiement et renvoie l'URL bKash
- execute_payment: confirme un paiement après le callback
Chaque appel a un timeout borné (BKASH_TIMEOUT_SECONDS) et aucun retry.
"""
from decimal import Decimal
from typing import Any, Dict, Optional
import logging

import httpx

from brave_backend import config
from brave_backend.errors import GatewayAuthError, GatewayRequestError

from .models import AccessToken, CreatedPayment, ExecutionResult, GatewayCredentials, SUCCESS_CODE

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}

# module brave_backend.bkash.client
def require_credentials() -> GatewayCredentials:
    """
    Identifiants marchand bKash lus depuis la configuration.
    - Lève GatewayAuthError si un des quatre champs manque.
    """
    creds = GatewayCredentials(
        app_key=config.BKASH_APP_KEY,
        app_secret=config.BKASH_APP_SECRET,
        username=config.BKASH_USERNAME,
        password=config.BKASH_PASSWORD,
    )
    if not all((creds.app_key, creds.app_secret, creds.username, creds.password)):
        raise GatewayAuthError("bKash credentials are not configured")
    return creds

def _auth_headers(token: AccessToken, app_key: str) -> Dict[str, str]:
    return {**_JSON_HEADERS, "Authorization": token.id_token, "X-App-Key": app_key}

def _format_amount(amount: Decimal) -> str:
    # bKash attend une chaîne; pas de conversion float pour garder le prix exact
    return format(amount, "f")

async def _post(
    url: str,
    payload: Dict[str, Any],
    headers: Dict[str, str],
    client: Optional[httpx.AsyncClient],
) -> httpx.Response:
    if client is not None:
        return await client.post(url, json=payload, headers=headers, timeout=config.BKASH_TIMEOUT_SECONDS)
    async with httpx.AsyncClient(timeout=config.BKASH_TIMEOUT_SECONDS) as owned:
        return await owned.post(url, json=payload, headers=headers)

def _json_body(response: httpx.Response) -> Dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}

async def grant_token(
    credentials: Optional[GatewayCredentials] = None,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> AccessToken:
    """
    Demande un token d'accès à bKash.
    - Corps: {app_key, app_secret}; en-têtes: username, password
    - Lève GatewayAuthError si réponse non-2xx, réseau/timeout, corps invalide ou id_token absent
    """
    creds = credentials or require_credentials()
    headers = {**_JSON_HEADERS, "username": creds.username, "password": creds.password}
    payload = {"app_key": creds.app_key, "app_secret": creds.app_secret}
    try:
        response = await _post(config.BKASH_GRANT_TOKEN_URL, payload, headers, client)
    except httpx.TimeoutException as e:
        raise GatewayAuthError("bKash token grant timed out") from e
    except httpx.HTTPError as e:
        raise GatewayAuthError(f"bKash token grant failed: {e}") from e

    data = _json_body(response)
    if not response.is_success:
        raise GatewayAuthError(
            data.get("statusMessage") or f"bKash token grant rejected (HTTP {response.status_code})",
            status_code=response.status_code,
            gateway_code=data.get("statusCode"),
        )
    id_token = data.get("id_token")
    if not id_token:
        raise GatewayAuthError(
            data.get("statusMessage") or "bKash token grant returned no id_token",
            status_code=response.status_code,
            gateway_code=data.get("statusCode"),
        )
    return AccessToken(
        id_token=id_token,
        token_type=data.get("token_type"),
        expires_in=data.get("expires_in"),
        refresh_token=data.get("refresh_token"),
    )

async def create_payment(
    token: AccessToken,
    amount: Decimal,
    currency: str,
    callback_url: str,
    invoice_ref: str,
    *,
    app_key: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> CreatedPayment:
    """
    Crée un paiement bKash (intent "sale").
    Retour: CreatedPayment(payment_id, bkash_url, raw)
    Lève GatewayRequestError si la passerelle refuse ou ne renvoie pas paymentID/bkashURL.
    """
    payload = {
        "mode": "0011",
        "payerReference": " ",
        "callbackURL": callback_url,
        "amount": _format_amount(amount),
        "currency": currency,
        "intent": "sale",
        "merchantInvoiceNumber": invoice_ref,
    }
    headers = _auth_headers(token, app_key or config.BKASH_APP_KEY)
    try:
        response = await _post(config.BKASH_CREATE_PAYMENT_URL, payload, headers, client)
    except httpx.TimeoutException as e:
        raise GatewayRequestError("bKash create payment timed out") from e
    except httpx.HTTPError as e:
        raise GatewayRequestError(f"bKash create payment failed: {e}") from e

    data = _json_body(response)
    status_code = data.get("statusCode")
    if not response.is_success or (status_code and status_code != SUCCESS_CODE):
        raise GatewayRequestError(
            data.get("statusMessage") or data.get("errorMessage")
            or f"bKash create payment rejected (HTTP {response.status_code})",
            status_code=response.status_code,
            gateway_code=status_code or data.get("errorCode"),
        )
    payment_id = data.get("paymentID")
    bkash_url = data.get("bkashURL")
    if not payment_id or not bkash_url:
        raise GatewayRequestError(
            "bKash create payment returned no paymentID/bkashURL",
            status_code=response.status_code,
            gateway_code=status_code,
        )
    return CreatedPayment(payment_id=payment_id, bkash_url=bkash_url, raw=data)

async def execute_payment(
    token: AccessToken,
    payment_id: str,
    *,
    app_key: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> ExecutionResult:
    """
    Exécute (confirme) un paiement après le callback "success".
    - Un statusCode différent de "0000" est un résultat normal (result.succeeded == False).
    - Lève GatewayRequestError sur échec transport, HTTP non-2xx ou corps invalide.
    """
    headers = _auth_headers(token, app_key or config.BKASH_APP_KEY)
    try:
        response = await _post(config.BKASH_EXECUTE_PAYMENT_URL, {"paymentID": payment_id}, headers, client)
    except httpx.TimeoutException as e:
        raise GatewayRequestError("bKash execute payment timed out") from e
    except httpx.HTTPError as e:
        raise GatewayRequestError(f"bKash execute payment failed: {e}") from e

    data = _json_body(response)
    if not response.is_success or not data:
        raise GatewayRequestError(
            data.get("statusMessage") or f"bKash execute payment rejected (HTTP {response.status_code})",
            status_code=response.status_code,
            gateway_code=data.get("statusCode"),
        )
    result = ExecutionResult(
        status_code=data.get("statusCode"),
        status_message=data.get("statusMessage"),
        trx_id=data.get("trxID"),
        raw=data,
    )
    logger.info(
        "bkash.execute_payment payment_id=%s status_code=%s trx_id=%s",
        payment_id, result.status_code, result.trx_id,
    )
    return result
