import json
from decimal import Decimal

import httpx
import pytest

from brave_backend.bkash import client as bkash_client
from brave_backend.bkash.models import AccessToken, GatewayCredentials
from brave_backend.errors import GatewayAuthError, GatewayRequestError

pytestmark = pytest.mark.asyncio

CREDS = GatewayCredentials(app_key="key", app_secret="secret", username="user", password="pass")
TOKEN = AccessToken(id_token="id-token-1")


@pytest.fixture(autouse=True)
def _bkash_urls(monkeypatch):
    monkeypatch.setattr("brave_backend.config.BKASH_GRANT_TOKEN_URL", "https://bkash.test/token/grant")
    monkeypatch.setattr("brave_backend.config.BKASH_CREATE_PAYMENT_URL", "https://bkash.test/create")
    monkeypatch.setattr("brave_backend.config.BKASH_EXECUTE_PAYMENT_URL", "https://bkash.test/execute")
    monkeypatch.setattr("brave_backend.config.BKASH_APP_KEY", "key")


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def test_grant_token_sends_credentials():
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id_token": "abc", "token_type": "Bearer", "expires_in": 3600, "refresh_token": "r"})

    async with _client(handler) as c:
        token = await bkash_client.grant_token(CREDS, client=c)

    assert token.id_token == "abc"
    assert token.expires_in == 3600
    assert seen["url"] == "https://bkash.test/token/grant"
    assert seen["body"] == {"app_key": "key", "app_secret": "secret"}
    assert seen["headers"]["username"] == "user"
    assert seen["headers"]["password"] == "pass"


async def test_grant_token_non_2xx_is_auth_error():
    async with _client(lambda r: httpx.Response(401, json={"statusMessage": "Invalid username"})) as c:
        with pytest.raises(GatewayAuthError) as exc:
            await bkash_client.grant_token(CREDS, client=c)
    assert exc.value.status_code == 401


async def test_grant_token_missing_id_token_is_auth_error():
    async with _client(lambda r: httpx.Response(200, json={"statusCode": "2079", "statusMessage": "Invalid"})) as c:
        with pytest.raises(GatewayAuthError):
            await bkash_client.grant_token(CREDS, client=c)


async def test_grant_token_malformed_body_is_auth_error():
    async with _client(lambda r: httpx.Response(200, text="<html>oops</html>")) as c:
        with pytest.raises(GatewayAuthError):
            await bkash_client.grant_token(CREDS, client=c)


async def test_grant_token_timeout_is_auth_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    async with _client(handler) as c:
        with pytest.raises(GatewayAuthError):
            await bkash_client.grant_token(CREDS, client=c)


async def test_grant_token_without_configured_credentials(monkeypatch):
    monkeypatch.setattr("brave_backend.config.BKASH_APP_SECRET", "")
    with pytest.raises(GatewayAuthError):
        await bkash_client.grant_token()


async def test_create_payment_payload_and_headers():
    seen = {}

    def handler(request: httpx.Request):
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "statusCode": "0000",
            "paymentID": "TR0011abc",
            "bkashURL": "https://sandbox.bka.sh/pay/TR0011abc",
        })

    async with _client(handler) as c:
        payment = await bkash_client.create_payment(
            TOKEN, Decimal("500.50"), "BDT", "http://localhost:4000/cb", "Inv12345", client=c,
        )

    assert payment.payment_id == "TR0011abc"
    assert payment.bkash_url == "https://sandbox.bka.sh/pay/TR0011abc"
    assert seen["body"] == {
        "mode": "0011",
        "payerReference": " ",
        "callbackURL": "http://localhost:4000/cb",
        "amount": "500.50",
        "currency": "BDT",
        "intent": "sale",
        "merchantInvoiceNumber": "Inv12345",
    }
    assert seen["headers"]["authorization"] == "id-token-1"
    assert seen["headers"]["x-app-key"] == "key"


async def test_create_payment_gateway_rejection():
    body = {"statusCode": "2006", "statusMessage": "Invalid Amount"}
    async with _client(lambda r: httpx.Response(200, json=body)) as c:
        with pytest.raises(GatewayRequestError) as exc:
            await bkash_client.create_payment(TOKEN, Decimal("0"), "BDT", "cb", "Inv1", client=c)
    assert exc.value.gateway_code == "2006"
    assert "Invalid Amount" in str(exc.value)


async def test_create_payment_missing_url():
    async with _client(lambda r: httpx.Response(200, json={"statusCode": "0000", "paymentID": "P1"})) as c:
        with pytest.raises(GatewayRequestError):
            await bkash_client.create_payment(TOKEN, Decimal("10"), "BDT", "cb", "Inv1", client=c)


async def test_create_payment_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as c:
        with pytest.raises(GatewayRequestError):
            await bkash_client.create_payment(TOKEN, Decimal("10"), "BDT", "cb", "Inv1", client=c)


async def test_execute_payment_success():
    seen = {}

    def handler(request: httpx.Request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "statusCode": "0000",
            "statusMessage": "Successful",
            "paymentID": "P1",
            "trxID": "9ABC",
            "transactionStatus": "Completed",
        })

    async with _client(handler) as c:
        result = await bkash_client.execute_payment(TOKEN, "P1", client=c)

    assert seen["body"] == {"paymentID": "P1"}
    assert result.succeeded
    assert result.trx_id == "9ABC"


async def test_execute_payment_non_success_code_is_not_an_error():
    body = {"statusCode": "2062", "statusMessage": "The payment has already been completed"}
    async with _client(lambda r: httpx.Response(200, json=body)) as c:
        result = await bkash_client.execute_payment(TOKEN, "P1", client=c)
    assert not result.succeeded
    assert result.status_code == "2062"


async def test_execute_payment_http_error():
    async with _client(lambda r: httpx.Response(500, text="boom")) as c:
        with pytest.raises(GatewayRequestError) as exc:
            await bkash_client.execute_payment(TOKEN, "P1", client=c)
    assert exc.value.status_code == 500


async def test_execute_payment_timeout():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    async with _client(handler) as c:
        with pytest.raises(GatewayRequestError):
            await bkash_client.execute_payment(TOKEN, "P1", client=c)
