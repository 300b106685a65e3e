import logging
from typing import Optional
from urllib.parse import quote

import httpx

from core.errors import UpstreamError
from core.services.payment_provider import Order, PaymentProvider


logger = logging.getLogger(__name__)


class RazorpayPaymentProvider(PaymentProvider):
    """Razorpay Orders API over REST (basic auth with key id / key secret)."""

    name = "razorpay"

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        api_url: str = "https://api.razorpay.com/v1",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.key_id = key_id
        self.key_secret = key_secret
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.key_id and self.key_secret)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.api_url,
            auth=(self.key_id, self.key_secret),
            timeout=self.timeout,
            transport=self._transport,
        )

    async def create_order(self, amount_minor: int, currency: str, receipt: str) -> Order:
        payload = {"amount": int(amount_minor), "currency": currency, "receipt": receipt}
        return await self._request("POST", "/orders", json=payload)

    async def fetch_order(self, order_id: str) -> Order:
        return await self._request("GET", f"/orders/{quote(order_id, safe='')}")

    async def _request(self, method: str, path: str, **kwargs) -> Order:
        try:
            async with self._client() as client:
                resp = await client.request(method, path, **kwargs)
        except httpx.TimeoutException:
            logger.error("Razorpay %s %s timed out", method, path)
            raise UpstreamError("Payment gateway request timed out", kind=UpstreamError.TIMEOUT)
        except httpx.TransportError as e:
            logger.error("Razorpay %s %s failed: %s", method, path, e)
            raise UpstreamError("Failed to connect to payment gateway", kind=UpstreamError.CONNECTIVITY)

        if resp.status_code >= 400:
            message = _error_description(resp)
            logger.error("Razorpay %s %s returned %s: %s", method, path, resp.status_code, message)
            raise UpstreamError(message, status_code=resp.status_code)
        return resp.json()


def _error_description(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"Payment gateway error ({resp.status_code})"
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("description"):
        return error["description"]
    return f"Payment gateway error ({resp.status_code})"
