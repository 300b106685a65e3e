from typing import Dict
from uuid import uuid4
from core.errors import UpstreamError
from core.services.payment_provider import Order, PaymentProvider


class StubPaymentProvider(PaymentProvider):
    """Класс-заглушка для локальной разработки - заказы хранятся в памяти.

    С auto_capture=True каждый заказ сразу считается оплаченным.
    """

    name = "stub"

    def __init__(self, auto_capture: bool = False):
        self.auto_capture = auto_capture
        self.orders: Dict[str, Order] = {}

    async def create_order(self, amount_minor: int, currency: str, receipt: str) -> Order:
        order = {
            "id": f"order_stub{uuid4().hex[:14]}",
            "entity": "order",
            "amount": int(amount_minor),
            "currency": currency,
            "receipt": receipt,
            "status": "paid" if self.auto_capture else "created",
        }
        self.orders[order["id"]] = order
        return dict(order)

    async def fetch_order(self, order_id: str) -> Order:
        order = self.orders.get(order_id)
        if order is None:
            raise UpstreamError("The id provided does not exist", status_code=400)
        return dict(order)

    def mark_paid(self, order_id: str) -> None:
        self.orders[order_id]["status"] = "paid"
