from abc import ABC, abstractmethod
from typing import Any, Dict


Order = Dict[str, Any]


class PaymentProvider(ABC):
    """Платёжный шлюз: создаёт заказ и отдаёт его статус."""

    name: str = "abstract"

    @property
    def is_configured(self) -> bool:
        return True

    @abstractmethod
    async def create_order(self, amount_minor: int, currency: str, receipt: str) -> Order:...

    @abstractmethod
    async def fetch_order(self, order_id: str) -> Order:...
