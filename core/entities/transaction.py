from dataclasses import dataclass
from typing import Optional

@dataclass
class Transaction:
    id: Optional[int]
    user_id: int
    plan: str           # Basic | Advanced | Business
    credits: int        # сколько кредитов начислить после оплаты
    amount: int         # цена в основных единицах валюты
    created_at: str
    payment: bool = False  # True только после успешной проверки оплаты

    @property
    def receipt(self) -> str:
        return str(self.id)
