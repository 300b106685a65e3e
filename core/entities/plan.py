from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class Plan:
    name: str
    credits: int
    amount: int  # основные единицы валюты (рупии)

    @property
    def amount_minor(self) -> int:
        return self.amount * 100


PLANS: Dict[str, Plan] = {
    "Basic": Plan(name="Basic", credits=100, amount=10),
    "Advanced": Plan(name="Advanced", credits=500, amount=50),
    "Business": Plan(name="Business", credits=5000, amount=250),
}


def get_plan(plan_id: Optional[str]) -> Optional[Plan]:
    if not plan_id:
        return None
    return PLANS.get(plan_id)
