from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from config.settings import Settings
from core.services.payment_provider import PaymentProvider
from core.use_cases.payment_use_cases import create_order, verify_order
from infrastructure.db.sqlite import SQLiteUserRepository
from infrastructure.web.dependencies import get_current_user_id, get_payment_provider, get_settings, get_user_repo


router = APIRouter(prefix="/api/user", tags=["billing"])


class OrderRequest(BaseModel):
    planId: Optional[str] = None

class OrderResponse(BaseModel):
    success: bool = True
    order: Dict[str, Any]

class VerifyRequest(BaseModel):
    razorpay_order_id: Optional[str] = None

class VerifyResponse(BaseModel):
    success: bool
    message: str
    creditBalance: Optional[int] = None


@router.post("/pay-razor", response_model=OrderResponse)
async def pay_razor(
    payload: OrderRequest,
    user_id: int = Depends(get_current_user_id),
    repo: SQLiteUserRepository = Depends(get_user_repo),
    provider: PaymentProvider = Depends(get_payment_provider),
    settings: Settings = Depends(get_settings),
):
    order = await create_order(repo, provider, user_id=user_id, plan_id=payload.planId, currency=settings.CURRENCY)
    return OrderResponse(order=order)

@router.post("/verify-razor", response_model=VerifyResponse, response_model_exclude_none=True)
async def verify_razor(
    payload: VerifyRequest,
    user_id: int = Depends(get_current_user_id),
    repo: SQLiteUserRepository = Depends(get_user_repo),
    provider: PaymentProvider = Depends(get_payment_provider),
):
    result = await verify_order(repo, provider, payload.razorpay_order_id)
    return VerifyResponse(success=result.success, message=result.message, creditBalance=result.credit_balance)
