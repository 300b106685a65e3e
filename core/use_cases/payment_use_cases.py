import logging
from dataclasses import dataclass
from typing import Optional

from core.entities.plan import get_plan
from core.errors import ConfigError, ConflictError, NotFoundError, ServiceError, ValidationError
from core.repositories.user_repository import UserRepository
from core.services.payment_provider import Order, PaymentProvider


logger = logging.getLogger(__name__)

PAID_STATUS = "paid"
GATEWAY_NOT_CONFIGURED = "Server configuration error: payment gateway keys not found"


def _require_configured(provider: PaymentProvider) -> None:
    if not provider.is_configured:
        logger.error("Payment gateway keys are not configured")
        raise ConfigError(GATEWAY_NOT_CONFIGURED)


@dataclass
class VerificationResult:
    success: bool
    message: str
    credit_balance: Optional[int] = None


async def create_order(
    repo: UserRepository,
    provider: PaymentProvider,
    user_id: int,
    plan_id: Optional[str],
    currency: str,
) -> Order:
    _require_configured(provider)
    user = repo.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    plan = get_plan(plan_id)
    if plan is None:
        raise ValidationError("Invalid plan ID")

    tx = repo.create_transaction(user_id=user.id, plan=plan.name, credits=plan.credits, amount=plan.amount)
    try:
        order = await provider.create_order(
            amount_minor=plan.amount_minor, currency=currency, receipt=tx.receipt
        )
    except ServiceError:
        # заказ в шлюзе не создан - запись транзакции не нужна
        repo.delete_transaction(tx.id)
        logger.warning("Order creation failed for transaction %s, record removed", tx.id)
        raise
    logger.info(
        "Created %s order %s for user id=%s (transaction %s, %s %s)",
        provider.name, order.get("id"), user.id, tx.id, plan.amount_minor, currency,
    )
    return order


async def verify_order(repo: UserRepository, provider: PaymentProvider, order_id: Optional[str]) -> VerificationResult:
    _require_configured(provider)
    if not order_id or not str(order_id).strip():
        raise ValidationError("Order ID is required")

    order = await provider.fetch_order(str(order_id).strip())
    if order.get("status") != PAID_STATUS:
        logger.info("Order %s not paid (status=%s)", order_id, order.get("status"))
        return VerificationResult(success=False, message="Payment not successful")

    try:
        transaction_id = int(order.get("receipt"))
    except (TypeError, ValueError):
        raise NotFoundError("Transaction not found")
    tx = repo.get_transaction(transaction_id)
    if tx is None:
        raise NotFoundError("Transaction not found")
    if tx.payment:
        raise ConflictError("Payment already verified")

    user = repo.apply_payment(tx.id)
    if user is None:
        # параллельная проверка успела раньше
        raise ConflictError("Payment already verified")
    logger.info("Applied transaction %s: +%s credits for user id=%s", tx.id, tx.credits, user.id)
    return VerificationResult(
        success=True, message="Payment verified successfully", credit_balance=user.credit_balance
    )
