from abc import ABC, abstractmethod
from typing import Optional
from core.entities.user import User
from core.entities.transaction import Transaction


class UserRepository(ABC):
    @abstractmethod
    def create_user(self, name: str, email: str, password_hash: str, credit_balance: int = 0) -> User:...

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:...

    @abstractmethod
    def get_by_id(self, user_id: int) -> Optional[User]:...

    @abstractmethod
    def debit_credit_if_positive(self, user_id: int) -> Optional[User]:
        """Атомарно списывает один кредит. None, если баланс уже нулевой."""

    @abstractmethod
    def create_transaction(self, user_id: int, plan: str, credits: int, amount: int) -> Transaction:...

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:...

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:...

    @abstractmethod
    def apply_payment(self, transaction_id: int) -> Optional[User]:
        """Отмечает оплату и начисляет кредиты в одной транзакции БД.

        None, если транзакция уже была применена.
        """
