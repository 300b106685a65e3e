import sqlite3
from datetime import datetime, timezone
from typing import Optional
from pathlib import Path

from core.entities.user import User
from core.entities.transaction import Transaction
from core.errors import ConflictError, NotFoundError
from core.repositories.user_repository import UserRepository

def init_db(db_path: str) -> None:
    if db_path != ":memory:" and not db_path.startswith("file:"):
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path, check_same_thread=False)
    try:
        cur = conn.cursor()

        cur.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            email TEXT UNIQUE NOT NULL,
            password_hash TEXT NOT NULL,
            credit_balance INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL
        );
        """)

        cur.execute("""
        CREATE TABLE IF NOT EXISTS transactions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL,
            plan TEXT NOT NULL,
            credits INTEGER NOT NULL,
            amount INTEGER NOT NULL,
            payment INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL,
            FOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE
        );
        """)
        conn.commit()
    finally:
        conn.close()

class SQLiteUserRepository(UserRepository):
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            credit_balance=int(row["credit_balance"]),
            created_at=row["created_at"],
        )

    def _row_to_tx(self, row: sqlite3.Row) -> Transaction:
        return Transaction(
            id=row["id"],
            user_id=row["user_id"],
            plan=row["plan"],
            credits=int(row["credits"]),
            amount=int(row["amount"]),
            created_at=row["created_at"],
            payment=bool(row["payment"]),
        )

    def create_user(self, name: str, email: str, password_hash: str, credit_balance: int = 0) -> User:
        created_at = datetime.now(timezone.utc).isoformat()
        cur = self.conn.cursor()
        try:
            cur.execute(
                "INSERT INTO users (name, email, password_hash, credit_balance, created_at) VALUES (?, ?, ?, ?, ?)",
                (name, email, password_hash, int(credit_balance), created_at),
            )
        except sqlite3.IntegrityError:
            self.conn.rollback()
            raise ConflictError("User with this email already exists")
        self.conn.commit()
        user_id = cur.lastrowid
        return User(id=user_id, name=name, email=email, password_hash=password_hash,
                    credit_balance=int(credit_balance), created_at=created_at)

    def get_by_email(self, email: str) -> Optional[User]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM users WHERE email = ?", (email,))
        row = cur.fetchone()
        return self._row_to_user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM users WHERE id = ?", (user_id,))
        row = cur.fetchone()
        return self._row_to_user(row) if row else None

    def debit_credit_if_positive(self, user_id: int) -> Optional[User]:
        cur = self.conn.cursor()
        cur.execute(
            "UPDATE users SET credit_balance = credit_balance - 1 WHERE id = ? AND credit_balance > 0",
            (int(user_id),),
        )
        if cur.rowcount == 0:
            self.conn.rollback()
            if self.get_by_id(user_id) is None:
                raise NotFoundError("User not found")
            return None
        self.conn.commit()
        user = self.get_by_id(user_id)
        assert user is not None
        return user

    # транзакции пополнения
    def create_transaction(self, user_id: int, plan: str, credits: int, amount: int) -> Transaction:
        created_at = datetime.now(timezone.utc).isoformat()
        cur = self.conn.cursor()
        cur.execute(
            "INSERT INTO transactions (user_id, plan, credits, amount, payment, created_at) VALUES (?, ?, ?, ?, 0, ?)",
            (int(user_id), plan, int(credits), int(amount), created_at),
        )
        self.conn.commit()
        return Transaction(id=cur.lastrowid, user_id=int(user_id), plan=plan, credits=int(credits),
                           amount=int(amount), created_at=created_at, payment=False)

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM transactions WHERE id = ?", (int(transaction_id),))
        row = cur.fetchone()
        return self._row_to_tx(row) if row else None

    def delete_transaction(self, transaction_id: int) -> None:
        cur = self.conn.cursor()
        cur.execute("DELETE FROM transactions WHERE id = ? AND payment = 0", (int(transaction_id),))
        self.conn.commit()

    def apply_payment(self, transaction_id: int) -> Optional[User]:
        # флаг и начисление - одна транзакция БД
        with self.conn:
            cur = self.conn.cursor()
            cur.execute(
                "UPDATE transactions SET payment = 1 WHERE id = ? AND payment = 0",
                (int(transaction_id),),
            )
            if cur.rowcount == 0:
                return None
            cur.execute(
                "UPDATE users SET credit_balance = credit_balance + "
                "(SELECT credits FROM transactions WHERE id = ?) "
                "WHERE id = (SELECT user_id FROM transactions WHERE id = ?)",
                (int(transaction_id), int(transaction_id)),
            )
            if cur.rowcount == 0:
                raise NotFoundError("User not found")
            cur.execute("SELECT user_id FROM transactions WHERE id = ?", (int(transaction_id),))
            user_id = cur.fetchone()["user_id"]
        return self.get_by_id(user_id)
