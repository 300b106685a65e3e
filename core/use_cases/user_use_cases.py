import logging
from typing import Tuple
from passlib.context import CryptContext
from core.entities.user import User
from core.errors import AuthError, NotFoundError, ValidationError, ConflictError
from core.repositories.user_repository import UserRepository
from core.services.token_service import TokenService


logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)

def _normalize_email(email: str) -> str:
    return email.strip().lower()

def register_user(
    repo: UserRepository,
    tokens: TokenService,
    name: str,
    email: str,
    password: str,
    initial_credits: int = 0,
) -> Tuple[str, User]:
    if not name or not name.strip() or not email or not email.strip() or not password:
        raise ValidationError("Please fill all the fields")
    email = _normalize_email(email)
    if repo.get_by_email(email) is not None:
        raise ConflictError("User with this email already exists")
    password_hash = get_password_hash(password)
    user = repo.create_user(
        name=name.strip(), email=email, password_hash=password_hash, credit_balance=initial_credits
    )
    logger.info("Registered user id=%s", user.id)
    return tokens.issue(user.id), user

def login_user(repo: UserRepository, tokens: TokenService, email: str, password: str) -> Tuple[str, User]:
    if not email or not password:
        raise ValidationError("Please fill all the fields")
    user = repo.get_by_email(_normalize_email(email))
    if not user:
        raise NotFoundError("User not found")
    if not verify_password(password, user.password_hash):
        logger.info("Rejected login for user id=%s", user.id)
        raise AuthError("Invalid credentials")
    return tokens.issue(user.id), user

def get_credits(repo: UserRepository, user_id: int) -> User:
    user = repo.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
