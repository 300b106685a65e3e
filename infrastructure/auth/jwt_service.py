from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError

from core.errors import AuthError
from core.services.token_service import TokenService


class JoseTokenService(TokenService):
    """HS256 JWT with claim {"id": <user id>}; exp is added only when expire_minutes > 0."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 0):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, user_id: int) -> str:
        to_encode = {"id": int(user_id)}
        if self.expire_minutes > 0:
            to_encode["exp"] = datetime.now(timezone.utc) + timedelta(minutes=self.expire_minutes)
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: Optional[str]) -> int:
        if not token:
            raise AuthError("No token provided", kind=AuthError.MISSING)
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            raise AuthError(f"Token verification failed: {e}", kind=AuthError.INVALID)
        user_id = payload.get("id")
        if user_id is None or isinstance(user_id, bool):
            raise AuthError("Invalid token structure", kind=AuthError.MALFORMED)
        try:
            return int(user_id)
        except (TypeError, ValueError):
            raise AuthError("Invalid token structure", kind=AuthError.MALFORMED)
