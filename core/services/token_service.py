from abc import ABC, abstractmethod
from typing import Optional


class TokenService(ABC):
    @abstractmethod
    def issue(self, user_id: int) -> str:...

    @abstractmethod
    def verify(self, token: Optional[str]) -> int:
        """Return the user id encoded in the token or raise AuthError."""
