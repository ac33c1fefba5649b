from dataclasses import dataclass
from pydantic import BaseModel

from core.errors import NotAuthenticated
from .user import User


class TokenData(BaseModel):
    username: str | None = None


@dataclass(frozen=True)
class AuthContext:
    """Who is making the current request; anonymous when user is None"""
    user: User | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def require_user(self) -> User:
        if self.user is None:
            raise NotAuthenticated()
        return self.user
