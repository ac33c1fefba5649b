from .user import User, UserCreate
from .post import Post, PostInput
from .auth import AuthContext, TokenData

__all__ = [
    "User", "UserCreate",
    "Post", "PostInput",
    "AuthContext", "TokenData",
]
