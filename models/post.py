from sqlmodel import Field, SQLModel, Relationship
from datetime import datetime, timezone
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .user import User


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PostBase(SQLModel):
    title: str = Field(max_length=255)
    body: str


class Post(PostBase, table=True):
    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True, ondelete="CASCADE")
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    user: "User" = Relationship(back_populates="posts")

    def is_owned_by(self, user: "User") -> bool:
        return user is not None and self.user_id == user.id


class PostInput(SQLModel):
    """Raw title/body as submitted, before validation"""
    title: str | None = None
    body: str | None = None
