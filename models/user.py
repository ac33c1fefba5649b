from sqlmodel import Field, SQLModel, Relationship
from datetime import datetime, timezone
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from .post import Post


class UserBase(SQLModel):
    username: str = Field(index=True, unique=True)
    full_name: str | None = Field(default=None)
    email: str = Field(index=True)


class User(UserBase, table=True):
    id: int | None = Field(default=None, primary_key=True)
    password: str
    disabled: bool = Field(default=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    posts: List["Post"] = Relationship(back_populates="user", cascade_delete=True)


class UserCreate(UserBase):
    password: str
