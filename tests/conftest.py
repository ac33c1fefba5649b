import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("COOKIE_SECURE", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from main import app
from dependencies import create_access_token, get_session
from auth.security import get_password_hash
from models import Post, User


@pytest.fixture
def test_db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)

@pytest.fixture
def db_session(test_db_engine):
    with Session(test_db_engine) as session:
        yield session

@pytest.fixture
def client(db_session):
    app.dependency_overrides[get_session] = lambda: db_session
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()

@pytest.fixture
def make_user(db_session):
    def _make_user(username="author", password="testpass123", **fields):
        user = User(
            username=username,
            email=f"{username}@example.com",
            password=get_password_hash(password),
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make_user

@pytest.fixture
def user(make_user):
    return make_user()

@pytest.fixture
def other_user(make_user):
    return make_user(username="someone_else")

@pytest.fixture
def make_post(db_session):
    def _make_post(owner, title="A post title", body="Some post body"):
        post = Post(title=title, body=body, user_id=owner.id)
        db_session.add(post)
        db_session.commit()
        db_session.refresh(post)
        return post
    return _make_post

@pytest.fixture
def login_as(client):
    """Send the following requests as the given user"""
    def _login_as(user):
        client.cookies.set("access_token", create_access_token({"sub": user.username}))
        return client
    return _login_as
