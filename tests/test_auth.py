import pytest
from fastapi import status
from sqlmodel import select

from models import User
from auth.security import verify_password


def test_login_page_is_public(client):
    response = client.get("/auth/login")
    assert response.status_code == status.HTTP_200_OK

def test_login_user(client, user):
    response = client.post("/auth/token", data={
        "username": "author",
        "password": "testpass123"
    })
    assert response.status_code == status.HTTP_303_SEE_OTHER
    assert response.headers["location"].endswith("/posts")
    assert "access_token" in response.cookies

    # the cookie is enough to reach protected pages
    assert client.get("/posts").status_code == status.HTTP_200_OK

def test_login_with_wrong_password(client, user):
    response = client.post("/auth/token", data={
        "username": "author",
        "password": "wrong-password"
    })
    assert response.status_code == status.HTTP_302_FOUND
    assert response.headers["location"].endswith("/auth/login")
    assert "access_token" not in response.cookies
    assert "These credentials do not match our records." in client.get("/auth/login").text

def test_disabled_user_cannot_login(client, make_user):
    make_user(username="banned", disabled=True)
    response = client.post("/auth/token", data={
        "username": "banned",
        "password": "testpass123"
    })
    assert "access_token" not in response.cookies

def test_logout_clears_cookie(client, user):
    client.post("/auth/token", data={"username": "author", "password": "testpass123"})
    assert client.get("/posts").status_code == status.HTTP_200_OK

    response = client.post("/auth/logout")
    assert response.status_code == status.HTTP_303_SEE_OTHER
    assert client.get("/posts").status_code == status.HTTP_302_FOUND

def test_register_user(client, db_session):
    response = client.post("/auth/register", data={
        "username": "newuser",
        "email": "new@example.com",
        "password": "testpass123"
    })
    assert response.status_code == status.HTTP_303_SEE_OTHER
    assert response.headers["location"].endswith("/auth/login")

    user = db_session.exec(select(User).where(User.username == "newuser")).one()
    assert user.email == "new@example.com"
    assert verify_password("testpass123", user.password)

def test_register_rejects_taken_username(client, db_session, user):
    response = client.post("/auth/register", data={
        "username": user.username,
        "email": "again@example.com",
        "password": "testpass123"
    })
    assert response.status_code == status.HTTP_302_FOUND
    assert len(db_session.exec(select(User)).all()) == 1
    assert "The username has already been taken." in client.get("/auth/register").text

@pytest.mark.parametrize("field", ["username", "email", "password"])
def test_register_requires_fields(client, db_session, field):
    data = {"username": "newuser", "email": "new@example.com", "password": "testpass123"}
    data[field] = ""
    response = client.post("/auth/register", data=data)
    assert response.status_code == status.HTTP_302_FOUND
    assert db_session.exec(select(User)).first() is None
    assert f"The {field} field is required." in client.get("/auth/register").text

def test_register_race_on_username_is_reported_as_taken(client, db_session, user, monkeypatch):
    # both registrations pass the lookup; the unique index rejects the second
    monkeypatch.setattr("routers.auth.get_user", lambda username, session: None)
    response = client.post("/auth/register", data={
        "username": user.username,
        "email": "again@example.com",
        "password": "testpass123"
    })
    assert response.status_code == status.HTTP_302_FOUND
    assert response.headers["location"].endswith("/auth/register")
    assert len(db_session.exec(select(User)).all()) == 1
    assert "The username has already been taken." in client.get("/auth/register").text
