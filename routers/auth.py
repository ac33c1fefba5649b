from datetime import timedelta
from typing import Annotated
from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.exc import IntegrityError
import logging

from models import User, UserCreate
from dependencies import (
    SessionDep, authenticate_user, create_access_token, get_user,
    templates, pop_flash, redirect_back_with_errors
)
from auth.security import get_password_hash
from core.config import get_settings

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)


@router.get("/login", response_class=HTMLResponse)
async def login_form(request: Request):
    """Render the login form"""
    errors, old = pop_flash(request)
    return templates.TemplateResponse(
        request, "auth/login.html", {"errors": errors, "old": old}
    )

@router.post("/token")
async def login_for_access_token(
    request: Request,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    session: SessionDep,
):
    """Check credentials and store the access token in a cookie"""
    user = authenticate_user(form_data.username, form_data.password, session)
    if not user:
        logger.info(f"Failed login for {form_data.username}")
        return redirect_back_with_errors(
            request,
            str(request.url_for("login_form")),
            {"username": ["These credentials do not match our records."]},
            {"username": form_data.username},
        )

    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": user.username},
        expires_delta=access_token_expires
    )

    response = RedirectResponse(
        str(request.url_for("list_posts")), status_code=status.HTTP_303_SEE_OTHER
    )
    response.set_cookie(
        key="access_token",
        value=f"Bearer {access_token}",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    return response

@router.post("/logout")
async def logout(request: Request):
    """Logout endpoint that clears the authentication cookie"""
    response = RedirectResponse(
        str(request.url_for("login_form")), status_code=status.HTTP_303_SEE_OTHER
    )
    response.delete_cookie("access_token")
    return response

@router.get("/register", response_class=HTMLResponse)
async def register_form(request: Request):
    """Render the registration form"""
    errors, old = pop_flash(request)
    return templates.TemplateResponse(
        request, "auth/register.html", {"errors": errors, "old": old}
    )

@router.post("/register")
async def register(
    request: Request,
    session: SessionDep,
    username: Annotated[str, Form()] = "",
    email: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    full_name: Annotated[str | None, Form()] = None,
):
    """Create a new user account"""
    user_in = UserCreate(
        username=username.strip(),
        email=email.strip(),
        password=password,
        full_name=full_name or None,
    )

    errors: dict[str, list[str]] = {}
    if not user_in.username:
        errors["username"] = ["The username field is required."]
    elif get_user(user_in.username, session):
        errors["username"] = ["The username has already been taken."]
    if not user_in.email:
        errors["email"] = ["The email field is required."]
    if not user_in.password.strip():
        errors["password"] = ["The password field is required."]

    if errors:
        return redirect_back_with_errors(
            request,
            str(request.url_for("register_form")),
            errors,
            {"username": user_in.username, "email": user_in.email, "full_name": full_name},
        )

    user = User(
        username=user_in.username,
        email=user_in.email,
        full_name=user_in.full_name,
        password=get_password_hash(user_in.password),
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        # a concurrent registration took the username after the check above
        session.rollback()
        logger.info(f"Registration lost race for username {user_in.username}")
        return redirect_back_with_errors(
            request,
            str(request.url_for("register_form")),
            {"username": ["The username has already been taken."]},
            {"username": user_in.username, "email": user_in.email, "full_name": full_name},
        )
    logger.info(f"Registered user {user_in.username}")

    return RedirectResponse(
        str(request.url_for("login_form")), status_code=status.HTTP_303_SEE_OTHER
    )
