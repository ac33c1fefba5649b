from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Annotated
from uuid import uuid4
import logging
from time import time

from fastapi import Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlmodel import Session, select, create_engine
from jwt.exceptions import InvalidTokenError
import jwt

from core.config import get_settings
from core.errors import AuthorizationFailure, NotAuthenticated, PostNotFound
from models import AuthContext, User, TokenData
from auth.security import verify_password
from services.posts import PostService

settings = get_settings()
logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(settings.DATABASE_URL, echo=settings.DB_ECHO, connect_args=connect_args)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

# Database dependency
def get_session():
    with Session(engine) as session:
        yield session

SessionDep = Annotated[Session, Depends(get_session)]

def get_user(username: str, session: Session) -> User | None:
    return session.exec(select(User).where(User.username == username)).first()

def authenticate_user(username: str, password: str, session: Session) -> User | None:
    user = get_user(username, session)
    if not user or user.disabled:
        return None
    if not verify_password(password, user.password):
        return None
    return user

def create_access_token(data: dict, expires_delta: timedelta | None = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta if expires_delta else timedelta(minutes=15)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

# Authentication context
async def get_auth_context(request: Request, session: SessionDep) -> AuthContext:
    """Resolve the access_token cookie into the caller's AuthContext.

    Anything short of a valid token for an enabled user yields an anonymous
    context; handlers decide whether anonymous callers are allowed.
    """
    token = request.cookies.get("access_token")
    if not token:
        return AuthContext()
    token = token.replace("Bearer ", "")
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        token_data = TokenData(username=payload.get("sub"))
    except InvalidTokenError as e:
        logger.info(f"Ignoring invalid access token: {e}")
        return AuthContext()

    if token_data.username is None:
        return AuthContext()

    user = get_user(token_data.username, session)
    if user is None or user.disabled:
        return AuthContext()
    return AuthContext(user=user)

AuthContextDep = Annotated[AuthContext, Depends(get_auth_context)]

async def require_auth_context(context: AuthContextDep) -> AuthContext:
    """Reject anonymous callers before path and body parameters are validated"""
    context.require_user()
    return context

def get_post_service(session: SessionDep) -> PostService:
    return PostService(session)

PostServiceDep = Annotated[PostService, Depends(get_post_service)]

# Flashed session data
def flash(request: Request, errors: dict[str, list[str]], old: dict | None = None):
    request.session["errors"] = errors
    request.session["old"] = old or {}

def pop_flash(request: Request) -> tuple[dict[str, list[str]], dict]:
    return request.session.pop("errors", {}), request.session.pop("old", {})

def redirect_back_with_errors(
    request: Request, url: str, errors: dict[str, list[str]], old: dict | None = None
) -> RedirectResponse:
    flash(request, errors, old)
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)

# Middleware
async def log_requests(request: Request, call_next):
    start_time = time()
    response = await call_next(request)
    process_time = time() - start_time

    logger.info(
        f"Path: {request.url.path} | "
        f"Method: {request.method} | "
        f"Status: {response.status_code} | "
        f"Process Time: {process_time:.2f}s"
    )
    return response

async def method_override(request: Request, call_next):
    """Let HTML forms reach PUT/PATCH/DELETE routes via POST ?_method=..."""
    override = request.query_params.get("_method", "").upper()
    if request.method == "POST" and override in ("PUT", "PATCH", "DELETE"):
        request.scope["method"] = override
    return await call_next(request)

# Error handlers
def setup_error_handlers(app):
    @app.exception_handler(NotAuthenticated)
    async def not_authenticated_handler(request: Request, exc: NotAuthenticated):
        logger.info(f"Redirecting anonymous {request.method} {request.url.path} to login")
        return RedirectResponse(settings.LOGIN_URL, status_code=status.HTTP_302_FOUND)

    @app.exception_handler(PostNotFound)
    async def post_not_found_handler(request: Request, exc: PostNotFound):
        return templates.TemplateResponse(
            request,
            "error.html",
            {"title": "Not Found", "message": str(exc)},
            status_code=status.HTTP_404_NOT_FOUND,
        )

    @app.exception_handler(AuthorizationFailure)
    async def authorization_failure_handler(request: Request, exc: AuthorizationFailure):
        return templates.TemplateResponse(
            request,
            "error.html",
            {"title": "Forbidden", "message": "You can only change your own posts."},
            status_code=status.HTTP_403_FORBIDDEN,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        error_id = str(uuid4())
        logger.error(
            f"Unhandled error {error_id}: {str(exc)}",
            exc_info=True,
            extra={
                "path": request.url.path,
                "method": request.method,
                "error_id": error_id,
            },
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "An unexpected error occurred", "error_id": error_id},
        )
