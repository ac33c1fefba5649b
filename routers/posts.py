from typing import Annotated
from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
import logging

from core.errors import ValidationFailed
from models import PostInput
from dependencies import (
    AuthContextDep, PostServiceDep, templates, pop_flash, redirect_back_with_errors,
    require_auth_context
)

router = APIRouter(dependencies=[Depends(require_auth_context)])
logger = logging.getLogger(__name__)

TitleForm = Annotated[str | None, Form()]
BodyForm = Annotated[str | None, Form()]


@router.get("", response_class=HTMLResponse)
async def list_posts(
    request: Request,
    context: AuthContextDep,
    service: PostServiceDep,
):
    """List every post, whoever wrote it"""
    posts = service.list_posts(context)
    return templates.TemplateResponse(
        request,
        "posts/index.html",
        {"posts": posts, "current_user": context.user},
    )

@router.get("/create", response_class=HTMLResponse)
async def create_post_form(request: Request, context: AuthContextDep):
    """Render the new post form, with any errors from a rejected submission"""
    user = context.require_user()
    errors, old = pop_flash(request)
    return templates.TemplateResponse(
        request,
        "posts/create.html",
        {"errors": errors, "old": old, "current_user": user},
    )

@router.post("", response_class=HTMLResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    request: Request,
    context: AuthContextDep,
    service: PostServiceDep,
    title: TitleForm = None,
    body: BodyForm = None,
):
    """Create a post owned by the current user"""
    data = PostInput(title=title, body=body)
    try:
        post = service.create_post(context, data)
    except ValidationFailed as exc:
        logger.info(f"Rejected new post: {exc}")
        return redirect_back_with_errors(
            request, str(request.url_for("create_post_form")), exc.errors, data.model_dump()
        )
    return templates.TemplateResponse(
        request,
        "posts/show.html",
        {"post": post, "current_user": context.user},
        status_code=status.HTTP_201_CREATED,
    )

@router.get("/{post_id}", response_class=HTMLResponse)
async def get_post(
    post_id: int,
    request: Request,
    context: AuthContextDep,
    service: PostServiceDep,
):
    """Show a single post"""
    post = service.get_post(context, post_id)
    return templates.TemplateResponse(
        request,
        "posts/show.html",
        {"post": post, "current_user": context.user},
    )

@router.get("/{post_id}/edit", response_class=HTMLResponse)
async def edit_post_form(
    post_id: int,
    request: Request,
    context: AuthContextDep,
    service: PostServiceDep,
):
    """Render the edit form for the post's owner"""
    post = service.edit_post(context, post_id)
    errors, old = pop_flash(request)
    if not old:
        old = {"title": post.title, "body": post.body}
    return templates.TemplateResponse(
        request,
        "posts/edit.html",
        {"post": post, "errors": errors, "old": old, "current_user": context.user},
    )

@router.api_route("/{post_id}", methods=["PUT", "PATCH"])
async def update_post(
    post_id: int,
    request: Request,
    context: AuthContextDep,
    service: PostServiceDep,
    title: TitleForm = None,
    body: BodyForm = None,
):
    """Replace a post's title and body; only its owner may do this"""
    data = PostInput(title=title, body=body)
    try:
        post = service.update_post(context, post_id, data)
    except ValidationFailed as exc:
        logger.info(f"Rejected update of post {post_id}: {exc}")
        return redirect_back_with_errors(
            request,
            str(request.url_for("edit_post_form", post_id=post_id)),
            exc.errors,
            data.model_dump(),
        )
    return RedirectResponse(
        str(request.url_for("get_post", post_id=post.id)),
        status_code=status.HTTP_303_SEE_OTHER,
    )

@router.delete("/{post_id}")
async def delete_post(
    post_id: int,
    request: Request,
    context: AuthContextDep,
    service: PostServiceDep,
):
    """Delete a post permanently; only its owner may do this"""
    service.delete_post(context, post_id)
    return RedirectResponse(
        str(request.url_for("list_posts")),
        status_code=status.HTTP_303_SEE_OTHER,
    )
