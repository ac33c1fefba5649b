from typing import List

import structlog
from prometheus_client import Counter
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from core.errors import AuthorizationFailure, PostNotFound, ValidationFailed
from models import AuthContext, Post, PostInput
from models.post import utcnow
from services.validation import validate_post

logger = structlog.get_logger(__name__)

# Largest value a 64-bit signed INTEGER primary key can hold
MAX_POST_ID = 2**63 - 1

posts_written_total = Counter(
    "posts_written_total",
    "Posts successfully created, updated or deleted",
    ["operation"],
)


class PostService:
    """Post CRUD guarded by the caller's AuthContext.

    Every operation rejects anonymous callers with NotAuthenticated before
    touching storage. Updates and deletes additionally require the caller to
    own the post and raise AuthorizationFailure otherwise, leaving the record
    untouched.
    """

    def __init__(self, session: Session):
        self.session = session

    def list_posts(self, context: AuthContext) -> List[Post]:
        context.require_user()
        return self.session.exec(select(Post).order_by(Post.id.desc())).all()

    def get_post(self, context: AuthContext, post_id: int) -> Post:
        context.require_user()
        return self._find_post(post_id)

    def edit_post(self, context: AuthContext, post_id: int) -> Post:
        """Fetch a post for its owner, ahead of an update"""
        return self._get_owned_post(context, post_id, "edit")

    def create_post(self, context: AuthContext, data: PostInput) -> Post:
        user = context.require_user()
        result = validate_post(data.title, data.body)
        if not result.ok:
            raise ValidationFailed(result.errors)

        # The owner always comes from the session, never from the submission
        post = Post(title=result.title, body=result.body, user_id=user.id)
        self.session.add(post)
        self._commit()
        self.session.refresh(post)

        posts_written_total.labels(operation="create").inc()
        logger.info("post_created", post_id=post.id, user_id=user.id)
        return post

    def update_post(self, context: AuthContext, post_id: int, data: PostInput) -> Post:
        post = self._get_owned_post(context, post_id, "update")
        result = validate_post(data.title, data.body)
        if not result.ok:
            raise ValidationFailed(result.errors)

        post.title = result.title
        post.body = result.body
        post.updated_at = utcnow()
        self.session.add(post)
        self._commit()
        self.session.refresh(post)

        posts_written_total.labels(operation="update").inc()
        logger.info("post_updated", post_id=post.id, user_id=post.user_id)
        return post

    def delete_post(self, context: AuthContext, post_id: int) -> None:
        post = self._get_owned_post(context, post_id, "delete")
        owner_id = post.user_id
        self.session.delete(post)
        self._commit()

        posts_written_total.labels(operation="delete").inc()
        logger.info("post_deleted", post_id=post_id, user_id=owner_id)

    def _get_owned_post(self, context: AuthContext, post_id: int, action: str) -> Post:
        user = context.require_user()
        post = self._find_post(post_id)
        if not post.is_owned_by(user):
            logger.warning(
                "post_write_denied",
                action=action,
                post_id=post_id,
                owner_id=post.user_id,
                user_id=user.id,
            )
            raise AuthorizationFailure(post_id, user.id)
        return post

    def _find_post(self, post_id: int) -> Post:
        # ids outside the INTEGER column range never match a row
        post = self.session.get(Post, post_id) if 1 <= post_id <= MAX_POST_ID else None
        if not post:
            raise PostNotFound(post_id)
        return post

    def _commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
