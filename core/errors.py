class PostServiceError(Exception):
    """Base class for failures raised by the post service"""


class NotAuthenticated(PostServiceError):
    """The request carries no valid session"""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class PostNotFound(PostServiceError):
    def __init__(self, post_id: int):
        self.post_id = post_id
        super().__init__(f"Post {post_id} not found")


class AuthorizationFailure(PostServiceError):
    """The caller tried to change a post owned by someone else"""

    def __init__(self, post_id: int, user_id: int):
        self.post_id = post_id
        self.user_id = user_id
        super().__init__(f"User {user_id} does not own post {post_id}")


class ValidationFailed(PostServiceError):
    """Raised with the field-keyed messages of a rejected submission"""

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        super().__init__(", ".join(sorted(errors)))
