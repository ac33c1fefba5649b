from pydantic import BaseModel, Field

from core.config import get_settings

settings = get_settings()


class ValidationResult(BaseModel):
    errors: dict[str, list[str]] = Field(default_factory=dict)
    title: str = ""
    body: str = ""

    @property
    def ok(self) -> bool:
        return not self.errors

    def add(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)


def _clean(value: str | None) -> str:
    return (value or "").strip()


def validate_post(title: str | None, body: str | None) -> ValidationResult:
    """Check a submitted title/body pair.

    Both fields are trimmed first, so whitespace-only input counts as missing.
    The trimmed values are carried on the result for persisting.
    """
    result = ValidationResult(title=_clean(title), body=_clean(body))

    if not result.title:
        result.add("title", "The title field is required.")
    elif len(result.title) > settings.TITLE_MAX_LENGTH:
        result.add(
            "title",
            f"The title may not be greater than {settings.TITLE_MAX_LENGTH} characters.",
        )

    if not result.body:
        result.add("body", "The body field is required.")

    return result
