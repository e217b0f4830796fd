"""Issue entity and integrity validation."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from .constants import (
    AUTHOR_REQUIRED_ERROR,
    DESCRIPTION_MIN_LENGTH,
    DESCRIPTION_REQUIRED_ERROR,
    DESCRIPTION_TOO_SHORT_ERROR,
    SPAM_ERROR,
    SPAM_PATTERNS,
    TITLE_MIN_LENGTH,
    TITLE_REQUIRED_ERROR,
    TITLE_TOO_SHORT_ERROR,
)
from .value_objects import (
    IssueAuthor,
    IssueCreatedAt,
    IssueDescription,
    IssueId,
    IssueTitle,
)


@dataclass(frozen=True)
class IssueIntegrityValidationResult:
    """Outcome of integrity validation with errors in detection order."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Issue:
    """Issue content as received from the tracker."""

    id: IssueId
    title: IssueTitle
    description: IssueDescription
    author: IssueAuthor
    created_at: IssueCreatedAt

    @classmethod
    def create(
        cls,
        id: IssueId,
        title: str | None,
        description: str | None,
        author: str | None,
        created_at: datetime | str | None = None,
    ) -> "Issue":
        return cls(
            id=id,
            title=IssueTitle(title),
            description=IssueDescription(description),
            author=IssueAuthor(author),
            created_at=IssueCreatedAt.create(created_at or datetime.now(timezone.utc)),
        )

    def contains_spam(self) -> bool:
        content = f"{self.title.normalized_value}\n{self.description.normalized_value}"
        return any(pattern.search(content) for pattern in SPAM_PATTERNS)

    def validate_integrity(self) -> IssueIntegrityValidationResult:
        """Validate title, description, author and spam content.

        Each check contributes at most one error. Spam is reported once no
        matter how many patterns match.
        """
        errors: list[str] = []

        if not self.title.has_text():
            errors.append(TITLE_REQUIRED_ERROR)
        elif not self.title.has_min_length(TITLE_MIN_LENGTH):
            errors.append(TITLE_TOO_SHORT_ERROR)

        if not self.description.has_text():
            errors.append(DESCRIPTION_REQUIRED_ERROR)
        elif not self.description.has_min_length(DESCRIPTION_MIN_LENGTH):
            errors.append(DESCRIPTION_TOO_SHORT_ERROR)

        if not self.author.has_text():
            errors.append(AUTHOR_REQUIRED_ERROR)

        if self.contains_spam():
            errors.append(SPAM_ERROR)

        return IssueIntegrityValidationResult(is_valid=not errors, errors=errors)
