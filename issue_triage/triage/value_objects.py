"""Value objects for issue identity and content."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..ai.references import EMBEDDED_ISSUE_NUMBER_PATTERN, parse_positive_issue_number


@dataclass(frozen=True)
class IssueNumber:
    """Positive issue number within a repository."""

    value: int

    @classmethod
    def create(cls, value: int) -> "IssueNumber":
        """Create an issue number.

        Raises:
            ValueError: If the value is not a positive integer
        """
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValueError(f'Invalid issue number: "{value}"')
        return cls(value)

    @classmethod
    def from_unknown(cls, value: Any) -> "IssueNumber | None":
        """Parse an issue number from webhook or CLI input.

        Accepts positive integers, digit strings with an optional ``#``
        prefix, and strings with an embedded ``#123`` reference.
        """
        if isinstance(value, bool):
            return None

        if isinstance(value, int):
            return cls(value) if value >= 1 else None

        if not isinstance(value, str):
            return None

        candidate = value.strip().removeprefix("#").strip()
        if candidate.isascii() and candidate.isdigit():
            number = parse_positive_issue_number(candidate)
        else:
            match = EMBEDDED_ISSUE_NUMBER_PATTERN.search(value)
            number = parse_positive_issue_number(match.group(1)) if match else None
        return cls(number) if number is not None else None


@dataclass(frozen=True)
class RepositoryFullName:
    """Repository identifier in ``owner/repo`` form."""

    owner: str
    repo: str

    @property
    def value(self) -> str:
        return f"{self.owner}/{self.repo}"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def create(cls, raw: str) -> "RepositoryFullName":
        """Parse an ``owner/repo`` string.

        Raises:
            ValueError: If the value is not exactly two non-empty segments
        """
        parts = raw.strip().split("/") if isinstance(raw, str) else []
        if len(parts) != 2 or not all(part.strip() for part in parts):
            raise ValueError(f'Invalid repository full name: "{raw}"')
        return cls(owner=parts[0].strip(), repo=parts[1].strip())

    @classmethod
    def from_unknown(cls, raw: Any) -> "RepositoryFullName | None":
        if not isinstance(raw, str):
            return None
        try:
            return cls.create(raw)
        except ValueError:
            return None


@dataclass(frozen=True)
class IssueId:
    """Globally unique issue identifier, ``owner/repo#number``."""

    repository: RepositoryFullName
    number: IssueNumber

    @property
    def value(self) -> str:
        return f"{self.repository.value}#{self.number.value}"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class _IssueText:
    raw: str | None

    @property
    def normalized_value(self) -> str:
        return (self.raw or "").strip()

    def has_text(self) -> bool:
        return bool(self.normalized_value)

    def has_min_length(self, min_length: int) -> bool:
        return len(self.normalized_value) >= min_length


class IssueTitle(_IssueText):
    """Issue title."""


class IssueDescription(_IssueText):
    """Issue body."""


class IssueAuthor(_IssueText):
    """Login of the issue author."""


@dataclass(frozen=True)
class IssueCreatedAt:
    """Issue creation timestamp."""

    value: datetime

    @classmethod
    def create(cls, value: datetime | str) -> "IssueCreatedAt":
        """Create from a datetime or an ISO 8601 string.

        Raises:
            ValueError: If the value is not a valid date
        """
        if isinstance(value, str):
            try:
                value = datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                raise ValueError("Invalid issue createdAt date") from None
        if not isinstance(value, datetime):
            raise ValueError("Invalid issue createdAt date")
        return cls(value)
