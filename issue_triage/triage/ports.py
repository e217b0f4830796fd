"""Gateway interfaces the triage engine depends on."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from .question_policy import QuestionResponseSource


@dataclass(frozen=True)
class RecentIssueSummary:
    """Open issue used for duplicate fallback and prompt context."""

    number: int
    title: str
    labels: list[str] = field(default_factory=list)
    state: str = "open"


class GovernanceGateway(Protocol):
    """Performs governance actions against the issue tracker.

    Removing a label that is not on the issue must succeed silently.
    """

    async def add_labels(self, repo: str, issue_number: int, labels: list[str]) -> None: ...

    async def remove_label(self, repo: str, issue_number: int, label: str) -> None: ...

    async def create_comment(self, repo: str, issue_number: int, body: str) -> None: ...

    async def log_validated_issue(self, repo: str, issue_number: int) -> None: ...


class IssueHistoryGateway(Protocol):
    """Reads prior issues and comments."""

    async def find_recent_issues(
        self, repo: str, limit: int
    ) -> Sequence[RecentIssueSummary]: ...

    async def has_issue_comment_with_prefix(
        self, repo: str, issue_number: int, prefix: str, author_login: str
    ) -> bool: ...


class RepositoryContextGateway(Protocol):
    """Reads repository documentation used to ground responses."""

    async def get_repository_readme(self, repo: str) -> str | None: ...


class LlmGateway(Protocol):
    """Produces raw model text for a triage prompt."""

    async def generate(self, user_prompt: str, system_prompt: str = ...) -> str: ...


class QuestionResponseMetrics(Protocol):
    """Counts published question response sources."""

    def increment(self, source: QuestionResponseSource) -> None: ...

    def snapshot(self) -> dict[str, int]: ...
