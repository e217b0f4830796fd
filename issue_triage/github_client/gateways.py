"""Async gateway adapters over the synchronous GitHub client."""

import asyncio
import logging

from ..triage.ports import RecentIssueSummary
from .client import GitHubClient

logger = logging.getLogger(__name__)


class GitHubGovernanceGateway:
    """Governance gateway backed by GitHub issues."""

    def __init__(self, client: GitHubClient):
        self.client = client

    async def add_labels(self, repo: str, issue_number: int, labels: list[str]) -> None:
        await asyncio.to_thread(self.client.add_labels, repo, issue_number, labels)

    async def remove_label(self, repo: str, issue_number: int, label: str) -> None:
        await asyncio.to_thread(self.client.remove_label, repo, issue_number, label)

    async def create_comment(self, repo: str, issue_number: int, body: str) -> None:
        await asyncio.to_thread(self.client.create_comment, repo, issue_number, body)

    async def log_validated_issue(self, repo: str, issue_number: int) -> None:
        logger.info(f"Issue {repo}#{issue_number} passed integrity validation")


class GitHubIssueHistoryGateway:
    """Issue history gateway backed by GitHub issues and comments."""

    def __init__(self, client: GitHubClient):
        self.client = client

    async def find_recent_issues(self, repo: str, limit: int) -> list[RecentIssueSummary]:
        return await asyncio.to_thread(self.client.find_recent_issues, repo, limit)

    async def has_issue_comment_with_prefix(
        self, repo: str, issue_number: int, prefix: str, author_login: str
    ) -> bool:
        return await asyncio.to_thread(
            self.client.has_issue_comment_with_prefix,
            repo,
            issue_number,
            prefix,
            author_login,
        )


class GitHubRepositoryContextGateway:
    """Repository context gateway reading the GitHub README."""

    def __init__(self, client: GitHubClient):
        self.client = client

    async def get_repository_readme(self, repo: str) -> str | None:
        return await asyncio.to_thread(self.client.get_repository_readme, repo)
