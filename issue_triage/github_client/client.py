"""GitHub API client using PyGitHub."""

import logging
import os

from github import Github
from github.GithubException import GithubException, UnknownObjectException
from github.Issue import Issue
from github.Repository import Repository

from ..triage.ports import RecentIssueSummary

logger = logging.getLogger(__name__)

NOT_FOUND_STATUS = 404
FORBIDDEN_STATUS = 403
UNPROCESSABLE_STATUS = 422

STATUS_HINTS = {
    FORBIDDEN_STATUS: "Check GITHUB_TOKEN permissions. Required scopes: repo (classic) "
    "or Issues: write (fine-grained).",
    UNPROCESSABLE_STATUS: "GitHub rejected the payload. Check label names and comment "
    "body.",
}


class GitHubClient:
    """GitHub API client for triage governance and issue history."""

    def __init__(self, token: str | None = None):
        """Initialize GitHub client with authentication.

        Args:
            token: GitHub personal access token. If None, reads from
                GITHUB_TOKEN env var.
        """
        self.token = token or os.getenv("GITHUB_TOKEN")
        if not self.token:
            raise ValueError(
                "GitHub token is required. Set GITHUB_TOKEN environment variable."
            )

        self.github = Github(self.token)

    def get_repository(self, repo: str) -> Repository:
        """Get repository object for an ``owner/repo`` name."""
        try:
            return self.github.get_repo(repo)
        except UnknownObjectException:
            raise ValueError(f"Repository {repo} not found")

    def _get_issue(self, repo: str, issue_number: int) -> Issue:
        repository = self.get_repository(repo)
        try:
            return repository.get_issue(issue_number)
        except UnknownObjectException:
            raise ValueError(f"Issue #{issue_number} not found in {repo}")

    def _log_api_error(
        self, operation: str, repo: str, issue_number: int, error: GithubException
    ) -> None:
        hint = STATUS_HINTS.get(error.status)
        message = (
            f"GitHub {operation} failed for {repo}#{issue_number} "
            f"(status {error.status}): {error.data}"
        )
        if hint:
            message = f"{message}. {hint}"
        logger.error(message)

    def add_labels(self, repo: str, issue_number: int, labels: list[str]) -> None:
        """Add labels to an issue, keeping the existing ones.

        Raises:
            ValueError: If repository or issue not found
            GithubException: For other API errors
        """
        issue = self._get_issue(repo, issue_number)
        try:
            issue.add_to_labels(*labels)
        except GithubException as e:
            self._log_api_error("add labels", repo, issue_number, e)
            raise
        logger.info(f"Added labels {labels} to {repo}#{issue_number}")

    def remove_label(self, repo: str, issue_number: int, label: str) -> None:
        """Remove a label from an issue. A label that is not there is ignored.

        Raises:
            ValueError: If repository or issue not found
            GithubException: For API errors other than 404
        """
        issue = self._get_issue(repo, issue_number)
        try:
            issue.remove_from_labels(label)
        except GithubException as e:
            if e.status == NOT_FOUND_STATUS:
                logger.info(
                    f"Label '{label}' not found on {repo}#{issue_number}, nothing to remove"
                )
                return
            self._log_api_error("remove label", repo, issue_number, e)
            raise
        logger.info(f"Removed label '{label}' from {repo}#{issue_number}")

    def create_comment(self, repo: str, issue_number: int, body: str) -> None:
        """Add a comment to an issue.

        Raises:
            ValueError: If repository or issue not found
            GithubException: For other API errors
        """
        issue = self._get_issue(repo, issue_number)
        try:
            issue.create_comment(body)
        except GithubException as e:
            self._log_api_error("create comment", repo, issue_number, e)
            raise
        logger.info(f"Added comment to {repo}#{issue_number}")

    def find_recent_issues(self, repo: str, limit: int) -> list[RecentIssueSummary]:
        """List the most recently created open issues, excluding pull requests.

        Args:
            repo: Repository in ``owner/repo`` form
            limit: Maximum number of issues to return

        Returns:
            Issue summaries, newest first
        """
        repository = self.get_repository(repo)
        summaries: list[RecentIssueSummary] = []
        for issue in repository.get_issues(state="open", sort="created", direction="desc"):
            if len(summaries) >= limit:
                break
            if issue.pull_request is not None:
                continue
            summaries.append(
                RecentIssueSummary(
                    number=issue.number,
                    title=issue.title,
                    labels=[label.name for label in issue.labels],
                    state=issue.state,
                )
            )
        return summaries

    def has_issue_comment_with_prefix(
        self, repo: str, issue_number: int, prefix: str, author_login: str
    ) -> bool:
        """Check whether an author already left a comment starting with prefix."""
        issue = self._get_issue(repo, issue_number)
        for comment in issue.get_comments():
            if comment.user is None or comment.user.login != author_login:
                continue
            if (comment.body or "").startswith(prefix):
                return True
        return False

    def get_repository_readme(self, repo: str) -> str | None:
        """Get the decoded README, or None if missing or not readable.

        Raises:
            GithubException: For API errors other than 403 and 404
        """
        repository = self.get_repository(repo)
        try:
            readme = repository.get_readme()
        except GithubException as e:
            if e.status in (NOT_FOUND_STATUS, FORBIDDEN_STATUS):
                logger.info(
                    f"README not available for {repo} (status {e.status}), "
                    f"continuing without repository context"
                )
                return None
            logger.error(f"Failed fetching README for {repo}: {e}")
            raise

        content = readme.decoded_content.decode("utf-8", errors="replace").strip()
        return content or None
