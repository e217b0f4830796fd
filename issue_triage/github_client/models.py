"""Pydantic models for GitHub ``issues`` webhook payloads.

These models map to the GitHub webhook event payload for issues.
API Reference: https://docs.github.com/en/webhooks/webhook-events-and-payloads#issues
"""

from pydantic import BaseModel, Field

from ..triage.use_cases import ProcessIssueWebhookCommand


class GitHubUser(BaseModel):
    """GitHub user account."""

    login: str = Field(..., description="GitHub username/login (string)")
    id: int | None = Field(None, description="Unique user identifier (integer)")


class GitHubLabel(BaseModel):
    """Repository label attached to an issue."""

    name: str = Field(..., description="Name of the label (string)")
    color: str | None = Field(
        None, description="Hexadecimal color code without leading # (string)"
    )


class WebhookIssue(BaseModel):
    """Issue object embedded in an ``issues`` event."""

    number: int | str = Field(..., description="Issue number within the repository")
    title: str | None = Field(None, description="Title of the issue (string)")
    body: str | None = Field(None, description="Contents of the issue (string)")
    user: GitHubUser | None = Field(None, description="Issue author details")
    labels: list[GitHubLabel] = Field(
        default_factory=list, description="Labels currently on the issue"
    )


class WebhookRepository(BaseModel):
    """Repository object embedded in an ``issues`` event."""

    full_name: str = Field(..., description="Repository in owner/repo form")


class IssueWebhookPayload(BaseModel):
    """GitHub ``issues`` webhook event."""

    action: str = Field(..., description="Action that triggered the event")
    issue: WebhookIssue
    repository: WebhookRepository

    def to_command(self) -> ProcessIssueWebhookCommand:
        """Map the payload to a webhook processing command."""
        return ProcessIssueWebhookCommand(
            action=self.action,
            repository_full_name=self.repository.full_name,
            issue_number=self.issue.number,
            title=self.issue.title,
            body=self.issue.body,
            author=self.issue.user.login if self.issue.user else None,
            labels=[label.name for label in self.issue.labels],
        )
