"""GitHub API client and gateway adapters."""

from .client import GitHubClient
from .gateways import (
    GitHubGovernanceGateway,
    GitHubIssueHistoryGateway,
    GitHubRepositoryContextGateway,
)
from .models import IssueWebhookPayload

__all__ = [
    "GitHubClient",
    "GitHubGovernanceGateway",
    "GitHubIssueHistoryGateway",
    "GitHubRepositoryContextGateway",
    "IssueWebhookPayload",
]
