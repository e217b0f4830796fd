"""Test configuration and fixtures."""

import copy
from typing import Any
from unittest.mock import AsyncMock

import pytest

CANONICAL_ANALYSIS: dict[str, Any] = {
    "classification": {
        "type": "bug",
        "confidence": 0.92,
        "reasoning": "Stack trace after upgrade",
    },
    "duplicateDetection": {
        "isDuplicate": False,
        "originalIssueNumber": None,
        "similarityScore": 0.1,
    },
    "sentiment": {
        "tone": "neutral",
        "confidence": 0.9,
        "reasoning": "Matter-of-fact report",
    },
}


@pytest.fixture
def canonical_analysis() -> dict[str, Any]:
    """Canonical analysis payload that individual tests can modify."""
    return copy.deepcopy(CANONICAL_ANALYSIS)


@pytest.fixture
def governance_gateway() -> AsyncMock:
    """Governance gateway recording every call."""
    gateway = AsyncMock()
    gateway.add_labels.return_value = None
    gateway.remove_label.return_value = None
    gateway.create_comment.return_value = None
    gateway.log_validated_issue.return_value = None
    return gateway


@pytest.fixture
def history_gateway() -> AsyncMock:
    """Issue history gateway with no recent issues and no prior comments."""
    gateway = AsyncMock()
    gateway.find_recent_issues.return_value = []
    gateway.has_issue_comment_with_prefix.return_value = False
    return gateway
