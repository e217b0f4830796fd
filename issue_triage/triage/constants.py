"""Fixed labels, messages and patterns used by triage governance."""

import re

SUPPORTED_WEBHOOK_ACTIONS = ("opened", "edited")
OPENED_ACTION = "opened"

# Governance labels
NEEDS_INFO_LABEL = "triage/needs-info"
INVALID_LABEL = "triage/invalid"
DUPLICATE_LABEL = "triage/duplicate"
MONITOR_LABEL = "triage/monitor"

KIND_LABELS = {
    "bug": "kind/bug",
    "feature": "kind/feature",
    "question": "kind/question",
}

DOCUMENTATION_LABEL = "documentation"
HELP_WANTED_LABEL = "help wanted"
GOOD_FIRST_ISSUE_LABEL = "good first issue"

# Comment prefixes
DUPLICATE_COMMENT_PREFIX = "AI Triage: Possible duplicate of #"
QUESTION_AI_SUGGESTED_COMMENT_PREFIX = "AI Triage: Suggested guidance"
QUESTION_FALLBACK_CHECKLIST_COMMENT_PREFIX = "AI Triage: Suggested setup checklist"
VALIDATION_COMMENT_HEADER = "Issue validation failed. Please fix the following items:"

# Integrity validation
TITLE_MIN_LENGTH = 10
DESCRIPTION_MIN_LENGTH = 30

TITLE_REQUIRED_ERROR = "Title is required"
TITLE_TOO_SHORT_ERROR = f"Title is too short (min {TITLE_MIN_LENGTH} chars)"
DESCRIPTION_REQUIRED_ERROR = "Description is required"
DESCRIPTION_TOO_SHORT_ERROR = (
    f"Description is too short (min {DESCRIPTION_MIN_LENGTH} chars) to be useful"
)
AUTHOR_REQUIRED_ERROR = "Author is required"
SPAM_ERROR = "Content contains spam keywords"

SPAM_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"\bcasino\b",
        r"\bfree\s+money\b",
        r"\bcheap\s+rolex\b",
        r"\bcrypto\s+giveaway\b",
        r"\bviagra\b",
        r"\bgana\s+dinero\b",
        r"\btrabaja(?:r)?\s+desde\s+casa\b",
        r"\bwork(?:ing)?\s+from\s+home\b",
    )
)

# Grounding detection
MIN_GROUNDING_TOKEN_LENGTH = 5
MIN_GROUNDING_TOKEN_MATCHES = 2
GROUNDING_STOP_WORDS = frozenset(
    {
        "this",
        "that",
        "with",
        "from",
        "have",
        "your",
        "about",
        "into",
        "there",
        "which",
        "when",
        "where",
        "what",
        "how",
        "for",
        "and",
        "the",
        "are",
        "you",
        "repo",
        "readme",
        "issue",
        "setup",
        "checklist",
    }
)
