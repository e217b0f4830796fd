"""Parsing of issue references the model gives for duplicate originals."""

import re
from typing import Any

EMBEDDED_ISSUE_NUMBER_PATTERN = re.compile(r"#?\s*([0-9]+)")
# Longer digit runs are not plausible issue numbers.
MAX_ISSUE_NUMBER_DIGITS = 15
NESTED_REFERENCE_KEYS = ("number", "issueNumber", "id", "originalIssueNumber")
MAX_NESTED_REFERENCE_DEPTH = 8


def parse_positive_issue_number(digits: str) -> int | None:
    """Convert an ASCII digit string to a positive issue number."""
    if not digits or len(digits) > MAX_ISSUE_NUMBER_DIGITS:
        return None
    if not (digits.isascii() and digits.isdigit()):
        return None
    number = int(digits)
    return number if number > 0 else None


def parse_issue_number_from_reference(value: Any, _depth: int = 0) -> int | None:
    """Resolve a positive issue number from a loosely typed reference.

    Accepts integers (including integral floats), strings such as ``"12"``,
    ``"#12"`` or ``"duplicate of #12"``, and objects carrying the number
    under ``number``, ``issueNumber``, ``id`` or ``originalIssueNumber``.

    Args:
        value: Raw reference from model output

    Returns:
        Positive issue number, or None when the reference does not resolve
    """
    if isinstance(value, bool):
        return None

    if isinstance(value, int):
        return value if value > 0 else None

    if isinstance(value, float):
        if value.is_integer() and value > 0:
            return int(value)
        return None

    if isinstance(value, str):
        candidate = value.replace("#", "", 1).strip()
        if candidate.isascii() and candidate.isdigit():
            return parse_positive_issue_number(candidate)

        match = EMBEDDED_ISSUE_NUMBER_PATTERN.search(value)
        if match is None:
            return None
        return parse_positive_issue_number(match.group(1))

    if isinstance(value, dict) and _depth < MAX_NESTED_REFERENCE_DEPTH:
        for key in NESTED_REFERENCE_KEYS:
            number = parse_issue_number_from_reference(value.get(key), _depth + 1)
            if number is not None:
                return number

    return None


def parse_first_valid_duplicate_reference(
    duplicate_of: Any, current_issue_number: int
) -> int | None:
    """Return the first reference that resolves to an issue other than the current one."""
    if duplicate_of is None:
        return None

    candidates = duplicate_of if isinstance(duplicate_of, list) else [duplicate_of]
    for candidate in candidates:
        number = parse_issue_number_from_reference(candidate)
        if number is not None and number != current_issue_number:
            return number
    return None
