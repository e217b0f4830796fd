"""In-memory counters for question response sources."""

from .question_policy import QuestionResponseSource


class InMemoryQuestionResponseMetrics:
    """Process-local question response counters.

    ``increment`` has no await point, so it is safe to share between
    coroutines on the same event loop.
    """

    def __init__(self) -> None:
        self._counts = {source: 0 for source in QuestionResponseSource}

    def increment(self, source: QuestionResponseSource) -> None:
        self._counts[QuestionResponseSource(source)] += 1

    def snapshot(self) -> dict[str, int]:
        ai_suggested = self._counts[QuestionResponseSource.AI_SUGGESTED_RESPONSE]
        fallback = self._counts[QuestionResponseSource.FALLBACK_CHECKLIST]
        return {
            "ai_suggested_response": ai_suggested,
            "fallback_checklist": fallback,
            "total": ai_suggested + fallback,
        }
