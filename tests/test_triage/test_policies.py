"""Tests for kind, tone, duplicate and curation policies."""

from issue_triage.ai.models import IssueKind, LabelRecommendation, LabelRecommendations, Tone
from issue_triage.triage.curation_policy import decide_curation_labels
from issue_triage.triage.duplicate_policy import (
    build_duplicate_comment,
    decide_duplicate_actions,
    format_similarity_percentage,
    plan_duplicate_comment_publication,
    resolve_fallback_duplicate_issue_number,
)
from issue_triage.triage.kind_policy import decide_kind_label_actions, kind_label_for
from issue_triage.triage.tone_policy import decide_tone_labels


def _kind_decision(**overrides):
    arguments = {
        "target_label": "kind/bug",
        "classification_confidence": 0.9,
        "classification_threshold": 0.8,
        "tone": Tone.NEUTRAL,
        "tone_confidence": 0.9,
        "tone_threshold": 0.75,
        "existing_labels": [],
    }
    arguments.update(overrides)
    return decide_kind_label_actions(**arguments)


class TestKindPolicy:
    """Test decide_kind_label_actions."""

    def test_label_for_kind(self) -> None:
        """Test kind label lookup."""
        assert kind_label_for(IssueKind.QUESTION) == "kind/question"
        assert kind_label_for("feature") == "kind/feature"

    def test_confident_classification_adds_target(self) -> None:
        """Test a confident classification adds the target label."""
        decision = _kind_decision()

        assert decision.labels_to_add == ["kind/bug"]
        assert decision.labels_to_remove == []
        assert decision.was_suppressed_by_hostile_tone is False

    def test_other_kind_labels_are_removed(self) -> None:
        """Test conflicting kind labels are removed and unrelated ones kept."""
        decision = _kind_decision(
            existing_labels=["kind/feature", "kind/question", "kind/bug", "area/api"]
        )

        assert decision.labels_to_add == ["kind/bug"]
        assert decision.labels_to_remove == ["kind/feature", "kind/question"]

    def test_low_confidence_changes_nothing(self) -> None:
        """Test a classification below threshold leaves labels alone."""
        decision = _kind_decision(
            classification_confidence=0.79, existing_labels=["kind/feature"]
        )

        assert decision.labels_to_add == []
        assert decision.labels_to_remove == []

    def test_hostile_tone_removes_all_kind_labels(self) -> None:
        """Test a confident hostile tone strips kind labels."""
        decision = _kind_decision(
            tone=Tone.HOSTILE,
            tone_confidence=0.75,
            existing_labels=["kind/bug", "kind/feature", "area/api"],
        )

        assert decision.labels_to_add == []
        assert decision.labels_to_remove == ["kind/bug", "kind/feature"]
        assert decision.was_suppressed_by_hostile_tone is True

    def test_unconfident_hostile_tone_does_not_suppress(self) -> None:
        """Test hostile tone below threshold does not suppress classification."""
        decision = _kind_decision(tone=Tone.HOSTILE, tone_confidence=0.5)

        assert decision.labels_to_add == ["kind/bug"]
        assert decision.was_suppressed_by_hostile_tone is False


class TestTonePolicy:
    """Test decide_tone_labels."""

    def test_hostile_is_monitored(self) -> None:
        """Test hostile tone adds the monitor label."""
        assert decide_tone_labels(Tone.HOSTILE) == ["triage/monitor"]

    def test_other_tones(self) -> None:
        """Test positive and neutral tones add nothing."""
        assert decide_tone_labels(Tone.POSITIVE) == []
        assert decide_tone_labels("neutral") == []


class TestDuplicatePolicy:
    """Test duplicate decisions and comments."""

    def test_explicit_original(self) -> None:
        """Test a resolved original issue above threshold."""
        decision = decide_duplicate_actions(
            is_duplicate=True,
            original_issue_number=12,
            similarity_score=0.906,
            has_explicit_reference=True,
            current_issue_number=42,
            fallback_original_issue_number=40,
            similarity_threshold=0.85,
        )

        assert decision.should_apply_duplicate_actions is True
        assert decision.resolved_original_issue_number == 12
        assert decision.used_fallback_original_issue is False

        publication = plan_duplicate_comment_publication(decision, 0.906)
        assert publication is not None
        assert publication.comment_body == (
            "AI Triage: Possible duplicate of #12 (Similarity: 91%)."
        )

    def test_fallback_when_no_reference(self) -> None:
        """Test the fallback issue is used when the model gave no reference."""
        decision = decide_duplicate_actions(
            is_duplicate=True,
            original_issue_number=None,
            similarity_score=0.9,
            has_explicit_reference=False,
            current_issue_number=42,
            fallback_original_issue_number=40,
            similarity_threshold=0.85,
        )

        assert decision.should_apply_duplicate_actions is True
        assert decision.resolved_original_issue_number == 40
        assert decision.used_fallback_original_issue is True

    def test_unresolved_explicit_reference_blocks_fallback(self) -> None:
        """Test an unresolved reference is never replaced by the fallback."""
        decision = decide_duplicate_actions(
            is_duplicate=True,
            original_issue_number=None,
            similarity_score=0.9,
            has_explicit_reference=True,
            current_issue_number=42,
            fallback_original_issue_number=40,
            similarity_threshold=0.85,
        )

        assert decision.should_apply_duplicate_actions is False
        assert decision.resolved_original_issue_number is None
        assert decision.used_fallback_original_issue is False
        assert plan_duplicate_comment_publication(decision, 0.9) is None

    def test_low_similarity(self) -> None:
        """Test a score below threshold blocks actions and the fallback."""
        decision = decide_duplicate_actions(
            is_duplicate=True,
            original_issue_number=None,
            similarity_score=0.5,
            has_explicit_reference=False,
            current_issue_number=42,
            fallback_original_issue_number=40,
            similarity_threshold=0.85,
        )

        assert decision.should_apply_duplicate_actions is False
        assert decision.has_similarity_score is False
        assert decision.resolved_original_issue_number is None

    def test_not_duplicate(self) -> None:
        """Test no actions without the duplicate signal."""
        decision = decide_duplicate_actions(
            is_duplicate=False,
            original_issue_number=12,
            similarity_score=0.99,
            has_explicit_reference=True,
            current_issue_number=42,
            fallback_original_issue_number=None,
            similarity_threshold=0.85,
        )

        assert decision.should_apply_duplicate_actions is False
        assert decision.has_valid_original_issue is True

    def test_resolve_fallback(self) -> None:
        """Test the first recent issue other than the current one wins."""
        assert resolve_fallback_duplicate_issue_number(42, [42, 41, 40]) == 41
        assert resolve_fallback_duplicate_issue_number(42, [42]) is None
        assert resolve_fallback_duplicate_issue_number(42, []) is None

    def test_similarity_percentage_rounds_half_up(self) -> None:
        """Test percentage rounding."""
        assert format_similarity_percentage(0.906) == 91
        assert format_similarity_percentage(0.125) == 13
        assert format_similarity_percentage(1) == 100
        assert build_duplicate_comment(7, 0.85) == (
            "AI Triage: Possible duplicate of #7 (Similarity: 85%)."
        )


def _recommendations(**entries):
    return LabelRecommendations(**entries)


def _recommend(confidence: float, should_apply: bool = True) -> LabelRecommendation:
    return LabelRecommendation(should_apply=should_apply, confidence=confidence)


def _curation(**overrides):
    arguments = {
        "label_recommendations": _recommendations(
            documentation=_recommend(0.95),
            help_wanted=_recommend(0.92),
            good_first_issue=_recommend(0.96),
        ),
        "existing_labels": [],
        "classification_type": IssueKind.FEATURE,
        "classification_confidence": 0.9,
        "classification_threshold": 0.8,
        "tone": Tone.NEUTRAL,
        "is_likely_duplicate": False,
    }
    arguments.update(overrides)
    return decide_curation_labels(**arguments)


class TestCurationPolicy:
    """Test decide_curation_labels."""

    def test_all_labels_in_order(self) -> None:
        """Test every recommended label is added in fixed order."""
        assert _curation() == ["documentation", "help wanted", "good first issue"]

    def test_bug_only_gets_help_wanted(self) -> None:
        """Test documentation and good first issue require question or feature."""
        assert _curation(classification_type=IssueKind.BUG) == ["help wanted"]

    def test_hostile_or_duplicate_gets_nothing(self) -> None:
        """Test hostile and likely duplicate issues are not curated."""
        assert _curation(tone=Tone.HOSTILE) == []
        assert _curation(is_likely_duplicate=True) == []

    def test_missing_recommendations(self) -> None:
        """Test no recommendations means no labels."""
        assert _curation(label_recommendations=None) == []

    def test_thresholds_and_existing_labels(self) -> None:
        """Test per-label thresholds and labels already present."""
        labels = _curation(
            label_recommendations=_recommendations(
                documentation=_recommend(0.89),
                help_wanted=_recommend(0.99),
                good_first_issue=_recommend(0.99, should_apply=False),
            ),
            existing_labels=["help wanted"],
        )

        assert labels == []

    def test_good_first_issue_needs_confident_classification(self) -> None:
        """Test good first issue requires a confident classification."""
        labels = _curation(classification_confidence=0.5)

        assert labels == ["documentation", "help wanted"]
