import pytest

from prefilter.detection.models import DetectionCategory
from prefilter.processor.models import (
    PRIVACY_BLOCKED_TAG,
    SENSITIVE_TAG,
    AnalysisResult,
    DetectionVerdict,
    Screenshot,
)


class TestScreenshotTags:
    def test_appends_missing_tags_in_order(self) -> None:
        shot = Screenshot(id="s1", tags=("holiday",))

        tagged = shot.with_tags(SENSITIVE_TAG, PRIVACY_BLOCKED_TAG)

        assert tagged.tags == ("holiday", "sensitive", "privacy-blocked")
        assert shot.tags == ("holiday",)

    def test_tagging_is_idempotent(self) -> None:
        shot = Screenshot(id="s1").with_tags(SENSITIVE_TAG, PRIVACY_BLOCKED_TAG)

        assert shot.with_tags(SENSITIVE_TAG, PRIVACY_BLOCKED_TAG) is shot

    def test_only_missing_tag_is_added(self) -> None:
        shot = Screenshot(id="s1", tags=("sensitive",))

        assert shot.with_tags(SENSITIVE_TAG, PRIVACY_BLOCKED_TAG).tags == (
            "sensitive",
            "privacy-blocked",
        )


class TestVerdictFromScores:
    def test_empty_scores_allow(self) -> None:
        verdict = DetectionVerdict.from_scores({})

        assert verdict.allow is True
        assert verdict.categories == ()
        assert verdict.confidence == 0.0

    def test_known_key_blocks(self) -> None:
        verdict = DetectionVerdict.from_scores({"credit_card": 0.84})

        assert verdict.allow is False
        assert verdict.categories == (DetectionCategory.CREDIT_CARD,)
        assert verdict.confidence == pytest.approx(0.84)

    def test_confidence_is_max_of_categories(self) -> None:
        verdict = DetectionVerdict.from_scores({"receipt": 0.6, "api_keys": 0.9})

        assert verdict.categories == (DetectionCategory.RECEIPT, DetectionCategory.API_KEYS)
        assert verdict.confidence == pytest.approx(0.9)

    def test_unknown_keys_are_dropped_before_aggregating(self) -> None:
        verdict = DetectionVerdict.from_scores({"nudity": 0.99, "receipt": 0.6})

        assert verdict.categories == (DetectionCategory.RECEIPT,)
        assert verdict.confidence == pytest.approx(0.6)

    def test_only_unknown_keys_allow(self) -> None:
        verdict = DetectionVerdict.from_scores({"nudity": 0.99})

        assert verdict.allow is True
        assert verdict.categories == ()
        assert verdict.confidence == 0.0

    @pytest.mark.parametrize(
        "scores",
        [{}, {"credit_card": 0.7}, {"mystery": 0.8}, {"mystery": 0.8, "bank_app": 0.55}],
    )
    def test_allow_iff_no_categories(self, scores: dict[str, float]) -> None:
        verdict = DetectionVerdict.from_scores(scores)

        assert verdict.allow == (not verdict.categories)
        assert 0.0 <= verdict.confidence <= 1.0

    def test_categories_display(self) -> None:
        verdict = DetectionVerdict.from_scores({"credit_card": 0.9, "bank_app": 0.8})

        assert verdict.has_detections
        assert verdict.categories_display == "Credit Card, Bank App"

    def test_allowed_factory(self) -> None:
        verdict = DetectionVerdict.allowed()

        assert verdict.allow is True
        assert not verdict.has_detections
        assert verdict.extracted_text is None


class TestAnalysisResult:
    def test_sensitive_flags(self) -> None:
        shot = Screenshot(id="s1").with_tags(SENSITIVE_TAG, PRIVACY_BLOCKED_TAG)
        result = AnalysisResult(DetectionVerdict.from_scores({"credit_card": 0.9}), shot)

        assert result.is_sensitive
        assert result.has_sensitive_tags

    def test_allowed_result(self) -> None:
        result = AnalysisResult(DetectionVerdict.allowed(), Screenshot(id="s1"))

        assert not result.is_sensitive
        assert not result.has_sensitive_tags
