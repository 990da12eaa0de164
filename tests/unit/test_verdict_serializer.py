import json

from prefilter.processor.models import (
    AnalysisResult,
    DetectionVerdict,
    Screenshot,
)
from prefilter.processor.verdict_serializer import VerdictSerializer


class TestVerdictSerializer:
    def test_blocked_result(self) -> None:
        shot = Screenshot(id="s1").with_tags("sensitive", "privacy-blocked")
        verdict = DetectionVerdict.from_scores({"credit_card": 0.842157, "receipt": 0.61})

        data = VerdictSerializer().serialize(AnalysisResult(verdict, shot))

        assert data == {
            "screenshot_id": "s1",
            "allow": False,
            "categories": ["credit_card", "receipt"],
            "categories_display": "Credit Card, Receipt",
            "confidence": 0.8422,
            "tags": ["sensitive", "privacy-blocked"],
        }

    def test_allowed_result(self) -> None:
        data = VerdictSerializer().serialize(
            AnalysisResult(DetectionVerdict.allowed(), Screenshot(id="s2"))
        )

        assert data["allow"] is True
        assert data["categories"] == []
        assert data["categories_display"] == ""
        assert data["confidence"] == 0.0

    def test_serialize_many_is_json_ready(self) -> None:
        results = {
            "a": AnalysisResult(DetectionVerdict.allowed(), Screenshot(id="a")),
            "b": AnalysisResult(DetectionVerdict.allowed(), Screenshot(id="b")),
        }

        payload = VerdictSerializer().serialize_many(results)

        assert [item["screenshot_id"] for item in payload] == ["a", "b"]
        assert json.loads(json.dumps(payload)) == payload
