from prefilter.processor.models import AnalysisResult


class VerdictSerializer:
    """Converts analysis results to a JSON-serializable structure."""

    def serialize(self, result: AnalysisResult) -> dict[str, object]:
        verdict = result.verdict
        return {
            "screenshot_id": result.screenshot.id,
            "allow": verdict.allow,
            "categories": [category.value for category in verdict.categories],
            "categories_display": verdict.categories_display,
            "confidence": round(verdict.confidence, 4),
            "tags": list(result.screenshot.tags),
        }

    def serialize_many(self, results: dict[str, AnalysisResult]) -> list[dict[str, object]]:
        return [self.serialize(result) for result in results.values()]
