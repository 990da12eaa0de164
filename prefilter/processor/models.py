from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

from prefilter.detection.models import DetectionCategory, RawScoreMap

SENSITIVE_TAG = "sensitive"
PRIVACY_BLOCKED_TAG = "privacy-blocked"


@dataclass(frozen=True)
class Screenshot:
    """Subject of an analysis. Owned by the caller; never mutated in place."""

    id: str
    image_bytes: bytes | None = None
    file_path: Path | None = None
    tags: tuple[str, ...] = ()

    def with_tags(self, *tags: str) -> Screenshot:
        """Copy with any missing *tags* appended, or self if none are missing."""
        missing: list[str] = []
        for tag in tags:
            if tag not in self.tags and tag not in missing:
                missing.append(tag)
        if not missing:
            return self
        return replace(self, tags=(*self.tags, *missing))


@dataclass(frozen=True)
class DetectionVerdict:
    """Allow/block decision plus the evidence behind it."""

    allow: bool
    categories: tuple[DetectionCategory, ...] = ()
    confidence: float = 0.0
    extracted_text: str | None = None

    @classmethod
    def allowed(cls) -> DetectionVerdict:
        return cls(allow=True)

    @classmethod
    def from_scores(cls, raw_scores: RawScoreMap) -> DetectionVerdict:
        """Translate backend scores into the taxonomy.

        Unknown keys are dropped before aggregating, so a verdict blocks
        exactly when it carries at least one category.
        """
        categories: list[DetectionCategory] = []
        contributing: list[float] = []
        for key, score in raw_scores.items():
            category = DetectionCategory.from_key(key)
            if category is None or category in categories:
                continue
            categories.append(category)
            contributing.append(score)
        return cls(
            allow=not categories,
            categories=tuple(categories),
            confidence=max(contributing, default=0.0),
        )

    @property
    def has_detections(self) -> bool:
        return bool(self.categories)

    @property
    def categories_display(self) -> str:
        return ", ".join(category.display_name for category in self.categories)


@dataclass(frozen=True)
class AnalysisResult:
    """Verdict paired with the (possibly re-tagged) screenshot."""

    verdict: DetectionVerdict
    screenshot: Screenshot

    @property
    def is_sensitive(self) -> bool:
        return not self.verdict.allow

    @property
    def has_sensitive_tags(self) -> bool:
        return SENSITIVE_TAG in self.screenshot.tags
