from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

RawScoreMap = dict[str, float]


class AnalysisMode(str, Enum):
    """How strictly screenshots are checked before leaving the device."""

    OFF = "off"
    LIGHT = "light"
    DEEP = "deep"

    @classmethod
    def parse(cls, value: object) -> AnalysisMode:
        """Parse a persisted mode name. Anything unrecognized is LIGHT."""
        if not isinstance(value, str):
            return cls.LIGHT
        name = value.strip().lower()
        # "none" is how older preference files spell OFF
        if name in ("off", "none"):
            return cls.OFF
        if name == "deep":
            return cls.DEEP
        return cls.LIGHT

    @property
    def display_name(self) -> str:
        """Label shown in the mode picker."""
        return _MODE_DISPLAY_NAMES[self]

    @property
    def is_enabled(self) -> bool:
        """True for every mode that runs detection."""
        return self is not AnalysisMode.OFF


_MODE_DISPLAY_NAMES: dict[AnalysisMode, str] = {
    AnalysisMode.OFF: "Off",
    AnalysisMode.LIGHT: "Light (Recommended)",
    AnalysisMode.DEEP: "Deep",
}


class DetectionCategory(str, Enum):
    """Closed taxonomy of sensitive content the prefilter can report."""

    CREDIT_CARD = "credit_card"
    API_KEYS = "api_keys"
    UI_PATTERN = "ui_pattern"
    SECURE_DOCUMENT = "secure_document"
    BANK_STATEMENT = "bank_statement"
    API_DOCUMENTATION = "api_documentation"
    PASSWORD_MANAGER = "password_manager"
    CRYPTO_WALLET = "crypto_wallet"
    LOGIN_SCREEN = "login_screen"
    RECEIPT = "receipt"
    BANK_APP = "bank_app"

    @classmethod
    def from_key(cls, key: str) -> DetectionCategory | None:
        """Category for a backend key, or None for keys this build does not know."""
        try:
            return cls(key)
        except ValueError:
            return None

    @property
    def display_name(self) -> str:
        """Title Case form of the key, e.g. "Api Keys"."""
        return " ".join(word.capitalize() for word in self.value.split("_") if word)


@dataclass(frozen=True)
class DetectionOutcome:
    """Raw per-category scores produced by one backend call."""

    raw_scores: RawScoreMap = field(default_factory=dict)
    backend: str = "none"

    @classmethod
    def empty(cls) -> DetectionOutcome:
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.raw_scores
