"""Explicit pairing between a model's output positions and category keys."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from prefilter.detection.exceptions import InitializationFailure

MANIFEST_SUFFIX = ".labels.json"


@dataclass(frozen=True)
class CategoryManifest:
    """Category key for each position of a model's output vector, in order."""

    keys: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.keys:
            raise ValueError("A category manifest needs at least one key")
        if len(set(self.keys)) != len(self.keys):
            raise ValueError(f"Duplicate keys in category manifest: {list(self.keys)}")

    def pair(self, predictions: Iterable[float]) -> list[tuple[str, float]]:
        """Pair predictions with keys; surplus on either side is ignored."""
        return [(key, float(score)) for key, score in zip(self.keys, predictions)]

    @classmethod
    def from_file(cls, path: Path) -> CategoryManifest:
        """Load ``{"categories": [...]}`` from *path*.

        Raises:
            InitializationFailure: if the file is unreadable or malformed.
        """
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise InitializationFailure(f"Failed to load manifest {path}: {exc}") from exc
        categories = data.get("categories") if isinstance(data, dict) else None
        if not isinstance(categories, list) or not all(isinstance(c, str) for c in categories):
            raise InitializationFailure(f"Manifest {path} must hold a 'categories' string list")
        try:
            return cls(tuple(categories))
        except ValueError as exc:
            raise InitializationFailure(f"Invalid manifest {path}: {exc}") from exc

    @classmethod
    def for_model(cls, model_path: Path, default: CategoryManifest) -> CategoryManifest:
        """Manifest shipped next to *model_path*, else *default*."""
        sidecar = model_path.with_name(model_path.name + MANIFEST_SUFFIX)
        if sidecar.is_file():
            return cls.from_file(sidecar)
        return default


LIGHT_MANIFEST = CategoryManifest(("credit_card",))
DEEP_MANIFEST = CategoryManifest(("credit_card", "api_keys", "secure_document", "receipt"))
