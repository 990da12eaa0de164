from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from prefilter.config.settings import Settings
from prefilter.detection.exceptions import InitializationFailure
from prefilter.detection.factory import DetectionServiceFactory
from prefilter.detection.manifest import LIGHT_MANIFEST
from prefilter.detection.models import AnalysisMode
from prefilter.detection.service import InitState


def _make_settings(**overrides: object) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestDetectionServiceFactory:
    def test_no_model_paths_falls_back_to_heuristic(self) -> None:
        service = DetectionServiceFactory.create(_make_settings())

        assert service.initialize() is InitState.READY_FALLBACK

    def test_missing_model_file_falls_back(self, tmp_path: Path) -> None:
        settings = _make_settings(light_model_path=str(tmp_path / "missing.onnx"))

        service = DetectionServiceFactory.create(settings)

        assert service.initialize() is InitState.READY_FALLBACK
        assert service.status().models_loaded == {"light": False, "deep": False}

    @patch("prefilter.detection.factory.OnnxModelRuntime")
    def test_builds_learned_backend_per_configured_mode(
        self, mock_runtime_cls: MagicMock, tmp_path: Path
    ) -> None:
        settings = _make_settings(
            light_model_path=str(tmp_path / "light.onnx"),
            deep_model_path=str(tmp_path / "deep.onnx"),
            deep_model_categories=["receipt", "bank_app"],
        )

        service = DetectionServiceFactory.create(settings)

        assert service.initialize() is InitState.READY
        assert mock_runtime_cls.call_count == 2
        status = service.status()
        assert status.models_loaded == {"light": True, "deep": True}
        assert status.available_categories == ("credit_card", "receipt", "bank_app")

    @patch("prefilter.detection.factory.OnnxModelRuntime")
    def test_sidecar_manifest_overrides_configured_categories(
        self, mock_runtime_cls: MagicMock, tmp_path: Path
    ) -> None:
        (tmp_path / "deep.onnx.labels.json").write_text('{"categories": ["login_screen"]}')
        settings = _make_settings(deep_model_path=str(tmp_path / "deep.onnx"))

        service = DetectionServiceFactory.create(settings)
        service.initialize()

        assert service.status().available_categories == ("credit_card", "login_screen")

    def test_loaders_are_deferred_until_initialize(self, tmp_path: Path) -> None:
        settings = _make_settings(light_model_path=str(tmp_path / "light.onnx"))

        with patch("prefilter.detection.factory.OnnxModelRuntime") as mock_runtime_cls:
            service = DetectionServiceFactory.create(settings)
            mock_runtime_cls.assert_not_called()
            service.analyze(b"", AnalysisMode.OFF)
            mock_runtime_cls.assert_not_called()

    @patch("prefilter.detection.factory.CategoryManifest.for_model")
    @patch("prefilter.detection.factory.OnnxModelRuntime")
    def test_unreadable_manifest_falls_back(
        self, mock_runtime_cls: MagicMock, mock_for_model: MagicMock, tmp_path: Path
    ) -> None:
        mock_for_model.side_effect = PermissionError("denied")
        settings = _make_settings(deep_model_path=str(tmp_path / "deep.onnx"))

        service = DetectionServiceFactory.create(settings)

        assert service.initialize() is InitState.READY_FALLBACK
        assert service.status().models_loaded == {"light": False, "deep": False}

    def test_load_error_on_model_path_is_initialization_failure(self, tmp_path: Path) -> None:
        with patch(
            "prefilter.detection.factory.OnnxModelRuntime", side_effect=PermissionError("denied")
        ):
            with pytest.raises(InitializationFailure, match="denied"):
                DetectionServiceFactory._load_learned(tmp_path / "light.onnx", LIGHT_MANIFEST)
