"""Unit tests for settings."""

import pytest

from entity_topology.config import Settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self) -> None:
        """Test rendering defaults."""
        s = Settings()
        assert (s.default_width, s.default_height) == (400, 300)
        assert s.matrix_threshold == 50
        assert (s.min_scale, s.max_scale) == (0.4, 3.2)
        assert s.drag_alpha_target == 0.35

    def test_test_settings(self, test_settings: Settings) -> None:
        """Test the test profile runs shorter settles."""
        assert test_settings.settle_ticks == 50
        assert test_settings.log_level == "DEBUG"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test values are read from TOPOLOGY_ prefixed variables."""
        monkeypatch.setenv("TOPOLOGY_MATRIX_THRESHOLD", "10")
        monkeypatch.setenv("TOPOLOGY_MAX_SCALE", "5")
        s = Settings()
        assert s.matrix_threshold == 10
        assert s.max_scale == 5.0
