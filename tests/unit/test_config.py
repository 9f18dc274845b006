"""Tests for progression configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from levelgraph.config import (
    CONFIG_FILENAME,
    ENV_MINUTES_PER_EXP_UNIT,
    ConfigError,
    ProgressionConfig,
    load_config,
)

if TYPE_CHECKING:
    from pathlib import Path


class TestProgressionConfig:
    """Tests for ProgressionConfig class."""

    def test_defaults(self) -> None:
        """Defaults match the built-in constants."""
        config = ProgressionConfig()

        assert config.minutes_per_exp_unit == 30
        assert config.root_id == "progression"
        assert config.root_label == "Progression"

    def test_from_dict(self) -> None:
        """Parse every supported key."""
        config = ProgressionConfig.from_dict(
            {"minutes_per_exp_unit": 45, "root_id": "life", "root_label": "Life"}
        )

        assert config.minutes_per_exp_unit == 45
        assert config.root_id == "life"
        assert config.root_label == "Life"

    def test_from_dict_empty_uses_defaults(self) -> None:
        """Empty dict uses system defaults."""
        assert ProgressionConfig.from_dict({}) == ProgressionConfig()

    def test_env_overrides_dict(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The environment variable beats the file value."""
        monkeypatch.setenv(ENV_MINUTES_PER_EXP_UNIT, "60")

        config = ProgressionConfig.from_dict({"minutes_per_exp_unit": 45})

        assert config.minutes_per_exp_unit == 60

    @pytest.mark.parametrize("minutes", [0, -30])
    def test_rejects_non_positive_unit(self, minutes: int) -> None:
        """The EXP unit must be a positive number of minutes."""
        with pytest.raises(ValueError, match="must be positive"):
            ProgressionConfig(minutes_per_exp_unit=minutes)

    def test_rejects_empty_root(self) -> None:
        with pytest.raises(ValueError, match="must not be empty"):
            ProgressionConfig(root_label="")


class TestLoadConfig:
    """Tests for load_config function."""

    def test_no_path_returns_defaults(self) -> None:
        assert load_config() == ProgressionConfig()

    def test_missing_file_returns_defaults(self, tmp_path: Path) -> None:
        assert load_config(tmp_path / "absent.yaml") == ProgressionConfig()

    def test_missing_file_still_honours_env(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(ENV_MINUTES_PER_EXP_UNIT, "15")

        config = load_config(tmp_path / "absent.yaml")

        assert config.minutes_per_exp_unit == 15

    def test_loads_progression_section(self, tmp_path: Path) -> None:
        """Values are read from the progression section."""
        path = tmp_path / "custom.yaml"
        path.write_text("progression:\n  minutes_per_exp_unit: 20\n  root_label: Life\n")

        config = load_config(path)

        assert config.minutes_per_exp_unit == 20
        assert config.root_label == "Life"
        assert config.root_id == "progression"

    def test_directory_resolves_default_filename(self, tmp_path: Path) -> None:
        """A directory is searched for levelgraph.yaml."""
        (tmp_path / CONFIG_FILENAME).write_text("progression:\n  minutes_per_exp_unit: 10\n")

        assert load_config(tmp_path).minutes_per_exp_unit == 10

    def test_empty_file_returns_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("")

        assert load_config(path) == ProgressionConfig()

    def test_other_sections_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("name: journal\nui:\n  theme: dark\n")

        assert load_config(path) == ProgressionConfig()

    def test_non_mapping_top_level(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("- one\n- two\n")

        with pytest.raises(ConfigError, match="Top level must be a mapping"):
            load_config(path)

    def test_non_mapping_section(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("progression: 30\n")

        with pytest.raises(ConfigError, match="'progression' must be a mapping"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Parse errors are wrapped with the offending path."""
        path = tmp_path / CONFIG_FILENAME
        path.write_text("progression: [unclosed\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config(path)

        assert exc_info.value.path == path

    def test_invalid_value(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("progression:\n  minutes_per_exp_unit: 0\n")

        with pytest.raises(ConfigError, match="must be positive"):
            load_config(path)

    def test_non_numeric_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(ENV_MINUTES_PER_EXP_UNIT, "half an hour")

        with pytest.raises(ConfigError):
            load_config()
