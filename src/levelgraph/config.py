"""Progression configuration loading."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

from levelgraph.graph.models import PROGRESSION_ROOT_ID, PROGRESSION_ROOT_LABEL
from levelgraph.progression.constants import MINUTES_PER_EXP_UNIT

CONFIG_FILENAME = "levelgraph.yaml"
ENV_MINUTES_PER_EXP_UNIT = "LEVELGRAPH_MINUTES_PER_EXP_UNIT"


@dataclass(frozen=True)
class ProgressionConfig:
    """Tunable parameters of the progression pipeline.

    Resolution order for ``minutes_per_exp_unit``:
    1. Environment variable LEVELGRAPH_MINUTES_PER_EXP_UNIT
    2. ``progression.minutes_per_exp_unit`` in the config file
    3. Default (30)

    Attributes:
        minutes_per_exp_unit: Minutes of activity worth one EXP unit.
        root_id: Node id of the progression root.
        root_label: Display label of the progression root.
    """

    minutes_per_exp_unit: int = MINUTES_PER_EXP_UNIT
    root_id: str = PROGRESSION_ROOT_ID
    root_label: str = PROGRESSION_ROOT_LABEL

    def __post_init__(self) -> None:
        if self.minutes_per_exp_unit <= 0:
            raise ValueError("minutes_per_exp_unit must be positive")
        if not self.root_id or not self.root_label:
            raise ValueError("root_id and root_label must not be empty")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProgressionConfig:
        """Create config from the ``progression`` section of a config file."""
        minutes = os.getenv(ENV_MINUTES_PER_EXP_UNIT) or data.get(
            "minutes_per_exp_unit", MINUTES_PER_EXP_UNIT
        )
        return cls(
            minutes_per_exp_unit=int(minutes),
            root_id=str(data.get("root_id", PROGRESSION_ROOT_ID)),
            root_label=str(data.get("root_label", PROGRESSION_ROOT_LABEL)),
        )


class ConfigError(Exception):
    """Raised when the configuration file cannot be loaded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load config at {path}: {reason}")


def _read_section(config_path: Path) -> dict[str, Any]:
    yaml = YAML(typ="safe")
    with config_path.open("r", encoding="utf-8") as f:
        data = yaml.load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(config_path, "Top level must be a mapping")

    section = data.get("progression") or {}
    if not isinstance(section, dict):
        raise ConfigError(config_path, "'progression' must be a mapping")
    return dict(section)


def load_config(config_path: Path | None = None) -> ProgressionConfig:
    """Load progression configuration from a YAML file.

    A missing file (or no path at all) yields the defaults, still subject to
    environment overrides.

    Args:
        config_path: Path to a YAML file, or a directory containing
            ``levelgraph.yaml``.

    Returns:
        ProgressionConfig instance.

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values.
    """
    if config_path is not None and config_path.is_dir():
        config_path = config_path / CONFIG_FILENAME
    source = config_path if config_path is not None else Path(CONFIG_FILENAME)

    try:
        section: dict[str, Any] = {}
        if config_path is not None and config_path.exists():
            section = _read_section(config_path)
        return ProgressionConfig.from_dict(section)
    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(source, str(e)) from e
