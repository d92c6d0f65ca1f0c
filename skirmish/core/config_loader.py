"""Battle configuration and its YAML loader.

The simulation constants (starting hit points, per-faction attack power,
round cap, tuning options) are passed around explicitly as a
``BattleConfig`` instead of living in module globals, so power-tuning
trials and tests can vary them freely.

Expected YAML layout::

    battle:
      starting_hit_points: 200
      max_rounds: 10000
    factions:
      elf:
        attack_power: 3
      goblin:
        attack_power: 3
    tuning:
      faction: elf
      strategy: linear      # or "bisect"
      max_boost: null       # defaults to starting_hit_points
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Optional

import yaml

from .data import Faction, SearchStrategy, faction_from_name

DEFAULT_CONFIG_PATH = "assets/config/battle.yaml"

DEFAULT_STARTING_HIT_POINTS = 200
DEFAULT_ATTACK_POWER = 3
DEFAULT_MAX_ROUNDS = 10_000


def _default_attack_power() -> dict[Faction, int]:
    return {faction: DEFAULT_ATTACK_POWER for faction in Faction}


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Battle config section '{name}' must be a mapping, got {type(section).__name__}")
    return section


@dataclass(frozen=True)
class BattleConfig:
    """Immutable, hashable simulation settings.

    ``attack_power`` is frozen into a read-only mapping on construction.
    """
    starting_hit_points: int = DEFAULT_STARTING_HIT_POINTS
    attack_power: Mapping[Faction, int] = field(default_factory=_default_attack_power)
    max_rounds: int = DEFAULT_MAX_ROUNDS
    tuning_faction: Faction = Faction.ELF
    search_strategy: SearchStrategy = SearchStrategy.LINEAR
    max_boost: Optional[int] = None

    def __post_init__(self):
        if self.starting_hit_points <= 0:
            raise ValueError(f"starting_hit_points must be positive, got {self.starting_hit_points}")
        if self.max_rounds <= 0:
            raise ValueError(f"max_rounds must be positive, got {self.max_rounds}")
        if self.max_boost is not None and self.max_boost <= 0:
            raise ValueError(f"max_boost must be positive, got {self.max_boost}")
        for faction in Faction:
            power = self.attack_power.get(faction)
            if power is None:
                raise ValueError(f"Missing attack power for {faction.name}")
            if power < 0:
                raise ValueError(f"Attack power for {faction.name} cannot be negative")
        object.__setattr__(self, "attack_power", MappingProxyType(dict(self.attack_power)))

    def __hash__(self) -> int:
        powers = tuple(self.attack_power[faction] for faction in Faction)
        return hash((
            self.starting_hit_points,
            powers,
            self.max_rounds,
            self.tuning_faction,
            self.search_strategy,
            self.max_boost,
        ))

    def power_for(self, faction: Faction) -> int:
        """Attack power units of ``faction`` start with."""
        return self.attack_power[faction]

    def with_boost(self, faction: Faction, boost: int) -> "BattleConfig":
        """Copy of this config with ``faction``'s attack power raised by ``boost``."""
        powers = dict(self.attack_power)
        powers[faction] = powers[faction] + boost
        return replace(self, attack_power=powers)

    @property
    def effective_max_boost(self) -> int:
        """Largest boost worth trying.

        Once a single hit kills a full-health unit, raising power further
        changes nothing.
        """
        if self.max_boost is not None:
            return self.max_boost
        return self.starting_hit_points

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "BattleConfig":
        """Build a config from the nested YAML mapping. Missing keys keep defaults."""
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError("Battle config must be a mapping")

        battle_section = _section(data, "battle")
        factions_section = _section(data, "factions")
        tuning_section = _section(data, "tuning")

        attack_power = _default_attack_power()
        for faction_name, faction_data in factions_section.items():
            faction = faction_from_name(str(faction_name))
            faction_data = faction_data or {}
            if not isinstance(faction_data, dict):
                raise ValueError(f"Settings for faction {faction_name!r} must be a mapping")
            if "attack_power" in faction_data:
                attack_power[faction] = int(faction_data["attack_power"])

        kwargs: dict[str, Any] = {"attack_power": attack_power}
        if "starting_hit_points" in battle_section:
            kwargs["starting_hit_points"] = int(battle_section["starting_hit_points"])
        if "max_rounds" in battle_section:
            kwargs["max_rounds"] = int(battle_section["max_rounds"])
        if tuning_section.get("faction") is not None:
            kwargs["tuning_faction"] = faction_from_name(str(tuning_section["faction"]))
        if tuning_section.get("strategy") is not None:
            strategy = str(tuning_section["strategy"]).lower()
            try:
                kwargs["search_strategy"] = SearchStrategy(strategy)
            except ValueError:
                raise ValueError(f"Unknown search strategy: {strategy!r}")
        if tuning_section.get("max_boost") is not None:
            kwargs["max_boost"] = int(tuning_section["max_boost"])

        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Inverse of ``from_dict``."""
        return {
            "battle": {
                "starting_hit_points": self.starting_hit_points,
                "max_rounds": self.max_rounds,
            },
            "factions": {
                faction.name.lower(): {"attack_power": power}
                for faction, power in self.attack_power.items()
            },
            "tuning": {
                "faction": self.tuning_faction.name.lower(),
                "strategy": self.search_strategy.value,
                "max_boost": self.max_boost,
            },
        }


def resolve_config_path(config_path: Optional[str] = None) -> Path:
    """Resolve a config path; relative paths are taken from the project root."""
    path = config_path or DEFAULT_CONFIG_PATH
    if os.path.isabs(path) or os.path.exists(path):
        return Path(path)
    project_root = Path(__file__).parent.parent.parent
    return project_root / path


def load_battle_config(config_path: Optional[str] = None) -> BattleConfig:
    """Load a ``BattleConfig`` from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid YAML or holds invalid values
    """
    config_file = resolve_config_path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Battle config file not found: {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse battle config {config_file}: {e}") from e

    return BattleConfig.from_dict(data)
