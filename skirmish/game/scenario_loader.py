"""Loading battle scenarios from YAML files and plain text maps.

Scenario YAML layout::

    name: Skirmish in the Caves
    description: Optional text
    map:
      layout: |            # inline map ...
        #######
        #.G.E.#
        #######
      # source: maps/caves.txt   ... or a path relative to this file
    units:                 # optional extra placements
      - faction: elf
        at: [1, 1]         # [row, column]
    config:                # optional, same shape as the battle config file
      factions:
        elf:
          attack_power: 3
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml

from ..core.config_loader import BattleConfig
from ..core.data import Faction, FACTION_NAMES, Vector2, faction_from_name
from .map import MapFormatError
from .scenario import BattleScenario


class ScenarioLoader:
    """Handles loading scenarios from YAML files and text maps."""

    @staticmethod
    def load(file_path: str, config: Optional[BattleConfig] = None) -> BattleScenario:
        """Load a ``.yaml``/``.yml`` scenario or a plain text map, by extension."""
        if Path(file_path).suffix.lower() in (".yaml", ".yml"):
            return ScenarioLoader.load_from_file(file_path, config)
        return ScenarioLoader.load_map_file(file_path, config)

    @staticmethod
    def load_map_file(file_path: str, config: Optional[BattleConfig] = None) -> BattleScenario:
        """Load a plain character-grid map.

        Raises:
            FileNotFoundError: If the file does not exist
            MapFormatError: If the grid is malformed
        """
        path_obj = Path(file_path)
        if not path_obj.exists():
            raise FileNotFoundError(f"Map file not found: {file_path}")

        with open(path_obj, "r", encoding="utf-8") as f:
            text = f.read()

        return BattleScenario.from_text(text, config=config, name=path_obj.stem)

    @staticmethod
    def load_from_file(file_path: str, config: Optional[BattleConfig] = None) -> BattleScenario:
        """Load a scenario from a YAML file.

        ``config``, when given, replaces any ``config`` block in the file.

        Raises:
            FileNotFoundError: If the scenario or its map file is missing
            ValueError: If the YAML is malformed or the scenario is invalid
        """
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise FileNotFoundError(f"Scenario file not found: {file_path}")
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML scenario: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Scenario file {file_path} must contain a mapping")

        scenario_dir = os.path.dirname(os.path.abspath(file_path))
        scenario = ScenarioLoader._parse_scenario(data, scenario_dir)
        if config is not None:
            scenario.config = config

        errors = ScenarioLoader.validate_scenario(scenario)
        if errors:
            raise MapFormatError(
                f"Invalid scenario {Path(file_path).name}: " + "; ".join(errors)
            )

        return scenario

    @staticmethod
    def _parse_scenario(data: dict[str, Any], base_dir: str = "") -> BattleScenario:
        """Parse scenario data from a dictionary."""
        map_text = ScenarioLoader._read_map_text(data.get("map"), base_dir)
        config = BattleConfig.from_dict(data.get("config")) if data.get("config") else BattleConfig()

        scenario = BattleScenario.from_text(
            map_text,
            config=config,
            name=data.get("name", "Unnamed Battle"),
        )
        scenario.description = data.get("description", "")

        for unit_data in data.get("units") or []:
            try:
                faction = faction_from_name(str(unit_data["faction"]))
                position = Vector2.from_list(list(unit_data["at"]))
            except (KeyError, TypeError) as e:
                raise ValueError(f"Unit entries need 'faction' and 'at': {unit_data!r}") from e
            scenario.add_placement(faction, position)

        return scenario

    @staticmethod
    def _read_map_text(map_data: Any, base_dir: str) -> str:
        if not isinstance(map_data, dict):
            raise ValueError("Scenario 'map' must contain either 'layout' or 'source'")

        if "layout" in map_data:
            return str(map_data["layout"])

        if "source" in map_data:
            map_path = str(map_data["source"])
            if not os.path.isabs(map_path):
                map_path = os.path.join(base_dir, map_path)
            if not os.path.exists(map_path):
                raise FileNotFoundError(f"Map file not found: {map_path}")
            with open(map_path, "r", encoding="utf-8") as f:
                return f.read()

        raise ValueError("Scenario 'map' must contain either 'layout' or 'source'")

    @staticmethod
    def validate_scenario(scenario: BattleScenario) -> list[str]:
        """Return a list of problems that would make the battle unbuildable."""
        errors = []
        game_map = scenario.game_map
        seen: dict[Vector2, Faction] = {}

        for placement in scenario.placements:
            position = placement.position
            name = FACTION_NAMES[placement.faction]
            if not game_map.is_valid_position(position):
                errors.append(f"{name} start {position.to_tuple()} is outside the map")
            elif not game_map.is_open(position):
                errors.append(f"{name} start {position.to_tuple()} is on a wall")
            if position in seen:
                errors.append(f"Two units start on {position.to_tuple()}")
            seen[position] = placement.faction

        return errors
