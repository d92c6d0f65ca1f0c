from typing import Optional, TextIO
import sys

from ..core.data import TERRAIN_DATA, Vector2
from ..game.map import GameMap
from ..game.roster import Roster


class TextRenderer:
    """Plain character-grid view of a battle.

    Each row is drawn with walls, floor and unit glyphs, followed by the
    hit points of the units on that row in reading order::

        #######
        #..G..#   G(200)
        #...EG#   E(197), G(197)
        #######
    """

    def __init__(self, show_hit_points: bool = True, output: Optional[TextIO] = None):
        self.show_hit_points = show_hit_points
        self.output = output or sys.stdout

    def render_rows(self, game_map: GameMap, roster: Optional[Roster] = None) -> list[str]:
        rows = []
        for y in range(game_map.height):
            glyphs = []
            annotations = []
            for x in range(game_map.width):
                position = Vector2(y, x)
                unit = roster.get_unit_at(position) if roster is not None else None
                if unit is not None:
                    glyphs.append(unit.symbol)
                    annotations.append(f"{unit.symbol}({unit.hp_current})")
                else:
                    terrain_type = game_map.get_terrain_type(position)
                    glyphs.append(TERRAIN_DATA[terrain_type].symbol)

            line = "".join(glyphs)
            if self.show_hit_points and annotations:
                line += "   " + ", ".join(annotations)
            rows.append(line)
        return rows

    def render(self, game_map: GameMap, roster: Optional[Roster] = None) -> str:
        """Render the map and units as newline separated text."""
        return "\n".join(self.render_rows(game_map, roster))

    def display(self, game_map: GameMap, roster: Optional[Roster] = None, title: Optional[str] = None) -> None:
        if title:
            print(title, file=self.output)
        print(self.render(game_map, roster), file=self.output)
        print(file=self.output)
