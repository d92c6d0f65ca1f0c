"""Turn-based grid skirmish simulator.

Two factions fight on a walled grid until one is wiped out. See
``skirmish.game.battle_engine`` for the round rules and
``skirmish.game.power_tuning`` for the minimum-boost search.
"""

__version__ = "0.1.0"
