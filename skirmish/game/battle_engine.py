"""
Round/turn state machine for a single battle.

Each round the engine snapshots the acting order (living unit ids sorted by
reading order) once, then walks it. Units that died earlier in the round
are skipped by a liveness lookup; the snapshot itself is never re-sorted or
edited. A turn is: target search, optional single step, optional attack.
The battle ends the moment a living unit finds no enemies at the start of
its turn, or when a faction is wiped out with entries still left in the
acting order, dead or alive. Either way the round does not count as
completed; a round whose very last entry lands the final blow still counts.
"""
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from ..core.config_loader import DEFAULT_MAX_ROUNDS
from ..core.data import BattlePhase, Faction, FACTION_NAMES
from ..core.events import (
    BattleEnded,
    LogMessage,
    RoundCompleted,
    RoundStarted,
    UnitAttacked,
    UnitDefeated,
    UnitMoved,
)
from .entities.unit import Unit
from .map import GameMap
from .pathfinding import Pathfinder
from .roster import Roster

if TYPE_CHECKING:
    from ..core.event_manager import EventManager


class BattleStalledError(RuntimeError):
    """Raised when a battle hits the round cap without a faction being eliminated."""

    def __init__(self, rounds: int, counts: dict[Faction, int]):
        survivors = ", ".join(f"{FACTION_NAMES[f]}={n}" for f, n in counts.items())
        super().__init__(f"Battle still undecided after {rounds} rounds ({survivors})")
        self.rounds = rounds
        self.counts = counts


@dataclass(frozen=True)
class BattleResult:
    """Final statistics of one battle."""
    rounds_completed: int
    hit_points_remaining: int
    starting_counts: dict[Faction, int] = field(default_factory=dict)
    survivors: dict[Faction, int] = field(default_factory=dict)

    @property
    def score(self) -> int:
        """Completed rounds times remaining hit points."""
        return self.rounds_completed * self.hit_points_remaining

    @property
    def winner(self) -> Optional[Faction]:
        """The only faction with survivors, if exactly one has any."""
        alive = [faction for faction, count in self.survivors.items() if count > 0]
        return alive[0] if len(alive) == 1 else None

    def has_survivors(self, faction: Faction) -> bool:
        return self.survivors.get(faction, 0) > 0

    def casualties(self, faction: Faction) -> int:
        return self.starting_counts.get(faction, 0) - self.survivors.get(faction, 0)

    def is_flawless(self, faction: Faction) -> bool:
        """``faction`` won without losing a single unit."""
        return self.winner == faction and self.casualties(faction) == 0

    def summary(self) -> str:
        winner = self.winner
        outcome = f"{FACTION_NAMES[winner]} win" if winner else "No winner"
        return (
            f"{outcome} after {self.rounds_completed} full rounds "
            f"with {self.hit_points_remaining} total hit points left"
        )


class BattleEngine:
    """Runs one battle to completion on a roster it owns exclusively."""

    def __init__(
        self,
        game_map: GameMap,
        roster: Roster,
        event_manager: Optional["EventManager"] = None,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
    ):
        self.game_map = game_map
        self.roster = roster
        self.event_manager = event_manager
        self.max_rounds = max_rounds
        self.pathfinder = Pathfinder(game_map)

        self.phase = BattlePhase.IDLE
        self.rounds_completed = 0
        self.starting_counts = roster.counts_by_faction()
        self.current_order: tuple[int, ...] = ()

    # ============== Events ==============

    def _emit(self, event) -> None:
        if self.event_manager is not None:
            self.event_manager.publish(event, source="BattleEngine")

    def _flush_events(self) -> None:
        if self.event_manager is not None:
            self.event_manager.process_events()

    def _emit_log(self, message: str, category: str = "BATTLE", level: str = "INFO") -> None:
        self._emit(LogMessage(
            round_number=self.current_round,
            message=message,
            category=category,
            level=level,
            source="BattleEngine",
        ))

    @property
    def current_round(self) -> int:
        """One-based number of the round in progress (or about to start)."""
        return self.rounds_completed + 1

    @property
    def is_over(self) -> bool:
        return self.phase == BattlePhase.GAME_OVER

    # ============== Battle loop ==============

    def run(self) -> BattleResult:
        """Play rounds until a unit finds no enemies.

        Raises:
            BattleStalledError: If ``max_rounds`` rounds complete without a result
        """
        while not self.is_over:
            if self.rounds_completed >= self.max_rounds:
                self._emit_log(
                    f"Round cap of {self.max_rounds} reached", category="ERROR", level="ERROR"
                )
                self._flush_events()
                raise BattleStalledError(self.rounds_completed, self.roster.counts_by_faction())
            self.run_round()

        return self.result()

    def run_round(self) -> bool:
        """Play one round. Returns True if it completed, False if the battle ended in it."""
        if self.is_over:
            return False

        self.phase = BattlePhase.ROUND_IN_PROGRESS
        self.current_order = self.roster.acting_order()
        self._emit(RoundStarted(round_number=self.current_round, acting_order=self.current_order))

        if not self.current_order:
            # Nobody left to search for targets
            self._finish()
            return False

        last_index = len(self.current_order) - 1
        for index, unit_id in enumerate(self.current_order):
            if not self.take_turn(unit_id):
                self._finish()
                return False
            if index < last_index and 0 in self.roster.faction_counts():
                # Turns remain in the order, so this round is cut short
                self._finish()
                return False

        self.rounds_completed += 1
        self.phase = BattlePhase.ROUND_COMPLETE
        elves, goblins = self.roster.faction_counts()
        self._emit(RoundCompleted(
            round_number=self.rounds_completed,
            elves_remaining=elves,
            goblins_remaining=goblins,
        ))
        self._flush_events()
        self.phase = BattlePhase.IDLE
        return True

    def take_turn(self, unit_id: int) -> bool:
        """Play one unit's turn.

        Returns False only when the unit finds no living enemies, which
        ends the battle. Dead units and units with nowhere to go return True.
        """
        unit = self.roster.get_unit(unit_id)
        if unit is None:
            # Died earlier this round
            return True

        enemies = self.roster.living_enemies(unit.faction)
        if not enemies:
            return False

        if not self.roster.adjacent_enemies(unit):
            if not self._move(unit, enemies):
                return True

        targets = self.roster.adjacent_enemies(unit)
        if targets:
            self._attack(unit, self.select_target(targets))
        return True

    # ============== Turn phases ==============

    def _move(self, unit: Unit, enemies: list[Unit]) -> bool:
        """Take one step towards the chosen in-range square. Returns False if stuck."""
        plan = self.pathfinder.plan_move(
            unit.position,
            [enemy.position for enemy in enemies],
            self.roster.occupied_mask(),
        )
        if plan is None or plan.step is None:
            return False

        from_position = unit.position
        moved = self.roster.move_unit(unit.unit_id, plan.step)
        assert moved, f"{unit.name} cannot step from {from_position} to {plan.step}"

        self._emit(UnitMoved(
            round_number=self.current_round,
            unit=unit,
            from_position=from_position,
            to_position=plan.step,
            destination=plan.destination,
        ))
        return True

    @staticmethod
    def select_target(candidates: list[Unit]) -> Unit:
        """Fewest hit points first, then reading order of the defender's square."""
        return min(candidates, key=lambda enemy: (enemy.hp_current, enemy.position.reading_order_key()))

    def _attack(self, attacker: Unit, defender: Unit) -> None:
        remaining = defender.take_damage(attacker.attack_power)
        self._emit(UnitAttacked(
            round_number=self.current_round,
            attacker=attacker,
            defender=defender,
            damage=attacker.attack_power,
            defender_hp=remaining,
        ))

        if remaining <= 0:
            self.roster.remove_unit(defender.unit_id)
            self._emit(UnitDefeated(
                round_number=self.current_round,
                unit=defender,
                defeated_by=attacker,
            ))

    # ============== Results ==============

    def _finish(self) -> None:
        self.phase = BattlePhase.GAME_OVER
        result = self.result()
        self._emit(BattleEnded(round_number=self.current_round, result=result))
        self._flush_events()

    def result(self) -> BattleResult:
        """Statistics as of now; final once ``is_over`` is True."""
        return BattleResult(
            rounds_completed=self.rounds_completed,
            hit_points_remaining=self.roster.total_hit_points(),
            starting_counts=dict(self.starting_counts),
            survivors=self.roster.counts_by_faction(),
        )
