"""
Minimum attack-power boost search.

Replays the whole battle from the scenario's starting layout with one
faction's attack power raised by a candidate boost, until that faction wins
without losing a single unit. Every trial builds a fresh roster; nothing
carries over between trials.

Two search strategies are available. ``LINEAR`` tries 1, 2, 3, ...
``BISECT`` doubles the boost until a flawless win, then bisects the gap
between the last failure and the first success. Both rely on the flawless
predicate being monotone in the boost.
"""
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from ..core.config_loader import BattleConfig
from ..core.data import Faction, SearchStrategy, FACTION_NAMES
from ..core.events import LogMessage, TrialCompleted
from .battle_engine import BattleResult

if TYPE_CHECKING:
    from ..core.event_manager import EventManager
    from .scenario import BattleScenario


class PowerTuningError(RuntimeError):
    """Raised when no boost up to the search limit gives a flawless win."""

    def __init__(self, faction: Faction, max_boost: int):
        super().__init__(
            f"{FACTION_NAMES[faction]} cannot win without losses with any boost up to {max_boost}"
        )
        self.faction = faction
        self.max_boost = max_boost


@dataclass(frozen=True)
class TuningResult:
    """Outcome of the minimum-boost search."""
    faction: Faction
    boost: int
    attack_power: int
    battle: BattleResult
    trials: dict[int, BattleResult] = field(default_factory=dict)

    @property
    def score(self) -> int:
        return self.battle.score

    @property
    def trial_count(self) -> int:
        return len(self.trials)


class PowerTuner:
    """Finds the smallest boost giving ``faction`` a flawless win."""

    def __init__(
        self,
        scenario: "BattleScenario",
        config: Optional[BattleConfig] = None,
        faction: Optional[Faction] = None,
        strategy: Optional[SearchStrategy] = None,
        event_manager: Optional["EventManager"] = None,
    ):
        self.scenario = scenario
        self.config = config or scenario.config
        self.faction = faction or self.config.tuning_faction
        self.strategy = strategy or self.config.search_strategy
        self.event_manager = event_manager
        self.max_boost = self.config.effective_max_boost
        self._trials: dict[int, BattleResult] = {}

    # ============== Trials ==============

    def run_trial(self, boost: int) -> BattleResult:
        """Replay the battle from scratch with ``boost``. Results are cached per boost."""
        if boost < 0:
            raise ValueError(f"Boost cannot be negative, got {boost}")
        if boost in self._trials:
            return self._trials[boost]

        trial_config = self.config.with_boost(self.faction, boost)
        # Trial battles are not narrated turn by turn
        result = self.scenario.simulate(trial_config)
        self._trials[boost] = result

        self._emit(TrialCompleted(
            round_number=result.rounds_completed,
            faction=self.faction,
            boost=boost,
            attack_power=trial_config.power_for(self.faction),
            flawless=result.is_flawless(self.faction),
            result=result,
        ))
        return result

    def is_flawless(self, boost: int) -> bool:
        return self.run_trial(boost).is_flawless(self.faction)

    # ============== Search ==============

    def find_minimum_boost(self) -> TuningResult:
        """Smallest positive boost with a flawless win.

        Raises:
            PowerTuningError: If even ``max_boost`` is not enough
        """
        self._emit(LogMessage(
            round_number=0,
            message=(
                f"Tuning {FACTION_NAMES[self.faction]} attack power "
                f"({self.strategy.value} search, max boost {self.max_boost})"
            ),
            category="TUNING",
            source="PowerTuner",
        ))

        if self.strategy == SearchStrategy.BISECT:
            boost = self._bisect_search()
        else:
            boost = self._linear_search()

        if boost is None:
            self._emit(LogMessage(
                round_number=0,
                message=f"No flawless boost up to {self.max_boost}",
                category="ERROR",
                level="ERROR",
                source="PowerTuner",
            ))
            self._flush()
            raise PowerTuningError(self.faction, self.max_boost)

        self._flush()
        return TuningResult(
            faction=self.faction,
            boost=boost,
            attack_power=self.config.power_for(self.faction) + boost,
            battle=self._trials[boost],
            trials=dict(self._trials),
        )

    def _linear_search(self) -> Optional[int]:
        for boost in range(1, self.max_boost + 1):
            if self.is_flawless(boost):
                return boost
            self._flush()
        return None

    def _bisect_search(self) -> Optional[int]:
        # Gallop: 1, 2, 4, ... until the first flawless win
        failed = 0
        boost = 1
        while not self.is_flawless(boost):
            self._flush()
            failed = boost
            if boost >= self.max_boost:
                return None
            boost = min(boost * 2, self.max_boost)

        # Invariant: failed is not flawless (or 0), boost is flawless
        while boost - failed > 1:
            middle = (failed + boost) // 2
            if self.is_flawless(middle):
                boost = middle
            else:
                failed = middle
            self._flush()
        return boost

    # ============== Events ==============

    def _emit(self, event) -> None:
        if self.event_manager is not None:
            self.event_manager.publish(event, source="PowerTuner")

    def _flush(self) -> None:
        if self.event_manager is not None:
            self.event_manager.process_events()


def find_minimum_boost(
    scenario: "BattleScenario",
    faction: Optional[Faction] = None,
    config: Optional[BattleConfig] = None,
    strategy: Optional[SearchStrategy] = None,
    event_manager: Optional["EventManager"] = None,
) -> TuningResult:
    """Convenience wrapper around ``PowerTuner.find_minimum_boost``."""
    tuner = PowerTuner(scenario, config=config, faction=faction, strategy=strategy, event_manager=event_manager)
    return tuner.find_minimum_boost()
