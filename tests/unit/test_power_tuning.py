"""
Unit tests for the power-tuning search.

The duel arena pits one goblin (acting first, attack power 10) against one
elf. The elf needs at most 19 hits before the goblin's 20th, so the
smallest flawless elf power is 11: a boost of 8.
"""
import pytest

from skirmish.core.data import Faction, SearchStrategy
from skirmish.core.events import EventType
from skirmish.game.power_tuning import PowerTuner, PowerTuningError, find_minimum_boost
from tests.test_utils import DUEL_ROWS, make_scenario


@pytest.fixture
def duel_scenario():
    return make_scenario(DUEL_ROWS, goblin_power=10)


class TestTrials:
    """Test single trial battles."""

    def test_boost_zero_replays_the_base_battle(self, arena_scenario):
        tuner = PowerTuner(arena_scenario)
        assert tuner.run_trial(0) == arena_scenario.simulate()

    def test_trials_are_cached(self, duel_scenario):
        tuner = PowerTuner(duel_scenario)
        first = tuner.run_trial(3)
        assert tuner.run_trial(3) is first

    def test_negative_boost(self, duel_scenario):
        with pytest.raises(ValueError):
            PowerTuner(duel_scenario).run_trial(-1)

    def test_flawless_predicate_is_monotone(self, duel_scenario):
        tuner = PowerTuner(duel_scenario)
        outcomes = [tuner.is_flawless(boost) for boost in range(0, 11)]
        assert outcomes == [False] * 8 + [True] * 3

    def test_trials_start_from_fresh_rosters(self, duel_scenario):
        PowerTuner(duel_scenario).run_trial(8)
        roster = duel_scenario.create_roster()
        assert [unit.hp_current for unit in roster] == [200, 200]
        assert duel_scenario.config.power_for(Faction.ELF) == 3


class TestSearch:
    """Test the minimum-boost search."""

    def test_linear_search(self, duel_scenario):
        result = PowerTuner(duel_scenario, strategy=SearchStrategy.LINEAR).find_minimum_boost()
        assert result.boost == 8
        assert result.attack_power == 11
        assert result.faction == Faction.ELF
        assert result.trial_count == 8
        assert result.battle.rounds_completed == 19
        assert result.battle.hit_points_remaining == 10
        assert result.score == 190

    def test_bisect_search_agrees_with_linear(self, duel_scenario):
        linear = PowerTuner(duel_scenario, strategy=SearchStrategy.LINEAR).find_minimum_boost()
        bisect = PowerTuner(duel_scenario, strategy=SearchStrategy.BISECT).find_minimum_boost()
        assert bisect.boost == linear.boost
        assert bisect.score == linear.score
        assert bisect.trial_count < linear.trial_count

    def test_strategy_from_config(self):
        scenario = make_scenario(DUEL_ROWS, goblin_power=10, search_strategy=SearchStrategy.BISECT)
        tuner = PowerTuner(scenario)
        assert tuner.strategy == SearchStrategy.BISECT
        assert tuner.find_minimum_boost().boost == 8

    def test_arena_elf_boost(self, arena_scenario):
        result = find_minimum_boost(arena_scenario, Faction.ELF)
        assert result.boost == 1
        assert result.battle.rounds_completed == 49
        assert result.battle.hit_points_remaining == 106
        assert result.score == 5194

    def test_arena_goblin_boost(self, arena_scenario):
        result = find_minimum_boost(arena_scenario, Faction.GOBLIN)
        assert result.faction == Faction.GOBLIN
        assert result.boost == 1
        assert result.battle.winner == Faction.GOBLIN
        assert result.battle.rounds_completed == 50
        assert result.battle.hit_points_remaining == 100
        assert result.score == 5000

    @pytest.mark.parametrize("strategy", list(SearchStrategy))
    def test_no_flawless_boost_in_range(self, strategy):
        scenario = make_scenario(DUEL_ROWS, goblin_power=10, max_boost=5)
        with pytest.raises(PowerTuningError) as exc_info:
            PowerTuner(scenario, strategy=strategy).find_minimum_boost()
        assert exc_info.value.faction == Faction.ELF
        assert exc_info.value.max_boost == 5


class TestTuningEvents:
    """Test what the tuner publishes."""

    def test_trial_events(self, duel_scenario, event_manager, recorder):
        PowerTuner(duel_scenario, event_manager=event_manager).find_minimum_boost()

        trials = recorder.of_type(EventType.TRIAL_COMPLETED)
        assert [event.boost for event in trials] == list(range(1, 9))
        assert [event.flawless for event in trials] == [False] * 7 + [True]
        assert trials[-1].attack_power == 11

    def test_trial_battles_are_not_narrated(self, duel_scenario, event_manager, recorder):
        PowerTuner(duel_scenario, event_manager=event_manager).find_minimum_boost()
        assert not recorder.of_type(EventType.UNIT_ATTACKED)

    def test_failure_is_logged(self, event_manager, log_manager):
        scenario = make_scenario(DUEL_ROWS, goblin_power=10, max_boost=2)
        with pytest.raises(PowerTuningError):
            PowerTuner(scenario, event_manager=event_manager).find_minimum_boost()
        assert any("No flawless boost up to 2" in msg.text for msg in log_manager.get_messages())
