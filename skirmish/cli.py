"""Command line entry point.

Runs one battle from a map or scenario file, prints its outcome, then finds
the smallest attack-power boost that lets the tuned faction win without
losses.
"""
import argparse
import sys
from typing import Optional

from .core.config_loader import load_battle_config
from .core.data import FACTION_NAMES, SearchStrategy, faction_from_name
from .core.event_manager import EventManager
from .game.battle_engine import BattleStalledError
from .game.log_manager import LogManager
from .game.power_tuning import PowerTuner, PowerTuningError
from .game.scenario_loader import ScenarioLoader
from .renderers.text_renderer import TextRenderer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skirmish",
        description="Elves versus goblins grid battle simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  skirmish assets/maps/arena.txt                 # Battle outcome and minimum elf boost
  skirmish assets/scenarios/caves.yaml --show    # Also draw the final battlefield
  skirmish map.txt --strategy bisect --debug     # Faster search, print the full log
        """
    )

    parser.add_argument(
        "path",
        help="Character-grid map (.txt) or YAML scenario (.yaml)"
    )
    parser.add_argument(
        "--config",
        help="Battle config YAML; replaces any config inside the scenario"
    )
    parser.add_argument(
        "--faction",
        help="Faction whose attack power is tuned (elf or goblin)"
    )
    parser.add_argument(
        "--strategy",
        choices=[strategy.value for strategy in SearchStrategy],
        help="Boost search strategy"
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Render the battlefield after each battle"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print the battle log including movement and debug messages"
    )
    parser.add_argument(
        "--save-log",
        metavar="DIR",
        help="Write the battle log to a timestamped file in DIR"
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Run the simulator. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        config = load_battle_config(args.config) if args.config else None
        scenario = ScenarioLoader.load(args.path, config)
        faction = faction_from_name(args.faction) if args.faction else None
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    event_manager = EventManager()
    log_manager = LogManager(event_manager)
    log_manager.set_debug(args.debug)
    log_manager.system(f"Loaded {scenario.name} ({scenario.game_map.width}x{scenario.game_map.height})")

    renderer = TextRenderer()
    exit_code = 0

    try:
        engine = scenario.create_engine(event_manager=event_manager)
        result = engine.run()
        if args.show:
            renderer.display(scenario.game_map, engine.roster, title="Final battlefield:")
        print(result.summary())
        print(f"Outcome: {result.rounds_completed} * {result.hit_points_remaining} = {result.score}")

        tuner = PowerTuner(
            scenario,
            faction=faction,
            strategy=SearchStrategy(args.strategy) if args.strategy else None,
            event_manager=event_manager,
        )
        tuning = tuner.find_minimum_boost()
        if args.show:
            boosted = scenario.create_engine(scenario.config.with_boost(tuning.faction, tuning.boost))
            boosted.run()
            renderer.display(scenario.game_map, boosted.roster, title="Final battlefield with boost:")
        print(
            f"{FACTION_NAMES[tuning.faction]} need a boost of {tuning.boost} "
            f"(attack power {tuning.attack_power}) after {tuning.trial_count} trials"
        )
        print(
            f"Outcome: {tuning.battle.rounds_completed} * "
            f"{tuning.battle.hit_points_remaining} = {tuning.score}"
        )
    except (BattleStalledError, PowerTuningError) as e:
        log_manager.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        exit_code = 1
    finally:
        if args.debug:
            for line in log_manager.formatted_messages():
                print(line)
        if args.save_log and not log_manager.save_log_to_file(args.save_log):
            print(f"Could not write log to {args.save_log}", file=sys.stderr)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
