"""
Tests for the command line entry point.
"""
import os

from skirmish.cli import main

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
ARENA_MAP = os.path.join(PROJECT_ROOT, "assets", "maps", "arena.txt")


class TestCli:
    """Test argument handling and printed results."""

    def test_battle_and_tuning_output(self, capsys):
        assert main([ARENA_MAP]) == 0
        out = capsys.readouterr().out
        assert "Elves win after 66 full rounds with 4 total hit points left" in out
        assert "Outcome: 66 * 4 = 264" in out
        assert "Elves need a boost of 1 (attack power 4)" in out
        assert "Outcome: 49 * 106 = 5194" in out

    def test_goblin_tuning(self, capsys):
        assert main([ARENA_MAP, "--faction", "goblin", "--strategy", "bisect"]) == 0
        out = capsys.readouterr().out
        assert "Goblins need a boost of 1" in out
        assert "Outcome: 50 * 100 = 5000" in out

    def test_show_renders_battlefield(self, capsys):
        assert main([ARENA_MAP, "--show"]) == 0
        out = capsys.readouterr().out
        assert "Final battlefield:" in out
        assert "#E.E#   E(2), E(2)" in out
        assert "Final battlefield with boost:" in out

    def test_debug_prints_log(self, capsys):
        assert main([ARENA_MAP, "--debug"]) == 0
        out = capsys.readouterr().out
        assert "[SYS] Loaded arena (5x5)" in out
        assert "[MOV] R1 E0 moves (1, 1) -> (2, 1)" in out
        assert "[TUN] Elves +1 (power 4): flawless win, score 5194" in out

    def test_save_log(self, tmp_path, capsys):
        log_dir = tmp_path / "logs"
        assert main([ARENA_MAP, "--save-log", str(log_dir)]) == 0
        assert len(list(log_dir.iterdir())) == 1

    def test_config_file(self, tmp_path, capsys):
        config_file = tmp_path / "battle.yaml"
        config_file.write_text("factions:\n  elf:\n    attack_power: 4\n")
        assert main([ARENA_MAP, "--config", str(config_file)]) == 0
        assert "Outcome: 49 * 106 = 5194" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.txt")]) == 1
        assert "Error: Map file not found" in capsys.readouterr().err

    def test_unknown_faction(self, capsys):
        assert main([ARENA_MAP, "--faction", "orc"]) == 1
        assert "Unknown faction" in capsys.readouterr().err

    def test_tuning_failure(self, tmp_path, capsys):
        config_file = tmp_path / "battle.yaml"
        config_file.write_text("factions:\n  goblin:\n    attack_power: 200\ntuning:\n  max_boost: 3\n")
        assert main([ARENA_MAP, "--config", str(config_file)]) == 1
        assert "cannot win without losses" in capsys.readouterr().err
