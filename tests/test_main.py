"""
tests/test_main.py

Tests for the command-line entry point.
"""

import json

import pytest

import main_shrdlite
from shrdlite_config import reset_config


@pytest.fixture(autouse=True)
def quiet_cli(tmp_path, monkeypatch):
    """No logging handlers and no configuration file from the working directory."""
    monkeypatch.setattr(main_shrdlite, "setup_logging", lambda **kwargs: None)
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()


class TestMain:
    def test_list_worlds(self, capsys):
        assert main_shrdlite.main(["--list-worlds"]) == 0
        assert capsys.readouterr().out.split() == ["complex", "impossible", "medium", "small"]

    def test_show_world_without_goal(self, capsys):
        assert main_shrdlite.main(["--world", "small"]) == 0
        out = capsys.readouterr().out
        assert "\\_/" in out
        assert "take a blue object" in out

    def test_plan_goal(self, capsys):
        assert main_shrdlite.main(["--world", "small", "--goal", "ontop(a,floor)", "--timeout", "5"]) == 0
        out = capsys.readouterr().out.strip().splitlines()
        assert out[-1].endswith("d")
        assert "Dropping the large green brick" in out[-1]

    def test_execute_plan(self, capsys):
        code = main_shrdlite.main(["--world", "small", "--goal", "ontop(a,floor)", "--execute"])
        assert code == 0
        out = capsys.readouterr().out
        assert "Dropping the large green brick" in out
        assert "\\_/" in out

    def test_already_true(self, capsys):
        assert main_shrdlite.main(["--world", "small", "--goal", "inside(f,m)"]) == 0
        assert "That is already true!" in capsys.readouterr().out

    def test_unknown_world(self, capsys):
        assert main_shrdlite.main(["--world", "atlantis"]) == 1
        assert "Invalid configuration" in capsys.readouterr().err

    def test_no_plan(self, capsys):
        assert main_shrdlite.main(["--world", "small", "--goal", "holding(z)"]) == 1
        assert "I don't know how to do that." in capsys.readouterr().err

    def test_malformed_goal(self, capsys):
        assert main_shrdlite.main(["--world", "small", "--goal", "holding("]) == 1
        assert "I couldn't understand that goal." in capsys.readouterr().err

    def test_world_file_and_config(self, tmp_path, capsys):
        world = {
            "stacks": [["x"], []],
            "holding": None,
            "arm": 0,
            "objects": {"x": {"form": "brick", "size": "small", "color": "red"}},
        }
        world_path = tmp_path / "tiny.json"
        world_path.write_text(json.dumps(world), encoding="utf-8")
        config_path = tmp_path / "cfg.json"
        config_path.write_text(json.dumps({"heuristic": "column_distance"}), encoding="utf-8")

        code = main_shrdlite.main(
            ["--config", str(config_path), "--world-file", str(world_path), "--goal", "holding(x)"]
        )
        assert code == 0
        assert capsys.readouterr().out.strip() == "Picking up the small red brick, p"
