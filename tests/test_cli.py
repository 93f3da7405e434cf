"""Tests for the command-line interface."""

import json

import pytest

from queueseg.cli import create_sample_state, main
from queueseg.domain.models import Queue
from queueseg.storage.state_store import JsonStateStore


@pytest.fixture
def state_path(tmp_path):
    """A stored sample board."""
    path = tmp_path / "board.json"
    JsonStateStore(path).save(create_sample_state(12))
    return path


class TestSampleState:
    """Tests for the demo board."""

    def test_roster(self):
        state = create_sample_state(12)
        assert len(state.agents) == 12
        assert state.agents[0].nickname == "Haerold"
        assert len(state.present_agents) == 10

    def test_large_roster_names_unique(self):
        state = create_sample_state(45)
        names = [a.display_name for a in state.agents]
        assert len(names) == len(set(names))

    def test_every_agent_has_a_preset_break(self):
        state = create_sample_state(6)
        assert set(state.breaks) == {a.id for a in state.agents}


class TestCommands:
    """Tests for CLI subcommands."""

    def test_demo(self, capsys):
        assert main(["demo", "--seed", "1"]) == 0
        out = capsys.readouterr().out
        assert "SEGMENTATION OUTPUT" in out
        assert "Validation: PASSED" in out

    def test_generate_saves_state(self, state_path, capsys):
        assert main(["generate", "--state", str(state_path), "--seed", "3", "--now", "9:00 AM"]) == 0
        data = json.loads(state_path.read_text())
        assert data["hasGenerated"] is True
        assert data["segmentationResults"]
        assert "Validation: PASSED" in capsys.readouterr().out

    def test_edit_and_reset_slot(self, state_path, capsys):
        main(["generate", "--state", str(state_path), "--seed", "3", "--now", "9:00 AM"])
        state = JsonStateStore(state_path).load()
        slot = next(r.slot for r in state.results if not r.is_warning)

        assert main(["edit", "--state", str(state_path), "--slot", slot,
                     "--queue", "PM PGC", "Haerold"]) == 0
        edited = JsonStateStore(state_path).load()
        assert edited.get_result(slot).assignments[Queue.PM_PGC] == ["Haerold"]
        assert edited.get_result(slot).is_edited

        assert main(["reset-slot", "--state", str(state_path), "--slot", slot]) == 0
        reset = JsonStateStore(state_path).load()
        assert reset.get_result(slot) is None
        assert not reset.is_locked(slot)
        assert all(a.counters_consistent() for a in reset.agents)

    def test_reset(self, state_path):
        main(["generate", "--state", str(state_path), "--seed", "3", "--now", "9:00 AM"])
        assert main(["reset", "--state", str(state_path)]) == 0
        state = JsonStateStore(state_path).load()
        assert state.results == []
        assert all(a.total == 0 for a in state.agents)

    def test_report(self, state_path, capsys):
        assert main(["report", "--state", str(state_path)]) == 0
        assert "ASSIGNMENT HISTORY" in capsys.readouterr().out

    def test_edit_without_results_fails(self, state_path, capsys):
        code = main(["edit", "--state", str(state_path), "--slot", "10:00 - 11:00",
                     "--queue", "LV PGC", "Gin"])
        assert code == 2
        assert "Error:" in capsys.readouterr().err

    def test_malformed_state_file(self, tmp_path, capsys):
        path = tmp_path / "broken.json"
        path.write_text("not json")
        assert main(["report", "--state", str(path)]) == 2
        assert "Malformed" in capsys.readouterr().err

    def test_non_object_state_file(self, tmp_path, capsys):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        assert main(["report", "--state", str(path)]) == 2
        assert "Error: State document must be a JSON object" in capsys.readouterr().err

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()
