"""
Unit tests for the generate_bracket command line script.
"""
import pytest
import json
import sys
import os
import yaml

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from brackets.errors import ParticipantInputError
from generate_bracket import load_participants, main


@pytest.fixture
def teams_yaml(tmp_path):
    """Teams grouped by pool, the way tournament team files are laid out."""
    path = tmp_path / "teams.yaml"
    path.write_text(yaml.dump({
        'pool1': ['Team A', 'Team B', 'Team C'],
        'pool2': ['Team D', 'Team A'],
    }))
    return path


class TestLoadParticipants:
    """Tests for reading participant files."""

    def test_text_file(self, tmp_path):
        path = tmp_path / "players.txt"
        path.write_text("Alice, Bob\nCarol\nBob\n")
        assert load_participants(str(path)) == ['Alice', 'Bob', 'Carol']

    def test_yaml_mapping_is_flattened(self, teams_yaml):
        """Pools are flattened in order and repeated names dropped."""
        assert load_participants(str(teams_yaml)) == ['Team A', 'Team B', 'Team C', 'Team D']

    def test_yaml_list(self, tmp_path):
        path = tmp_path / "players.yml"
        path.write_text(yaml.dump(['Alice', 'Bob']))
        assert load_participants(str(path)) == ['Alice', 'Bob']

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        with pytest.raises(ParticipantInputError):
            load_participants(str(path))

    def test_yaml_scalar(self, tmp_path):
        path = tmp_path / "scalar.yaml"
        path.write_text("just a string\n")
        with pytest.raises(ParticipantInputError):
            load_participants(str(path))

    @pytest.mark.parametrize("value", ['Alice', 5])
    def test_yaml_group_must_be_list(self, tmp_path, value):
        """A pool holding a single scalar is rejected, not split or crashed on."""
        path = tmp_path / "teams.yaml"
        path.write_text(yaml.dump({'pool1': value, 'pool2': ['Bob']}))
        with pytest.raises(ParticipantInputError) as excinfo:
            load_participants(str(path))
        assert "'pool1' must be a list of names" in excinfo.value.message

    def test_yaml_empty_group_is_skipped(self, tmp_path):
        path = tmp_path / "teams.yaml"
        path.write_text("pool1:\npool2:\n  - Bob\n")
        assert load_participants(str(path)) == ['Bob']

    def test_yaml_group_error_exits(self, tmp_path, capsys):
        path = tmp_path / "teams.yaml"
        path.write_text(yaml.dump({'pool1': 5}))
        assert main([str(path)]) == 1
        assert "must be a list of names" in capsys.readouterr().err


class TestMain:
    """Tests for the script entry point."""

    def test_text_schedule(self, teams_yaml, capsys):
        assert main([str(teams_yaml), '--seed', '1']) == 0
        out = capsys.readouterr().out
        assert out.startswith("Single Elimination Tournament Schedule")
        assert "Round 2" in out

    def test_double_schedule(self, teams_yaml, capsys):
        assert main([str(teams_yaml), '--type', 'double', '--seed', '1']) == 0
        out = capsys.readouterr().out
        assert "--- UPPER BRACKET ---" in out
        assert "--- GRAND FINAL ---" in out

    def test_json_output(self, teams_yaml, capsys):
        assert main([str(teams_yaml), '--type', 'double', '--format', 'json', '--seed', '2']) == 0
        data = json.loads(capsys.readouterr().out)
        assert [len(r) for r in data['upper_bracket_rounds']] == [2, 1]
        assert data['grand_final_match'][0]['id'] == 'gfM0'

    def test_yaml_output(self, teams_yaml, capsys):
        assert main([str(teams_yaml), '--format', 'yaml', '--seed', '2']) == 0
        data = yaml.safe_load(capsys.readouterr().out)
        assert [len(r) for r in data['rounds']] == [2, 1]
        assert data['champion'] is None

    def test_seed_reproduces_output(self, teams_yaml, capsys):
        main([str(teams_yaml), '--type', 'double', '--seed', '9'])
        first = capsys.readouterr().out
        main([str(teams_yaml), '--type', 'double', '--seed', '9'])
        assert capsys.readouterr().out == first

    def test_single_participant(self, tmp_path, capsys):
        path = tmp_path / "solo.txt"
        path.write_text("Alice\n")
        assert main([str(path)]) == 0
        assert "CHAMPION (Auto-Win): Alice" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.txt")]) == 1
        assert capsys.readouterr().err.startswith("Error:")

    def test_blank_file(self, tmp_path, capsys):
        path = tmp_path / "blank.txt"
        path.write_text("\n\n")
        assert main([str(path)]) == 1
        assert "Participant input cannot be empty." in capsys.readouterr().err
