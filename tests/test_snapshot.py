"""
Tests for snapshot loading and configuration.
"""
import os
import pytest
from filelock import Timeout

import bracket.snapshot as snapshot_module
from bracket.snapshot import (
    SnapshotError,
    get_data_dir,
    get_lock_timeout,
    resolve_snapshot_path,
    parse_snapshot,
    load_snapshot,
    DEFAULT_DATA_DIR,
    DEFAULT_LOCK_TIMEOUT,
)


SAMPLE = {
    'tournament': {'id': 't1', 'name': 'Spring Open', 'bracket_type': 'double', 'status': 'active'},
    'players': [{'id': 'A', 'name': 'Alice'}, {'id': 'B', 'name': 'Bob'}],
    'matches': [
        {'id': 'm1', 'round': 1, 'position': 1, 'participant1_id': 'A',
         'participant2_id': 'B', 'winner_participant_id': 'A'},
        {'id': 'gf', 'round': 1000, 'position': 1, 'participant1_id': None,
         'participant2_id': None, 'winner_participant_id': None},
    ]
}


class TestConfiguration:
    """Tests for environment-driven configuration."""

    def test_default_data_dir(self, monkeypatch):
        monkeypatch.delenv('BRACKET_DATA_DIR', raising=False)
        assert get_data_dir() == DEFAULT_DATA_DIR

    def test_data_dir_from_env(self, snapshot_dir):
        assert get_data_dir() == str(snapshot_dir)

    def test_default_lock_timeout(self, monkeypatch):
        monkeypatch.delenv('BRACKET_LOCK_TIMEOUT', raising=False)
        assert get_lock_timeout() == DEFAULT_LOCK_TIMEOUT

    def test_lock_timeout_from_env(self, monkeypatch):
        monkeypatch.setenv('BRACKET_LOCK_TIMEOUT', '2.5')
        assert get_lock_timeout() == 2.5

    def test_invalid_lock_timeout_falls_back(self, monkeypatch):
        monkeypatch.setenv('BRACKET_LOCK_TIMEOUT', 'soon')
        assert get_lock_timeout() == DEFAULT_LOCK_TIMEOUT

    def test_resolve_relative_name(self, snapshot_dir):
        assert resolve_snapshot_path('cup.yaml') == os.path.join(str(snapshot_dir), 'cup.yaml')

    def test_resolve_absolute_path(self, tmp_path):
        path = str(tmp_path / 'elsewhere.yaml')
        assert resolve_snapshot_path(path) == path


class TestParseSnapshot:
    """Tests for parse_snapshot."""

    def test_full_document(self):
        tournament, players, matches = parse_snapshot(SAMPLE)
        assert tournament.bracket_type == 'double'
        assert [p.name for p in players] == ['Alice', 'Bob']
        assert [m.id for m in matches] == ['m1', 'gf']
        assert matches[1].round == 1000

    def test_empty_document(self):
        tournament, players, matches = parse_snapshot({})
        assert tournament.bracket_type is None
        assert players == []
        assert matches == []

    def test_not_a_mapping(self):
        with pytest.raises(SnapshotError):
            parse_snapshot(['not', 'a', 'mapping'])

    def test_skips_malformed_rows(self):
        data = {
            'players': [{'id': 'A', 'name': 'Alice'}, 'garbage', {'name': 'No Id'}],
            'matches': [{'id': 'm1', 'round': 1}, 42],
        }
        _, players, matches = parse_snapshot(data)
        assert [p.id for p in players] == ['A']
        assert [m.id for m in matches] == ['m1']

    def test_non_list_sections_are_ignored(self):
        _, players, matches = parse_snapshot({'players': 'A, B', 'matches': {'id': 'm1'}})
        assert players == []
        assert matches == []

    def test_integer_ids_including_zero(self):
        data = {
            'players': [{'id': 0, 'name': 'Zero'}, {'id': 1, 'name': 'One'}],
            'matches': [{'id': 0, 'round': 1, 'position': 1,
                         'participant1_id': 0, 'participant2_id': 1}],
        }
        _, players, matches = parse_snapshot(data)
        assert [p.id for p in players] == [0, 1]
        assert [m.id for m in matches] == [0]
        assert matches[0].participant_count == 2

    def test_list_bracket_type_becomes_none(self):
        tournament, _, _ = parse_snapshot({'tournament': {'bracket_type': ['double']}})
        assert tournament.bracket_type is None

    def test_non_mapping_tournament_is_ignored(self):
        tournament, _, _ = parse_snapshot({'tournament': 'double'})
        assert tournament.bracket_type is None


class TestLoadSnapshot:
    """Tests for load_snapshot."""

    def test_load_by_name(self, write_snapshot):
        write_snapshot(SAMPLE, 'cup.yaml')
        tournament, players, matches = load_snapshot('cup.yaml')
        assert tournament.name == 'Spring Open'
        assert len(players) == 2
        assert len(matches) == 2

    def test_load_by_path(self, write_snapshot):
        path = write_snapshot(SAMPLE)
        tournament, _, _ = load_snapshot(str(path))
        assert tournament.id == 't1'

    def test_missing_file(self, snapshot_dir):
        with pytest.raises(SnapshotError, match='not found'):
            load_snapshot('nope.yaml')

    def test_invalid_yaml(self, snapshot_dir):
        path = snapshot_dir / 'broken.yaml'
        path.write_text("matches: [unclosed\n  - {id: m1\n")
        with pytest.raises(SnapshotError, match='Failed to parse'):
            load_snapshot(str(path))

    def test_empty_file(self, snapshot_dir):
        path = snapshot_dir / 'empty.yaml'
        path.write_text("")
        tournament, players, matches = load_snapshot(str(path))
        assert players == []
        assert matches == []

    def test_lock_timeout(self, write_snapshot, monkeypatch):
        path = write_snapshot(SAMPLE)

        class BusyLock:
            def __init__(self, lock_file, timeout=-1):
                self.lock_file = lock_file

            def __enter__(self):
                raise Timeout(self.lock_file)

            def __exit__(self, *args):
                return False

        monkeypatch.setattr(snapshot_module, 'FileLock', BusyLock)
        with pytest.raises(SnapshotError, match='Timed out'):
            load_snapshot(str(path))

    def test_sample_data_file(self, monkeypatch):
        monkeypatch.delenv('BRACKET_DATA_DIR', raising=False)
        tournament, players, matches = load_snapshot('sample_tournament.yaml')
        assert tournament.bracket_type == 'double'
        assert len(players) == 4
        assert any(m.round == 1000 for m in matches)
