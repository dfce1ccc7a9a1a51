"""
Shared pytest fixtures for bracket debugger tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os
import yaml

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from bracket.models import Player, Match, Tournament


@pytest.fixture
def players():
    """Four-player roster A-D."""
    return [Player(id=pid, name=f"Player {pid}") for pid in ('A', 'B', 'C', 'D')]


@pytest.fixture
def single_tournament():
    return Tournament(id='t-single', name='Single Cup', bracket_type='single')


@pytest.fixture
def double_tournament():
    return Tournament(id='t-double', name='Double Cup', bracket_type='double')


@pytest.fixture
def double_bracket_matches():
    """
    Four-player double elimination bracket part way through.

    Winners bracket is finished (A champion), losers round 1 is decided,
    the losers final is waiting on the winners final loser's slot to be
    played, and the Grand Final record exists but is empty.
    """
    return [
        Match('w1-1', 1, 1, 'A', 'D', 'A'),
        Match('w1-2', 1, 2, 'B', 'C', 'B'),
        Match('w2-1', 2, 1, 'A', 'B', 'A'),
        Match('l1-1', 100, 1, 'D', 'C', None),
        Match('l2-1', 101, 1, 'B', None, None),
        Match('gf', 1000, 1, None, None, None),
    ]


@pytest.fixture
def snapshot_dir(tmp_path, monkeypatch):
    """Temporary data directory configured through BRACKET_DATA_DIR."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    monkeypatch.setenv('BRACKET_DATA_DIR', str(data_dir))
    monkeypatch.delenv('BRACKET_LOCK_TIMEOUT', raising=False)
    return data_dir


@pytest.fixture
def write_snapshot(snapshot_dir):
    """Write a snapshot document into the data directory and return its path."""
    def _write(data, name='snapshot.yaml'):
        path = snapshot_dir / name
        path.write_text(yaml.dump(data, default_flow_style=False))
        return path
    return _write
