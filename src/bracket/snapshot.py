"""
Loading tournament snapshots exported from the bracket store.

A snapshot is a YAML document:

    tournament: {id, name, bracket_type, status}
    players:    [{id, name}, ...]
    matches:    [{id, round, position, participant1_id, participant2_id, winner_participant_id}, ...]

The exporter may rewrite a snapshot while we read it, so reads hold a
FileLock on '<snapshot>.lock'.
"""
import logging
import os
from typing import List, Tuple

import yaml
from filelock import FileLock, Timeout

from .models import Match, Player, Tournament

logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DEFAULT_DATA_DIR = os.path.join(BASE_DIR, 'data')
DEFAULT_LOCK_TIMEOUT = 10


class SnapshotError(Exception):
    """Raised when a snapshot file cannot be read or parsed."""


def get_data_dir() -> str:
    return os.environ.get('BRACKET_DATA_DIR', DEFAULT_DATA_DIR)


def get_lock_timeout() -> float:
    raw = os.environ.get('BRACKET_LOCK_TIMEOUT')
    if raw is None or raw == '':
        return DEFAULT_LOCK_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        logger.warning(f'Invalid BRACKET_LOCK_TIMEOUT {raw!r}, using {DEFAULT_LOCK_TIMEOUT}s')
        return DEFAULT_LOCK_TIMEOUT


def resolve_snapshot_path(name: str) -> str:
    """Resolve a snapshot name against the data directory unless it is already a path that exists."""
    if os.path.isabs(name) or os.path.exists(name):
        return name
    return os.path.join(get_data_dir(), name)


def _parse_rows(rows, record_cls, kind):
    if rows is None:
        return []
    if not isinstance(rows, list):
        logger.warning(f'Ignoring {kind}: expected a list, got {type(rows).__name__}')
        return []
    records = []
    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            logger.warning(f'Skipping {kind} entry {index}: expected a mapping, got {type(row).__name__}')
            continue
        record = record_cls.from_dict(row)
        if record.id is None:
            logger.warning(f'Skipping {kind} entry {index}: missing id')
            continue
        records.append(record)
    return records


def parse_snapshot(data: dict) -> Tuple[Tournament, List[Player], List[Match]]:
    """
    Build records from an already-parsed snapshot document.

    Malformed player and match rows are skipped with a warning so a partly
    broken export still produces a report.
    """
    if not isinstance(data, dict):
        raise SnapshotError(f'Snapshot must be a mapping, got {type(data).__name__}')

    tournament_data = data.get('tournament')
    if tournament_data is not None and not isinstance(tournament_data, dict):
        logger.warning('Ignoring tournament: expected a mapping')
        tournament_data = None
    tournament = Tournament.from_dict(tournament_data)

    players = _parse_rows(data.get('players'), Player, 'player')
    matches = _parse_rows(data.get('matches'), Match, 'match')
    return tournament, players, matches


def load_snapshot(path: str) -> Tuple[Tournament, List[Player], List[Match]]:
    """
    Read and parse a snapshot file.

    Args:
        path: Snapshot file, absolute or relative to BRACKET_DATA_DIR

    Returns:
        (tournament, players, matches)

    Raises:
        SnapshotError: if the file is missing, locked too long, or not valid YAML
    """
    path = resolve_snapshot_path(path)
    if not os.path.exists(path):
        raise SnapshotError(f'Snapshot not found: {path}')

    lock = FileLock(f'{path}.lock', timeout=get_lock_timeout())
    try:
        with lock:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
    except Timeout:
        raise SnapshotError(f'Timed out waiting for lock on {path}')
    except yaml.YAMLError as e:
        raise SnapshotError(f'Failed to parse {path}: {e}')
    except OSError as e:
        raise SnapshotError(f'Failed to read {path}: {e}')

    if data is None:
        data = {}
    tournament, players, matches = parse_snapshot(data)
    logger.debug(f'Loaded snapshot {path}: {len(players)} players, {len(matches)} matches')
    return tournament, players, matches
