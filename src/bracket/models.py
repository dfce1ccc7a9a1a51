SINGLE = 'single'
DOUBLE = 'double'


def _to_int(value, default=0):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def is_present(value):
    """Store rows use empty strings and nulls interchangeably for empty slots; 0 is a real id."""
    return value is not None and value != ''


def _to_id(value):
    return value if is_present(value) else None


class Player:
    def __init__(self, id, name=''):
        self.id = id
        self.name = name

    @classmethod
    def from_dict(cls, data):
        data = data or {}
        return cls(id=_to_id(data.get('id')), name=data.get('name') or '')

    def __repr__(self):
        return f"Player(id={self.id}, name={self.name})"


class Match:
    def __init__(self, id, round, position=0, participant1_id=None, participant2_id=None,
                 winner_participant_id=None):
        self.id = id
        self.round = round
        self.position = position
        self.participant1_id = participant1_id
        self.participant2_id = participant2_id
        self.winner_participant_id = winner_participant_id

    @classmethod
    def from_dict(cls, data):
        """Build a match from a loose store row, defaulting anything missing."""
        data = data or {}
        winner = data.get('winner_participant_id')
        if winner is None:
            winner = data.get('winner_id')
        return cls(
            id=_to_id(data.get('id')),
            round=_to_int(data.get('round')),
            position=_to_int(data.get('position')),
            participant1_id=_to_id(data.get('participant1_id')),
            participant2_id=_to_id(data.get('participant2_id')),
            winner_participant_id=_to_id(winner),
        )

    @property
    def is_decided(self):
        return is_present(self.winner_participant_id)

    @property
    def participant_count(self):
        return int(is_present(self.participant1_id)) + int(is_present(self.participant2_id))

    def has_participant(self, player_id):
        return is_present(player_id) and player_id in (self.participant1_id, self.participant2_id)

    def __repr__(self):
        return (f"Match(id={self.id}, round={self.round}, position={self.position}, "
                f"participants=({self.participant1_id}, {self.participant2_id}), "
                f"winner={self.winner_participant_id})")


class Tournament:
    def __init__(self, id=None, name='', bracket_type=SINGLE, status='draft'):
        self.id = id
        self.name = name
        self.bracket_type = bracket_type
        self.status = status  # draft / active / completed, informational only

    @classmethod
    def from_dict(cls, data):
        data = data or {}
        bracket_type = data.get('bracket_type')
        return cls(
            id=_to_id(data.get('id')),
            name=data.get('name') or '',
            bracket_type=bracket_type if isinstance(bracket_type, str) else None,
            status=data.get('status') or 'draft',
        )

    def __repr__(self):
        return f"Tournament(id={self.id}, name={self.name}, bracket_type={self.bracket_type})"


class DebugInfo:
    """Derived status of a bracket snapshot. Rebuilt on every analysis."""

    def __init__(self, winners_champion=None, losers_champion=None, grand_final_ready=False,
                 grand_final_completed=False, next_required_matches=None,
                 single_participant_matches=None, active_players=0, eliminated_players=None,
                 tournament_completed=False, blocking_issues=None, progress=None):
        self.winners_champion = winners_champion
        self.losers_champion = losers_champion
        self.grand_final_ready = grand_final_ready
        self.grand_final_completed = grand_final_completed
        self.next_required_matches = next_required_matches if next_required_matches else []
        self.single_participant_matches = single_participant_matches if single_participant_matches else []
        self.active_players = active_players
        self.eliminated_players = eliminated_players if eliminated_players else []
        self.tournament_completed = tournament_completed
        self.blocking_issues = blocking_issues if blocking_issues else []
        self.progress = progress

    def to_dict(self):
        return {
            'winners_champion': self.winners_champion,
            'losers_champion': self.losers_champion,
            'grand_final_ready': self.grand_final_ready,
            'grand_final_completed': self.grand_final_completed,
            'next_required_matches': [m.id for m in self.next_required_matches],
            'single_participant_matches': [m.id for m in self.single_participant_matches],
            'active_players': self.active_players,
            'eliminated_players': list(self.eliminated_players),
            'tournament_completed': self.tournament_completed,
            'blocking_issues': list(self.blocking_issues),
            'progress': self.progress,
        }

    def __eq__(self, other):
        if not isinstance(other, DebugInfo):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"DebugInfo(winners_champion={self.winners_champion}, "
                f"losers_champion={self.losers_champion}, progress={self.progress}, "
                f"blocking_issues={len(self.blocking_issues)})")
