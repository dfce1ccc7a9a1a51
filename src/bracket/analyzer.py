"""
Bracket state analysis for single and double elimination tournaments.

Everything here is derived from a flat snapshot of match records:
- Winners / Losers bracket champions: winner of the highest decided round in that segment
- Grand Final readiness: both champions known
- Completion: the Grand Final (round 1000) has a winner
- Blocking issues: human-readable reasons a double elimination bracket cannot finish yet

Nothing is cached or mutated; callers re-run analyze() on every fresh snapshot.
"""
import logging
from typing import Callable, Iterable, List, Optional

from .models import DOUBLE, SINGLE, DebugInfo, Match, Player, is_present
from .rounds import (
    get_losers_round_label,
    is_grand_final,
    is_losers_round,
    is_winners_round,
)

logger = logging.getLogger(__name__)

NOT_STARTED = 'not_started'
WINNERS_IN_PROGRESS = 'winners_in_progress'
LOSERS_IN_PROGRESS = 'losers_in_progress'
GRAND_FINAL_READY = 'grand_final_ready'
COMPLETED = 'completed'

# Losses needed before a player is out, by bracket type
ELIMINATION_THRESHOLDS = {SINGLE: 1, DOUBLE: 2}


def find_grand_final(matches: List[Match]) -> Optional[Match]:
    """Return the first round-1000 match, if any."""
    for match in matches:
        if is_grand_final(match.round):
            return match
    return None


def find_champion(matches: List[Match], in_segment: Callable[[int], bool]) -> Optional[str]:
    """
    Find the winner of the highest decided round within a bracket segment.

    Args:
        matches: All matches in the snapshot
        in_segment: Predicate on the stored round number selecting the segment

    Returns:
        The winner of the first match (in input order) at the highest decided
        round, or None when nothing in the segment has been decided.
    """
    decided = [m for m in matches if in_segment(m.round) and m.is_decided]
    if not decided:
        return None
    highest_round = max(m.round for m in decided)
    for match in decided:
        if match.round == highest_round:
            return match.winner_participant_id
    return None


def get_playable_matches(matches: List[Match]) -> List[Match]:
    """Undecided matches with both participant slots filled."""
    return [m for m in matches if not m.is_decided and m.participant_count == 2]


def get_single_participant_matches(matches: List[Match]) -> List[Match]:
    """Undecided matches with exactly one slot filled (auto-advance candidates)."""
    return [m for m in matches if not m.is_decided and m.participant_count == 1]


def get_single_participant_losers_matches(matches: List[Match], bracket_type) -> List[Match]:
    """Single-participant matches in the losers bracket; always empty outside double elimination."""
    if bracket_type != DOUBLE:
        return []
    return [m for m in get_single_participant_matches(matches) if is_losers_round(m.round)]


def count_losses(player_id, matches: List[Match]) -> int:
    """Count decided matches the player took part in and did not win."""
    return sum(
        1 for m in matches
        if m.has_participant(player_id) and m.is_decided and m.winner_participant_id != player_id
    )


def get_eliminated_players(players: List[Player], matches: List[Match], bracket_type) -> List:
    """
    Return ids of players with enough losses to be out.

    Single elimination knocks a player out on the first loss, double
    elimination on the second. Unknown bracket types eliminate nobody.
    """
    threshold = ELIMINATION_THRESHOLDS.get(bracket_type) if isinstance(bracket_type, str) else None
    if threshold is None:
        return []
    return [p.id for p in players if count_losses(p.id, matches) >= threshold]


def get_blocking_issues(matches: List[Match], winners_champion, losers_champion,
                        grand_final: Optional[Match]) -> List[str]:
    """
    List the reasons a double elimination bracket cannot be completed yet.

    Every rule is checked independently, so several issues can be reported
    at once. Order is stable: winners, losers playable, losers pending,
    missing Grand Final opponent, unpopulated Grand Final.
    """
    issues = []

    if not is_present(winners_champion):
        winners_incomplete = [m for m in matches if is_winners_round(m.round) and not m.is_decided]
        if winners_incomplete:
            issues.append(f"Winners bracket incomplete: {len(winners_incomplete)} matches remaining")

    if not is_present(losers_champion):
        losers_incomplete = [m for m in matches if is_losers_round(m.round) and not m.is_decided]
        losers_playable = [m for m in losers_incomplete if m.participant_count == 2]
        losers_pending = [m for m in losers_incomplete if m.participant_count < 2]

        if losers_playable:
            highest_round = max(m.round for m in losers_playable)
            issues.append(
                f"Losers bracket incomplete: {len(losers_playable)} playable matches "
                f"(highest: {get_losers_round_label(highest_round)})"
            )
        if losers_pending:
            issues.append(
                f"{len(losers_pending)} losers bracket matches waiting for participants from earlier rounds"
            )

    if is_present(winners_champion) and not is_present(losers_champion):
        issues.append("Losers bracket must be completed to determine Grand Final opponent")

    if grand_final is not None and grand_final.participant_count == 0:
        issues.append("Grand Final not populated with participants")

    return issues


def get_bracket_progress(info: DebugInfo, bracket_type) -> str:
    """
    Summarize derived fields as a single progress label for display.

    Single elimination never reaches COMPLETED because it has no Grand Final
    record; see tournament_completed in analyze().
    """
    if info.tournament_completed:
        return COMPLETED
    if bracket_type == DOUBLE and info.grand_final_ready:
        return GRAND_FINAL_READY
    if not is_present(info.winners_champion) and not is_present(info.losers_champion):
        return NOT_STARTED
    if bracket_type == DOUBLE and is_present(info.winners_champion) and not is_present(info.losers_champion):
        return LOSERS_IN_PROGRESS
    return WINNERS_IN_PROGRESS


def get_player_name(player_id, players: Iterable[Player]) -> str:
    """Look up a display name for a participant id."""
    if not is_present(player_id):
        return 'Unknown'
    for player in players:
        if player.id == player_id:
            return player.name or 'Unknown Player'
    return 'Unknown Player'


def analyze(tournament, players: Optional[List[Player]], matches: Optional[List[Match]]) -> DebugInfo:
    """
    Derive the debug status of a tournament bracket from a snapshot.

    Args:
        tournament: Object with a bracket_type of 'single' or 'double' (may be None)
        players: Full roster; order only affects the eliminated_players order
        matches: All matches of the tournament; order only matters for champion ties

    Returns:
        DebugInfo with champions, Grand Final state, next playable matches,
        auto-advance candidates, eliminations and blocking issues.
    """
    bracket_type = getattr(tournament, 'bracket_type', None)
    if not isinstance(bracket_type, str):
        bracket_type = None
    players = list(players) if players else []
    matches = list(matches) if matches else []

    grand_final = find_grand_final(matches)
    grand_final_completed = grand_final is not None and grand_final.is_decided

    winners_champion = find_champion(matches, is_winners_round)
    losers_champion = find_champion(matches, is_losers_round)
    grand_final_ready = is_present(winners_champion) and is_present(losers_champion)

    eliminated = get_eliminated_players(players, matches, bracket_type)

    blocking_issues = []
    if bracket_type == DOUBLE:
        blocking_issues = get_blocking_issues(matches, winners_champion, losers_champion, grand_final)

    info = DebugInfo(
        winners_champion=winners_champion,
        losers_champion=losers_champion,
        grand_final_ready=grand_final_ready,
        grand_final_completed=grand_final_completed,
        next_required_matches=get_playable_matches(matches),
        single_participant_matches=get_single_participant_matches(matches),
        active_players=len(players) - len(eliminated),
        eliminated_players=eliminated,
        # Only a decided Grand Final completes a tournament, so single
        # elimination brackets are never reported as completed here.
        tournament_completed=grand_final_completed,
        blocking_issues=blocking_issues,
    )
    info.progress = get_bracket_progress(info, bracket_type)

    logger.debug(f'Analyzed {bracket_type} bracket: {len(players)} players, {len(matches)} matches, '
                 f'progress={info.progress}, {len(blocking_issues)} blocking issues')
    return info
