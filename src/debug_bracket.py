#!/usr/bin/env python3
"""
Bracket Debugger

Loads a tournament snapshot and prints why the bracket can or cannot be
completed: champions, Grand Final state, blocking issues, matches that
need an auto-advance, and the next matches to play.

Usage:
    python src/debug_bracket.py spring_open.yaml
    python src/debug_bracket.py /path/to/snapshot.yaml --format yaml
    python src/debug_bracket.py spring_open.yaml --verbose

Exit codes:
    0: Report printed, nothing blocking
    1: Snapshot could not be loaded
    2: Report printed, blocking issues found
"""
import argparse
import logging
import sys

import yaml

from bracket.analyzer import analyze, get_player_name, get_single_participant_losers_matches
from bracket.models import DOUBLE, is_present
from bracket.rounds import get_round_display_name
from bracket.snapshot import SnapshotError, load_snapshot

EXIT_OK = 0
EXIT_LOAD_FAILED = 1
EXIT_BLOCKED = 2

MAX_NEXT_MATCHES = 8


def format_report(tournament, players, matches, info):
    """Render the debug report as a list of lines."""
    lines = []
    title = tournament.name or tournament.id or 'Tournament'
    lines.append(f"# {title} ({tournament.bracket_type or 'unknown'} elimination)")

    if info.grand_final_completed:
        grand_final_status = 'Completed'
    elif info.grand_final_ready:
        grand_final_status = 'Ready'
    else:
        grand_final_status = 'Not Ready'

    lines.append(f"Tournament: {'Completed' if info.tournament_completed else 'In Progress'}")
    lines.append(f"Progress: {info.progress}")
    lines.append(f"Active Players: {info.active_players}")
    lines.append(f"Grand Final: {grand_final_status}")
    lines.append(f"Issues: {len(info.blocking_issues)}")

    if info.single_participant_matches:
        count = len(info.single_participant_matches)
        lines.append("")
        lines.append(f"Auto-Advance: {count} matches have only one participant and can be auto-advanced.")

    if tournament.bracket_type == DOUBLE:
        lines.append("")
        for label, champion in (('Winners', info.winners_champion), ('Losers', info.losers_champion)):
            name = get_player_name(champion, players) if is_present(champion) else 'Not determined'
            lines.append(f"{label} Bracket Champion: {name}")

    if info.blocking_issues:
        lines.append("")
        lines.append("Issues Blocking Tournament Progress:")
        for issue in info.blocking_issues:
            lines.append(f"  - {issue}")

    lonely = get_single_participant_losers_matches(matches, tournament.bracket_type)
    if lonely:
        lines.append("")
        lines.append(f"Losers Bracket Matches with Only One Player ({len(lonely)}):")
        for match in lonely:
            player_id = match.participant1_id if is_present(match.participant1_id) else match.participant2_id
            lines.append(f"  {get_round_display_name(match.round)} - Position {match.position}: "
                         f"{get_player_name(player_id, players)} vs (empty slot)")

    if info.next_required_matches:
        lines.append("")
        lines.append(f"Next Matches to Play ({len(info.next_required_matches)}):")
        for match in info.next_required_matches[:MAX_NEXT_MATCHES]:
            lines.append(f"  {get_round_display_name(match.round)} - Position {match.position}: "
                         f"{get_player_name(match.participant1_id, players)} vs "
                         f"{get_player_name(match.participant2_id, players)}")
        remaining = len(info.next_required_matches) - MAX_NEXT_MATCHES
        if remaining > 0:
            lines.append(f"  ...and {remaining} more matches")

    if info.tournament_completed:
        lines.append("")
        lines.append("Tournament Complete!")

    return lines


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Explain the state of a tournament bracket snapshot.')
    parser.add_argument('snapshot', help='Snapshot YAML file (absolute, or relative to BRACKET_DATA_DIR)')
    parser.add_argument('--format', choices=['text', 'yaml'], default='text',
                        help='Report format (default: text)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    try:
        tournament, players, matches = load_snapshot(args.snapshot)
    except SnapshotError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_LOAD_FAILED

    info = analyze(tournament, players, matches)

    if args.format == 'yaml':
        print(yaml.safe_dump(info.to_dict(), default_flow_style=False, sort_keys=False), end='')
    else:
        print("\n".join(format_report(tournament, players, matches, info)))

    return EXIT_BLOCKED if info.blocking_issues else EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
