"""
Round-number convention shared with the bracket generator.

A single integer encodes both the bracket segment and the round within it:
- 1..99:    Winners bracket round N
- 100..999: Losers bracket round N - 99
- 1000:     Grand Final
- 1001:     Bracket Reset (only played if the losers champion wins the Grand Final)
"""
from collections import namedtuple

LOSERS_ROUND_OFFSET = 99
LOSERS_ROUND_START = 100
GRAND_FINAL_ROUND = 1000
BRACKET_RESET_ROUND = 1001

WINNERS = 'winners'
LOSERS = 'losers'
GRAND_FINAL = 'grand_final'
BRACKET_RESET = 'bracket_reset'
UNKNOWN = 'unknown'

RoundInfo = namedtuple('RoundInfo', ['segment', 'number'])


def classify_round(round_num: int) -> RoundInfo:
    """
    Split a stored round number into (segment, round within segment).

    Anything below 100 counts as a winners round, including 0 and negatives,
    since that is how the bracket generator's consumers have always read it.
    Whole-number floats (5.0) are read as ints; any other non-integer is UNKNOWN.
    """
    if isinstance(round_num, float) and round_num.is_integer():
        round_num = int(round_num)
    if isinstance(round_num, bool) or not isinstance(round_num, int):
        return RoundInfo(UNKNOWN, round_num)
    if round_num < LOSERS_ROUND_START:
        return RoundInfo(WINNERS, round_num)
    if round_num < GRAND_FINAL_ROUND:
        return RoundInfo(LOSERS, round_num - LOSERS_ROUND_OFFSET)
    if round_num == GRAND_FINAL_ROUND:
        return RoundInfo(GRAND_FINAL, 1)
    if round_num == BRACKET_RESET_ROUND:
        return RoundInfo(BRACKET_RESET, 1)
    return RoundInfo(UNKNOWN, round_num)


def is_winners_round(round_num: int) -> bool:
    return classify_round(round_num).segment == WINNERS


def is_losers_round(round_num: int) -> bool:
    return classify_round(round_num).segment == LOSERS


def is_grand_final(round_num: int) -> bool:
    return classify_round(round_num).segment == GRAND_FINAL


def get_losers_round_label(round_num: int) -> str:
    """Short label used in issue messages, e.g. 105 -> 'L6'."""
    return f"L{classify_round(round_num).number}"


def get_round_display_name(round_num: int) -> str:
    """Get the display name for a stored round number."""
    segment, number = classify_round(round_num)
    if segment == GRAND_FINAL:
        return "Grand Final"
    elif segment == BRACKET_RESET:
        return "Bracket Reset"
    elif segment == LOSERS:
        return f"Losers L{number}"
    elif segment == WINNERS:
        return f"Winners R{number}"
    else:
        return f"Round {number}"
