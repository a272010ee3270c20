"""
Double elimination bracket generation.

In double elimination:
- Competitors must lose twice to be eliminated
- Upper Bracket: competitors that haven't lost yet, padded with byes to a power of 2
- Lower Bracket: competitors that have lost once
- Grand Final: Upper Bracket winner vs Lower Bracket winner

Losers drop from the upper bracket on a fixed schedule (see
lower_bracket_schedule). Real matches are never resolved here, so dropped
losers and lower bracket survivors travel as Reference slots
("Loser of ubR0M1", "Winner of lbR2M0").
"""
import logging
from typing import Dict, Iterator, List, Tuple

from .errors import BracketError
from .models import (
    BYE,
    PENDING,
    WINNER,
    Match,
    MatchType,
    Player,
    Reference,
    Slot,
    is_concrete,
    loser_of,
    winner_of,
)
from .seeding import calculate_byes, filter_competitors, shuffle

logger = logging.getLogger(__name__)

UPPER_BRACKET_TBD = "Winner of UB (TBD)"
LOWER_BRACKET_TBD = "Winner of LB (TBD)"


class AwaitingDrop:
    """Lower round fed by the survivors plus the losers of one upper round."""

    def __init__(self, upper_round: int):
        self.upper_round = upper_round

    def __eq__(self, other):
        return isinstance(other, AwaitingDrop) and other.upper_round == self.upper_round

    def __hash__(self):
        return hash(('AwaitingDrop', self.upper_round))

    def __repr__(self):
        return f"AwaitingDrop({self.upper_round})"


class InternalRound:
    """Lower round played among the survivors only."""

    def __eq__(self, other):
        return isinstance(other, InternalRound)

    def __hash__(self):
        return hash('InternalRound')

    def __repr__(self):
        return "InternalRound()"


INTERNAL_ROUND = InternalRound()


def lower_bracket_schedule(num_upper_rounds: int) -> Iterator:
    """
    Yield the lower bracket stages for an upper bracket of num_upper_rounds.

    Two stages per upper round. For 3 upper rounds (8 competitors):
    - AwaitingDrop(0): upper round 1 losers pair off
    - AwaitingDrop(1): survivors meet upper round 2 losers
    - InternalRound:   survivors pair off
    - AwaitingDrop(2): survivor meets the upper final loser
    - InternalRound, InternalRound: only used when survivors remain
    """
    for stage in range(2 * num_upper_rounds):
        if stage == 0:
            yield AwaitingDrop(0)
        elif stage % 2 == 1 and (stage + 1) // 2 < num_upper_rounds:
            yield AwaitingDrop((stage + 1) // 2)
        else:
            yield INTERNAL_ROUND


def extract_losers(upper_round: List[Match]) -> List[Slot]:
    """Losers that drop from an upper round; byes drop nobody."""
    return [m.loser for m in upper_round if m.loser is not None and not m.loser.is_bye]


def build_upper_bracket(players: List[Player], rng=None) -> Tuple[List[List[Match]], Slot]:
    """
    Build the upper bracket.

    The field is padded with byes to the next power of 2 and shuffled, so
    every round halves it. Returns (rounds, upper bracket winner).
    """
    padded = list(players) + [BYE] * calculate_byes(len(players))
    entrants = shuffle(padded, rng)

    rounds = []
    round_num = 0

    while len(entrants) > 1:
        round_matches = []
        advancing = []

        for i in range(0, len(entrants), 2):
            p1, p2 = entrants[i], entrants[i + 1]
            match_id = f"ubR{round_num}M{len(round_matches)}"

            if p1.is_bye and p2.is_bye:
                winner, loser = BYE, BYE
            elif p1.is_bye or p2.is_bye:
                walkover = p2 if p1.is_bye else p1
                winner = None if walkover.is_pending else walkover
                loser = BYE
            else:
                winner, loser = None, loser_of(match_id)

            round_matches.append(Match(
                id=match_id,
                pair=(p1, p2),
                winner=winner,
                loser=loser,
                type=MatchType.UPPER_BRACKET,
                round=round_num,
                match_index_in_round=len(round_matches),
            ))
            advancing.append(winner if winner is not None else PENDING)

        rounds.append(round_matches)

        # A lone bye cannot win the upper bracket
        if len(advancing) == 1 and advancing[0].is_bye:
            advancing = []
        entrants = advancing
        round_num += 1

    if len(entrants) == 1 and entrants[0].is_player:
        ub_winner = entrants[0]
    elif rounds and len(rounds[-1]) == 1:
        ub_winner = winner_of(rounds[-1][0].id)
    else:
        ub_winner = Reference(UPPER_BRACKET_TBD)

    return rounds, ub_winner


def _build_lower_round(entrants: List[Slot], round_num: int) -> Tuple[List[Match], List[Slot]]:
    """Pair one lower round; an odd entrant out (the last) gets a bye."""
    active = list(entrants)
    matches = []
    advancing = []

    if len(active) % 2 != 0:
        recipient = active.pop()
        matches.append(Match(
            id=f"lbR{round_num}M{len(matches)}",
            pair=(recipient, BYE),
            winner=recipient,
            loser=BYE,
            type=MatchType.LOWER_BRACKET,
            round=round_num,
            match_index_in_round=len(matches),
        ))
        advancing.append(recipient)

    for i in range(0, len(active), 2):
        match_id = f"lbR{round_num}M{len(matches)}"
        matches.append(Match(
            id=match_id,
            pair=(active[i], active[i + 1]),
            winner=None,
            loser=loser_of(match_id),
            type=MatchType.LOWER_BRACKET,
            round=round_num,
            match_index_in_round=len(matches),
        ))
        advancing.append(winner_of(match_id))

    return matches, advancing


def _more_drops_expected(remaining_stages, upper_rounds: List[List[Match]]) -> bool:
    for state in remaining_stages:
        if isinstance(state, AwaitingDrop) and extract_losers(upper_rounds[state.upper_round]):
            return True
    return False


def _carry_forward(lower_rounds: List[List[Match]]) -> List[Slot]:
    """Sole advancer of the last lower round, if that round was a single match."""
    if not lower_rounds or len(lower_rounds[-1]) != 1:
        return []
    last_match = lower_rounds[-1][0]
    if last_match.winner is not None:
        return [last_match.winner]
    return [winner_of(last_match.id)]


def build_lower_bracket(upper_rounds: List[List[Match]], rng=None) -> Tuple[List[List[Match]], Slot]:
    """
    Build the lower bracket from a finished upper bracket.

    Walks lower_bracket_schedule; every stage shuffles its entrants, so
    freshly dropped losers mix with lower bracket survivors. Stops early once
    a single survivor is left and no upper round still has losers to drop.

    Returns (rounds, lower bracket winner).
    """
    schedule = list(lower_bracket_schedule(len(upper_rounds)))
    lower_rounds = []
    advancers = []

    for stage, state in enumerate(schedule):
        entrants = list(advancers)
        if isinstance(state, AwaitingDrop):
            entrants.extend(extract_losers(upper_rounds[state.upper_round]))

        active = [e for e in shuffle(entrants, rng) if is_concrete(e)]

        if not active:
            if stage > 0:
                advancers = _carry_forward(lower_rounds)
                break
            advancers = []
            continue

        round_matches, advancers = _build_lower_round(active, len(lower_rounds))
        lower_rounds.append(round_matches)

        survivors = [a for a in advancers if is_concrete(a)]
        if len(survivors) == 1 and not _more_drops_expected(schedule[stage + 1:], upper_rounds):
            logger.debug("Lower bracket complete after stage %d (%d rounds)", stage, len(lower_rounds))
            break

    if len(advancers) == 1 and is_concrete(advancers[0]):
        lb_winner = advancers[0]
    elif lower_rounds and len(lower_rounds[-1]) == 1:
        lb_winner = winner_of(lower_rounds[-1][0].id)
    else:
        lb_winner = Reference(LOWER_BRACKET_TBD)

    return lower_rounds, lb_winner


def _empty_result(error=None) -> Dict:
    return {
        'upper_bracket_rounds': [],
        'lower_bracket_rounds': [],
        'grand_final_match': None,
        'champion': None,
        'error': error,
    }


def generate_double_elimination(competitors, rng=None) -> Dict:
    """
    Generate complete double elimination bracket structure.

    Args:
        competitors: Ordered list of competitor names
        rng: Optional random source (random.Random) used for every shuffle

    Returns dict with:
    - 'upper_bracket_rounds': list of rounds of UB matches
    - 'lower_bracket_rounds': list of rounds of LB matches
    - 'grand_final_match': [Match] pairing both bracket winners, or None
    - 'champion': only known for a one-competitor bracket
    - 'error': user-facing message, or None
    """
    try:
        players = filter_competitors(competitors)
    except BracketError as e:
        return _empty_result(e.message)

    if len(players) == 1:
        only = players[0]
        result = _empty_result()
        result['upper_bracket_rounds'] = [[Match(
            id="ubR0M0",
            pair=(only, WINNER),
            winner=only,
            loser=only,
            type=MatchType.UPPER_BRACKET,
        )]]
        result['champion'] = only.name
        return result

    upper_rounds, ub_winner = build_upper_bracket(players, rng)

    if not upper_rounds:
        result = _empty_result()
        result['champion'] = ub_winner.name if ub_winner.is_player else None
        return result

    lower_rounds, lb_winner = build_lower_bracket(upper_rounds, rng)

    grand_final = Match(
        id="gfM0",
        pair=(ub_winner, lb_winner),
        winner=None,
        loser=None,
        type=MatchType.GRAND_FINAL,
    )

    logger.debug(
        "Double elimination: %d competitors, %d upper rounds, %d lower rounds",
        len(players), len(upper_rounds), len(lower_rounds),
    )

    return {
        'upper_bracket_rounds': upper_rounds,
        'lower_bracket_rounds': lower_rounds,
        'grand_final_match': [grand_final],
        'champion': None,
        'error': None,
    }
