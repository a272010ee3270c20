"""
Single elimination bracket generation.

Competitors are shuffled into a first round; every later round pairs the
advancers of the previous one. Real matches are never resolved here, so
their winners advance as Pending slots.
"""
import logging
from typing import Dict, List, Optional

from .errors import BracketError
from .models import BYE, PENDING, WINNER, Match, MatchType, Slot
from .seeding import filter_competitors, shuffle

logger = logging.getLogger(__name__)


def _match_id(round_num: int, match_in_round: int) -> str:
    return f"sR{round_num}M{match_in_round}"


def select_bye_recipient(entrants: List[Slot], rng=None) -> Slot:
    """
    Pick who gets the bye in an odd-sized round.

    A known player is preferred over a Pending slot; among players the
    choice is random. If nobody is known yet, the first entrant gets it.
    """
    for entrant in shuffle(entrants, rng):
        if entrant.is_player:
            return entrant
    return entrants[0]


def determine_champion(rounds: List[List[Match]]) -> Optional[str]:
    """Champion name when the final round is a single, already decided match."""
    if not rounds:
        return None
    last_round = rounds[-1]
    if len(last_round) == 1:
        winner = last_round[0].winner
        if winner is not None and winner.is_player:
            return winner.name
    return None


def _build_round(entrants: List[Slot], round_num: int, rng=None):
    """Build one round; returns (matches, next round entrants)."""
    matches = []
    next_entrants = []
    active = list(entrants)

    if len(active) % 2 != 0:
        recipient = select_bye_recipient(active, rng)
        active.remove(recipient)
        matches.append(Match(
            id=_match_id(round_num, len(matches)),
            pair=(recipient, BYE),
            winner=recipient if recipient.is_player else None,
            type=MatchType.SINGLE_ELIMINATION,
            round=round_num,
            match_index_in_round=len(matches),
        ))
        next_entrants.append(recipient)

    for i in range(0, len(active), 2):
        matches.append(Match(
            id=_match_id(round_num, len(matches)),
            pair=(active[i], active[i + 1]),
            winner=None,
            type=MatchType.SINGLE_ELIMINATION,
            round=round_num,
            match_index_in_round=len(matches),
        ))
        next_entrants.append(PENDING)

    return matches, next_entrants


def generate_single_elimination(competitors, rng=None) -> Dict:
    """
    Generate a complete single elimination bracket.

    Args:
        competitors: Ordered list of competitor names
        rng: Optional random source (random.Random) used for every shuffle

    Returns dict with:
    - 'rounds': list of rounds, each a list of Match
    - 'champion': champion name, only known for a one-competitor bracket
    - 'error': user-facing message, or None
    """
    try:
        players = filter_competitors(competitors)
    except BracketError as e:
        return {'rounds': [], 'champion': None, 'error': e.message}

    if len(players) == 1:
        only = players[0]
        final = Match(
            id=_match_id(0, 0),
            pair=(only, WINNER),
            winner=only,
            type=MatchType.SINGLE_ELIMINATION,
        )
        return {'rounds': [[final]], 'champion': only.name, 'error': None}

    rounds = []
    entrants = shuffle(players, rng)
    round_num = 0

    # n entrants always become ceil(n / 2), so this runs ceil(log2(n)) times
    while len(entrants) > 1:
        matches, entrants = _build_round(entrants, round_num, rng)
        if matches:
            rounds.append(matches)
        round_num += 1

    logger.debug("Single elimination: %d competitors, %d rounds", len(players), len(rounds))

    return {
        'rounds': rounds,
        'champion': determine_champion(rounds),
        'error': None,
    }
