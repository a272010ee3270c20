"""
Seeding helpers shared by the single and double elimination generators.
"""
import math
import random
from typing import List, Sequence

from .errors import InvalidInputError, NoParticipantsError
from .models import Player


def shuffle(items: Sequence, rng=None) -> List:
    """
    Return a uniformly random permutation of items (Fisher-Yates).

    rng is anything with randrange(), normally a random.Random; the module
    level generator is used when it is omitted. The input is never mutated.
    """
    if rng is None:
        rng = random
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randrange(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def calculate_bracket_size(num_teams: int) -> int:
    """Calculate the bracket size (next power of 2)."""
    if num_teams <= 0:
        return 0
    return 2 ** math.ceil(math.log2(num_teams))


def calculate_byes(num_teams: int) -> int:
    """Calculate number of byes needed."""
    return calculate_bracket_size(num_teams) - num_teams


def filter_competitors(competitors) -> List[Player]:
    """
    Validate generator input and wrap usable entries as Player slots.

    Drops None and empty-string entries. Duplicates are kept; deduplication
    is the caller's job.
    """
    if not isinstance(competitors, (list, tuple)):
        raise InvalidInputError()

    players = [Player(c) for c in competitors if c is not None and c != ""]
    if not players:
        raise NoParticipantsError()
    return players
