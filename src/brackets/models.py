"""
Bracket data model.

A match side holds one of five slot kinds:
- Player: a concrete competitor
- Bye: no opponent, automatic advance
- WinnerSlot: the void opponent of a one-competitor tournament
- Pending: decided by a match that has not been played
- Reference: a named outcome of another match ("Loser of ubR0M1", "Winner of LB (TBD)")
"""
from typing import Dict, List, Optional


BYE_VALUE = "BYE"
WINNER_VALUE = "WINNER!"


class MatchType:
    SINGLE_ELIMINATION = "SE"
    UPPER_BRACKET = "UB"
    LOWER_BRACKET = "LB"
    GRAND_FINAL = "GF"


class Slot:
    """Base class for the value occupying one side of a match."""

    is_player = False
    is_bye = False
    is_winner_slot = False
    is_pending = False
    is_reference = False

    def _key(self):
        return ()

    def to_value(self):
        raise NotImplementedError

    def __eq__(self, other):
        if not isinstance(other, Slot):
            return NotImplemented
        return type(self) is type(other) and self._key() == other._key()

    def __hash__(self):
        return hash((type(self).__name__,) + self._key())


class Player(Slot):
    is_player = True

    def __init__(self, name):
        self.name = name

    def _key(self):
        return (self.name,)

    def to_value(self):
        return self.name

    def __repr__(self):
        return f"Player(name={self.name})"


class Bye(Slot):
    is_bye = True

    def to_value(self):
        return BYE_VALUE

    def __repr__(self):
        return "Bye()"


class WinnerSlot(Slot):
    is_winner_slot = True

    def to_value(self):
        return WINNER_VALUE

    def __repr__(self):
        return "WinnerSlot()"


class Pending(Slot):
    is_pending = True

    def to_value(self):
        return None

    def __repr__(self):
        return "Pending()"


class Reference(Slot):
    is_reference = True

    def __init__(self, text):
        self.text = text

    def _key(self):
        return (self.text,)

    def to_value(self):
        return self.text

    def __repr__(self):
        return f"Reference(text={self.text})"


BYE = Bye()
WINNER = WinnerSlot()
PENDING = Pending()


def loser_of(match_id: str) -> Reference:
    return Reference(f"Loser of {match_id}")


def winner_of(match_id: str) -> Reference:
    return Reference(f"Winner of {match_id}")


class Match:
    def __init__(self, id, pair, winner=None, type=MatchType.SINGLE_ELIMINATION,
                 round=0, match_index_in_round=0, loser=None):
        if len(pair) != 2:
            raise ValueError(f"Match {id} needs exactly two slots, got {len(pair)}")
        self.id = id
        self.pair = (pair[0], pair[1])
        self.winner = winner
        self.loser = loser
        self.type = type
        self.round = round
        self.match_index_in_round = match_index_in_round

    @property
    def is_bye(self) -> bool:
        return any(slot.is_bye for slot in self.pair)

    def to_dict(self) -> Dict:
        data = {
            'id': self.id,
            'pair': [slot.to_value() for slot in self.pair],
            'winner': self.winner.to_value() if self.winner is not None else None,
            'type': self.type,
            'round': self.round,
            'match_index_in_round': self.match_index_in_round,
        }
        # Single elimination never feeds a second bracket
        if self.type != MatchType.SINGLE_ELIMINATION:
            data['loser'] = self.loser.to_value() if self.loser is not None else None
        return data

    def __repr__(self):
        return f"Match(id={self.id}, pair={list(self.pair)}, winner={self.winner}, loser={self.loser})"


def serialize_rounds(rounds: List[List[Match]]) -> List[List[Dict]]:
    return [[match.to_dict() for match in round_matches] for round_matches in rounds]


def serialize_result(result: Dict) -> Dict:
    """Convert a generator result into JSON/YAML friendly primitives."""
    serialized = {}
    for key, value in result.items():
        if key in ('rounds', 'upper_bracket_rounds', 'lower_bracket_rounds'):
            serialized[key] = serialize_rounds(value)
        elif key == 'grand_final_match':
            serialized[key] = [match.to_dict() for match in value] if value else None
        else:
            serialized[key] = value
    return serialized


def is_concrete(slot: Optional[Slot]) -> bool:
    """True for a slot that stands for someone: anything except None, Pending and Bye."""
    return slot is not None and not slot.is_pending and not slot.is_bye
