"""
Plain text export of a generated bracket.
"""
from typing import Dict, List, Optional

from .errors import BracketError
from .models import Match, Slot

RULE = "===================================="
ROUND_RULE = "---------------------"


def display_slot(slot: Optional[Slot]) -> str:
    """Text for one side of a match; each slot kind reads differently."""
    if slot is None or slot.is_pending:
        return "TBD"
    if slot.is_player:
        return slot.name
    if slot.is_reference:
        return slot.text
    return slot.to_value()


def export_filename(tournament_type: str) -> str:
    return f"{tournament_type}_elim_schedule.txt"


def _is_playable(match: Match) -> bool:
    """Both sides known (players or references) and nothing resolved yet."""
    return match.winner is None and all(
        slot.is_player or slot.is_reference for slot in match.pair
    )


def _winner_line(match: Match, champion_note: str) -> Optional[str]:
    winner = match.winner
    if winner is not None and not winner.is_bye:
        if match.is_bye:
            return f"    Winner: {display_slot(winner)} (advances due to BYE)"
        if match.pair[1].is_winner_slot:
            return f"    Winner: {display_slot(winner)} ({champion_note})"
        return None
    if _is_playable(match):
        return "    Winner: TBD"
    return None


def _match_lines(match: Match, number: int, champion_note: str) -> List[str]:
    p1, p2 = (display_slot(slot) for slot in match.pair)
    lines = [f"  Match {number} (ID: {match.id}): {p1} vs {p2}"]
    winner_line = _winner_line(match, champion_note)
    if winner_line:
        lines.append(winner_line)
    lines.append("")
    return lines


def _bracket_lines(rounds: List[List[Match]], title: str, champion_note: str) -> List[str]:
    lines = []
    for round_index, round_matches in enumerate(rounds):
        lines.append(f"{title}Round {round_index + 1}")
        lines.append(ROUND_RULE)
        for match in round_matches:
            lines.extend(_match_lines(match, match.match_index_in_round + 1, champion_note))
    return lines


def _has_data(result: Dict, tournament_type: str) -> bool:
    if result.get('champion'):
        return True
    if tournament_type == 'single':
        return bool(result.get('rounds'))
    return bool(
        result.get('upper_bracket_rounds')
        or result.get('lower_bracket_rounds')
        or result.get('grand_final_match')
    )


def export_schedule(result: Dict, tournament_type: str, participant_count: int) -> str:
    """
    Render a generator result as a plain text schedule.

    Args:
        result: Output of generate_single_elimination / generate_double_elimination
        tournament_type: 'single' or 'double'
        participant_count: Number of participants the bracket was built from
    """
    if result.get('error'):
        raise BracketError(result['error'])
    if not _has_data(result, tournament_type):
        raise BracketError("No schedule to export.")

    champion = result.get('champion')

    if tournament_type == 'single':
        lines = ["Single Elimination Tournament Schedule", RULE, ""]
        if champion and participant_count == 1:
            lines.extend([f"CHAMPION (Auto-Win): {champion}", ""])
        lines.extend(_bracket_lines(result.get('rounds') or [], "", "Champion"))
        if champion and participant_count > 1:
            lines.extend([RULE, f"CHAMPION: {champion}", RULE])
        return "\n".join(lines) + "\n"

    lines = ["Double Elimination Tournament Schedule", RULE, ""]
    if champion and participant_count == 1:
        lines.extend([f"CHAMPION (Auto-Win): {champion}", ""])

    upper_rounds = result.get('upper_bracket_rounds') or []
    if upper_rounds:
        lines.append("--- UPPER BRACKET ---")
        lines.extend(_bracket_lines(upper_rounds, "Upper Bracket ", "Champion of UB"))

    lower_rounds = result.get('lower_bracket_rounds') or []
    if lower_rounds:
        lines.extend(["", "--- LOWER BRACKET ---"])
        lines.extend(_bracket_lines(lower_rounds, "Lower Bracket ", "Champion of LB"))

    grand_final = result.get('grand_final_match')
    if grand_final:
        gf = grand_final[0]
        p1, p2 = (display_slot(slot) for slot in gf.pair)
        lines.extend([
            "",
            "--- GRAND FINAL ---",
            f"Match {gf.match_index_in_round + 1} (ID: {gf.id}): {p1} vs {p2}",
            "  Winner: TBD",
            "",
        ])

    if champion and participant_count > 1:
        lines.extend([RULE, f"OVERALL CHAMPION: {champion}", RULE])

    return "\n".join(lines) + "\n"
