"""
Participant list handling: parse pasted names and drop duplicates.
"""
import re
from typing import Dict, List, Optional

from .errors import ParticipantInputError

_SEPARATORS = re.compile(r'[\n,]+')


def split_names(text: str) -> List[str]:
    """Split on newlines and commas, trimming each name and dropping blanks."""
    return [name.strip() for name in _SEPARATORS.split(text) if name.strip()]


def parse_participants(text: str, existing: Optional[List[str]] = None) -> Dict:
    """
    Add names from free text to an existing participant list.

    Returns dict with:
    - 'participants': existing names followed by the new ones
    - 'added': number of names added
    - 'duplicates': number of names skipped because they were already present
    - 'message': summary for the user
    """
    if text is None or text.strip() == "":
        raise ParticipantInputError("Participant input cannot be empty.")

    names = split_names(text)
    if not names:
        raise ParticipantInputError("No valid participant names entered.")

    participants = list(existing) if existing else []
    added = 0
    duplicates = 0
    for name in names:
        if name in participants:
            duplicates += 1
        else:
            participants.append(name)
            added += 1

    message = f"{added} participant(s) added."
    if duplicates > 0:
        message += f" {duplicates} duplicate(s) ignored."

    return {
        'participants': participants,
        'added': added,
        'duplicates': duplicates,
        'message': message,
    }


def remove_participant(participants: List[str], name: str) -> List[str]:
    return [p for p in participants if p != name]
