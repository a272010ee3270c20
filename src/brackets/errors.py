"""
Errors raised while validating bracket input.

Generators turn these into the 'error' field of their result; the web layer
turns them into 400 responses.
"""


class BracketError(Exception):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class InvalidInputError(BracketError):
    def __init__(self, message="Invalid input: participants must be a list."):
        super().__init__(message)


class NoParticipantsError(BracketError):
    def __init__(self, message="Please add at least 1 participant."):
        super().__init__(message)


class ParticipantInputError(BracketError):
    pass
