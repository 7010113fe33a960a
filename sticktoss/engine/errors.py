class TeamGenerationError(ValueError):
    """Base class for input-driven failures of the team generator.

    Every subclass carries a stable ``kind`` that the API layer surfaces
    verbatim. These errors are deterministic: the same input always fails
    the same way, so callers should never retry them.
    """

    kind = "TeamGenerationError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class InvalidRequestError(TeamGenerationError):
    kind = "InvalidRequest"


class TooManyLockedGroupsError(TeamGenerationError):
    kind = "TooManyLockedGroups"


class UnknownParticipantError(TeamGenerationError):
    kind = "UnknownParticipant"

    def __init__(self, message: str, participant_id=None):
        super().__init__(message)
        self.participant_id = participant_id


class SeparationInfeasibleError(TeamGenerationError):
    kind = "SeparationInfeasible"


class LockSeparateConflictError(TeamGenerationError):
    kind = "LockSeparateConflict"

    def __init__(self, message: str, participant_id=None):
        super().__init__(message)
        self.participant_id = participant_id
