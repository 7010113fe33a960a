from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Hashable, List, Optional, Tuple

ParticipantId = Hashable


class ConstraintKind(str, Enum):
    LOCK = "lock"
    SEPARATE = "separate"


@dataclass(frozen=True)
class Participant:
    id: ParticipantId
    skill_weight: int  # 1..5, validated by the API layer
    name: str = ""
    attributes: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class ConstraintGroup:
    kind: ConstraintKind
    participant_ids: Tuple[ParticipantId, ...]

    @classmethod
    def lock(cls, ids) -> "ConstraintGroup":
        return cls(ConstraintKind.LOCK, tuple(ids))

    @classmethod
    def separate(cls, ids) -> "ConstraintGroup":
        return cls(ConstraintKind.SEPARATE, tuple(ids))

    def __len__(self) -> int:
        return len(self.participant_ids)

    def __iter__(self):
        return iter(self.participant_ids)


@dataclass
class Team:
    number: int  # 1-based
    players: List[Participant] = field(default_factory=list)
    total_weight: int = 0

    def add(self, participant: Participant) -> None:
        self.players.append(participant)
        self.total_weight += participant.skill_weight


@dataclass(frozen=True)
class Partition:
    teams: Tuple[Team, ...]

    def __iter__(self):
        return iter(self.teams)

    def __len__(self) -> int:
        return len(self.teams)

    def totals(self) -> List[int]:
        return [t.total_weight for t in self.teams]

    def team_of(self, participant_id: ParticipantId) -> Optional[Team]:
        for team in self.teams:
            if any(p.id == participant_id for p in team.players):
                return team
        return None
