import logging
from typing import Iterable, Optional, Sequence

from sticktoss.engine.balancer import balance, remaining_participants
from sticktoss.engine.constraint_resolver import resolve
from sticktoss.engine.randomness import RandomSource, default_random_source
from sticktoss.models.entities import ConstraintGroup, ConstraintKind, Participant, ParticipantId, Partition
from sticktoss.utils.scoring import weight_spread

logger = logging.getLogger(__name__)


def generate_teams(
    participants: Iterable[Participant],
    team_count: int,
    lock_groups: Optional[Iterable[Iterable[ParticipantId]]] = None,
    separate_groups: Optional[Iterable[Iterable[ParticipantId]]] = None,
    constraints: Optional[Iterable[ConstraintGroup]] = None,
    rng: Optional[RandomSource] = None,
) -> Partition:
    """
    Split participants into team_count balanced teams.

    Lock groups are placed first (group i on team i+1), then separate groups,
    then everyone else greedily onto the lightest team. ConstraintGroup values
    in constraints are split by kind and follow the plain lock_groups and
    separate_groups, keeping their relative order. Inputs are copied;
    nothing the caller passes in is mutated or retained.

    Raises:
        TeamGenerationError subclass when the request cannot be satisfied
    """
    roster: Sequence[Participant] = list(participants)
    locks = [tuple(g) for g in lock_groups or ()]
    separates = [tuple(g) for g in separate_groups or ()]
    for group in constraints or ():
        if group.kind is ConstraintKind.LOCK:
            locks.append(tuple(group))
        else:
            separates.append(tuple(group))
    rng = rng or default_random_source()

    resolved = resolve(roster, team_count, locks, separates, rng)
    partition = balance(resolved.teams, remaining_participants(roster, resolved.assigned), rng)

    logger.info(
        "Generated %d teams from %d players: totals=%s spread=%d",
        team_count, len(roster), partition.totals(), weight_spread(partition),
    )
    return partition
