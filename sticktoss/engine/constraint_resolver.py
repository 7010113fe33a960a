"""
Constraint Resolver

Validates lock/separate groups against the roster and pre-seeds the forced
placements before the greedy balancer runs.

Validation happens in a fixed order and completes before any team is touched,
so a failing request never exposes a half-built partition:
1. at least 2 teams
2. at least as many players as teams
3. no more lock groups than teams
4. every locked id is on the roster
5. per separate group, in input order: fits in the team count, every id is
   on the roster, no id is already locked, no id was already separated

Placement rules:
- Lock group i goes to team i+1. This mapping is positional and fixed; it
  does not look at weights.
- Each separate group draws a fresh permutation of team indices and puts one
  member on each of the first len(group) teams of it.

Complexity: O(n + sum(len(group)) + g*k) for g separate groups and k teams.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Set

from sticktoss.engine.errors import (
    InvalidRequestError,
    LockSeparateConflictError,
    SeparationInfeasibleError,
    TooManyLockedGroupsError,
    UnknownParticipantError,
)
from sticktoss.engine.randomness import RandomSource
from sticktoss.models.entities import Participant, ParticipantId, Team

logger = logging.getLogger(__name__)


@dataclass
class ResolvedConstraints:
    teams: List[Team]
    assigned: Set[ParticipantId]


def validate(
    participants: Sequence[Participant],
    team_count: int,
    lock_groups: Sequence[Sequence[ParticipantId]],
    separate_groups: Sequence[Sequence[ParticipantId]],
) -> Dict[ParticipantId, Participant]:
    """
    Check every precondition and return the id -> participant lookup.

    Raises:
        InvalidRequestError, TooManyLockedGroupsError, UnknownParticipantError,
        SeparationInfeasibleError, LockSeparateConflictError
    """
    if team_count < 2:
        raise InvalidRequestError("must have at least 2 teams")
    if len(participants) < team_count:
        raise InvalidRequestError("not enough players for the requested number of teams")
    if len(lock_groups) > team_count:
        raise TooManyLockedGroupsError("cannot have more locked groups than teams")

    by_id: Dict[ParticipantId, Participant] = {p.id: p for p in participants}

    locked: Set[ParticipantId] = set()
    for group in lock_groups:
        for pid in group:
            if pid not in by_id:
                raise UnknownParticipantError(f"locked player {pid} not found in group", pid)
            if pid in locked:
                raise InvalidRequestError(f"player {pid} appears in more than one locked group")
            locked.add(pid)

    separated: Set[ParticipantId] = set()
    for group in separate_groups:
        if len(group) > team_count:
            raise SeparationInfeasibleError("cannot separate more players than the number of teams")
        for pid in group:
            if pid not in by_id:
                raise UnknownParticipantError(f"separated player {pid} not found in group", pid)
        for pid in group:
            if pid in locked:
                raise LockSeparateConflictError(
                    f"cannot separate player {pid}, already locked to a team", pid
                )
        for pid in group:
            if pid in separated:
                raise InvalidRequestError(f"player {pid} is listed more than once across separated groups")
            separated.add(pid)

    return by_id


def resolve(
    participants: Sequence[Participant],
    team_count: int,
    lock_groups: Sequence[Sequence[ParticipantId]],
    separate_groups: Sequence[Sequence[ParticipantId]],
    rng: RandomSource,
) -> ResolvedConstraints:
    """
    Validate constraints and place every locked/separated player.

    Args:
        participants: Full roster for this run
        team_count: Requested number of teams (>= 2)
        lock_groups: Ids that must share a team; group i lands on team i+1
        separate_groups: Ids that must land on pairwise different teams
        rng: Randomization policy used to spread separate groups

    Returns:
        ResolvedConstraints with the partially filled teams and the set of
        ids already placed
    """
    by_id = validate(participants, team_count, lock_groups, separate_groups)

    teams = [Team(number=i + 1) for i in range(team_count)]
    assigned: Set[ParticipantId] = set()

    for i, group in enumerate(lock_groups):
        for pid in group:
            teams[i].add(by_id[pid])
            assigned.add(pid)

    for group in separate_groups:
        _place_separated(group, teams, assigned, by_id, rng)

    logger.debug(
        "Resolved %d lock groups, %d separate groups: %d players pre-assigned",
        len(lock_groups), len(separate_groups), len(assigned),
    )
    return ResolvedConstraints(teams=teams, assigned=assigned)


def _place_separated(
    group: Sequence[ParticipantId],
    teams: List[Team],
    assigned: Set[ParticipantId],
    by_id: Dict[ParticipantId, Participant],
    rng: RandomSource,
) -> None:
    perm = rng.permutation(len(teams))
    for pid, idx in zip(group, perm):
        teams[idx].add(by_id[pid])
        assigned.add(pid)

