"""
Greedy Balancer

Completes a partition by placing each unconstrained player on the currently
lightest team (longest-processing-time-first heuristic for multiway
partitioning).

Algorithm:
1. Shuffle the remaining players so equal weights have no fixed order
2. Stable sort by skill weight, heaviest first
3. For each player: collect every team at the minimum total weight, pick one
   uniformly at random, add the player there

Guarantee: with no forced placements, max(total) - min(total) never exceeds
the heaviest player's weight. This is a best-effort heuristic, not an exact
solver.

Complexity: O(n log n) sort + O(n * k) placement for n players, k teams.
"""

from typing import List, Sequence, Set

from sticktoss.engine.randomness import RandomSource
from sticktoss.models.entities import Participant, ParticipantId, Partition, Team


def remaining_participants(participants: Sequence[Participant], assigned: Set[ParticipantId]) -> List[Participant]:
    return [p for p in participants if p.id not in assigned]


def order_for_placement(players: List[Participant], rng: RandomSource) -> List[Participant]:
    """Shuffle, then stable-sort heaviest first; the shuffle is the tie-break."""
    ordered = list(players)
    rng.shuffle(ordered)
    ordered.sort(key=lambda p: p.skill_weight, reverse=True)
    return ordered


def lightest_team(teams: List[Team], rng: RandomSource) -> Team:
    min_weight = min(t.total_weight for t in teams)
    candidates = [t for t in teams if t.total_weight == min_weight]
    return candidates[rng.choice_index(len(candidates))]


def balance(teams: List[Team], remaining: Sequence[Participant], rng: RandomSource) -> Partition:
    """
    Assign every remaining player and freeze the result.

    Args:
        teams: Teams as left by the constraint resolver (may be partly filled)
        remaining: Players not yet placed
        rng: Randomization policy for ordering and tie-breaks

    Returns:
        Partition over all teams
    """
    for player in order_for_placement(list(remaining), rng):
        lightest_team(teams, rng).add(player)
    return Partition(teams=tuple(teams))
