"""
Example: generating reproducible teams with constraints

Shows how to call the team generator directly with a seeded RandomSource,
which is how you would script repeatable line-ups outside the HTTP API.
"""

from sticktoss.engine.errors import TeamGenerationError
from sticktoss.engine.partitioner import generate_teams
from sticktoss.engine.randomness import RandomSource
from sticktoss.models.entities import Participant
from sticktoss.utils.scoring import weight_spread


roster = [
    Participant(id=1, name="Ada", skill_weight=5),
    Participant(id=2, name="Bo", skill_weight=4),
    Participant(id=3, name="Cy", skill_weight=4),
    Participant(id=4, name="Di", skill_weight=3),
    Participant(id=5, name="Ed", skill_weight=2),
    Participant(id=6, name="Fi", skill_weight=2),
    Participant(id=7, name="Gus", skill_weight=1),
]

# 1. Ada and Gus always play together, Bo and Cy never do
partition = generate_teams(
    roster,
    team_count=2,
    lock_groups=[[1, 7]],
    separate_groups=[[2, 3]],
    rng=RandomSource(seed=42),
)

for team in partition:
    print(f"Team {team.number} ({team.total_weight}): {', '.join(p.name for p in team.players)}")
print(f"Spread: {weight_spread(partition)}")

# 2. Impossible requests raise a typed error
try:
    generate_teams(roster, team_count=2, separate_groups=[[1, 2, 3]])
except TeamGenerationError as exc:
    print(f"Rejected: {exc.kind} - {exc.message}")
