from typing import List

from sticktoss.models.entities import Partition


def team_totals(partition: Partition) -> List[int]:
    return [sum(p.skill_weight for p in team.players) for team in partition]


def weight_spread(partition: Partition) -> int:
    totals = partition.totals()
    return max(totals) - min(totals) if totals else 0


def is_balanced_within(partition: Partition, bound: int) -> bool:
    return weight_spread(partition) <= bound
