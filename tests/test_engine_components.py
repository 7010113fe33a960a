import pytest
from sticktoss.engine.balancer import balance, lightest_team, order_for_placement, remaining_participants
from sticktoss.engine.constraint_resolver import resolve, validate
from sticktoss.engine.errors import LockSeparateConflictError
from sticktoss.engine.randomness import RandomSource
from sticktoss.models.entities import Participant, Team


class FirstChoiceSource(RandomSource):
    """Never shuffles and always picks index 0."""

    def shuffle(self, seq):
        pass

    def choice_index(self, n):
        return 0


class TestRandomSource:
    """Unit tests for the randomization policy."""

    def test_permutation_covers_all_indices(self, rng):
        perm = rng.permutation(6)
        assert sorted(perm) == list(range(6))

    def test_choice_index_in_range(self, rng):
        picks = {rng.choice_index(3) for _ in range(200)}
        assert picks <= {0, 1, 2}
        assert len(picks) == 3

    def test_choice_index_rejects_empty(self, rng):
        with pytest.raises(ValueError):
            rng.choice_index(0)

    def test_same_seed_same_sequence(self):
        a, b = RandomSource(5), RandomSource(5)
        assert [a.permutation(8) for _ in range(5)] == [b.permutation(8) for _ in range(5)]

    def test_shuffle_in_place(self, rng):
        seq = list(range(20))
        rng.shuffle(seq)
        assert sorted(seq) == list(range(20))


class TestConstraintResolver:
    """Forced placements before balancing."""

    def test_locks_fill_leading_teams(self, five_players, rng):
        resolved = resolve(five_players, 3, [["A", "E"], ["B"]], [], rng)

        assert [p.id for p in resolved.teams[0].players] == ["A", "E"]
        assert resolved.teams[0].total_weight == 6
        assert [p.id for p in resolved.teams[1].players] == ["B"]
        assert resolved.teams[2].players == []
        assert resolved.assigned == {"A", "B", "E"}

    def test_separate_group_follows_permutation(self, five_players):
        rng = RandomSource(11)
        expected = RandomSource(11).permutation(3)
        resolved = resolve(five_players, 3, [], [["C", "D"]], rng)

        assert resolved.teams[expected[0]].players[0].id == "C"
        assert resolved.teams[expected[1]].players[0].id == "D"

    def test_validate_returns_lookup(self, five_players):
        lookup = validate(five_players, 2, [], [])
        assert set(lookup) == {"A", "B", "C", "D", "E"}
        assert lookup["C"].skill_weight == 3

    def test_conflict_raised_before_any_placement(self, five_players, rng):
        with pytest.raises(LockSeparateConflictError):
            resolve(five_players, 2, [["A"]], [["B", "C"], ["A", "D"]], rng)


class TestGreedyBalancer:
    """Least-loaded placement and tie-breaking."""

    def test_remaining_excludes_assigned(self, five_players):
        rest = remaining_participants(five_players, {"A", "C"})
        assert [p.id for p in rest] == ["B", "D", "E"]

    def test_order_is_heaviest_first(self, five_players, rng):
        shuffled = list(reversed(five_players))
        ordered = order_for_placement(shuffled, rng)
        assert [p.skill_weight for p in ordered] == [5, 4, 3, 2, 1]

    def test_equal_weights_keep_shuffled_order(self):
        players = [Participant(id=i, skill_weight=3) for i in range(5)]
        ordered = order_for_placement(players, FirstChoiceSource())
        assert [p.id for p in ordered] == [0, 1, 2, 3, 4]

    def test_lightest_team_uses_tie_break(self):
        teams = [Team(1, total_weight=4), Team(2, total_weight=2), Team(3, total_weight=2)]
        assert lightest_team(teams, FirstChoiceSource()).number == 2

    def test_balance_with_fixed_choices(self, five_players):
        teams = [Team(1), Team(2)]
        partition = balance(teams, five_players, FirstChoiceSource())

        assert [p.id for p in partition.teams[0].players] == ["A", "D", "E"]
        assert [p.id for p in partition.teams[1].players] == ["B", "C"]
        assert partition.totals() == [8, 7]

    def test_balance_tops_up_preseeded_teams(self, five_players, rng):
        teams = [Team(1), Team(2)]
        teams[0].add(Participant(id="X", skill_weight=5))
        partition = balance(teams, five_players[1:], rng)
        # 5 | 4 -> 5 | 4+3 -> 5+2 | 7 -> tie -> 8 | 7 or 7 | 8
        assert sorted(partition.totals()) == [7, 8]
