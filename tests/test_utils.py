import re

import pytest
import redis
from pydantic import ValidationError
from sticktoss.config.settings import SHARE_ID_MAX_LENGTH, Settings
from sticktoss.models.entities import Participant, Partition, Team
from sticktoss.storage.cache import GameCache
from sticktoss.storage.database import GameModel
from sticktoss.utils.scoring import is_balanced_within, team_totals, weight_spread
from sticktoss.utils.share_id import generate_share_id


def build_partition(*weights_per_team):
    teams = []
    pid = 0
    for number, weights in enumerate(weights_per_team, start=1):
        team = Team(number)
        for w in weights:
            team.add(Participant(id=pid, skill_weight=w))
            pid += 1
        teams.append(team)
    return Partition(tuple(teams))


class TestScoring:
    """Balance metrics over a partition."""

    def test_totals_and_spread(self):
        partition = build_partition([5, 2], [4, 1], [3, 3])
        assert team_totals(partition) == [7, 5, 6]
        assert weight_spread(partition) == 2

    def test_balanced_within(self):
        partition = build_partition([5], [1])
        assert is_balanced_within(partition, 4)
        assert not is_balanced_within(partition, 3)

    def test_team_of(self):
        partition = build_partition([5, 2], [4])
        assert partition.team_of(1).number == 1
        assert partition.team_of(2).number == 2
        assert partition.team_of(42) is None


class TestShareId:
    def test_length_and_alphabet(self):
        for length in (1, 4, 10, 12):
            share_id = generate_share_id(length)
            assert len(share_id) == length
            assert re.fullmatch(r"[A-Za-z0-9_-]+", share_id)

    def test_ids_are_random(self):
        assert len({generate_share_id() for _ in range(200)}) == 200


class BrokenRedis:
    def get(self, key):
        raise redis.ConnectionError("down")

    def setex(self, key, ttl, value):
        raise redis.ConnectionError("down")

    def delete(self, key):
        raise redis.ConnectionError("down")

    def ping(self):
        raise redis.ConnectionError("down")


class TestGameCache:
    """Redis-backed snapshot cache."""

    def test_round_trip_with_ttl(self, fake_redis):
        cache = GameCache(client=fake_redis, ttl_seconds=60)
        cache.set("abc", {"share_id": "abc", "teams": []})

        assert cache.get("abc") == {"share_id": "abc", "teams": []}
        assert fake_redis.ttls["game:abc"] == 60

        cache.delete("abc")
        assert cache.get("abc") is None

    def test_redis_failure_is_a_miss(self):
        cache = GameCache(client=BrokenRedis())
        cache.set("abc", {"x": 1})
        assert cache.get("abc") is None
        assert cache.health_check() is False

    def test_health_check(self, fake_redis):
        assert GameCache(client=fake_redis).health_check() is True


class TestSettings:
    """Configuration bounds tied to the storage schema."""

    def test_share_id_length_fits_column(self):
        assert Settings(share_id_length=SHARE_ID_MAX_LENGTH).share_id_length == SHARE_ID_MAX_LENGTH

    def test_share_id_length_too_long_rejected(self):
        with pytest.raises(ValidationError):
            Settings(share_id_length=SHARE_ID_MAX_LENGTH + 1)

    def test_column_width_matches_limit(self):
        assert GameModel.__table__.c.share_id.type.length == SHARE_ID_MAX_LENGTH
