import gc
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from core.constants import EarlyExitPolicy, ErrorKind
from core.exceptions import (
    AlreadyRedeemedError,
    DateNotFoundError,
    ExpiredError,
    FutureRedemptionError,
    NoRecordError,
)
from schemas import Reward
from services.reward_store import RewardStore
from storage import InMemoryRewardRepository

UTC = timezone.utc
REFERENCE_DATE = datetime(2022, 2, 10, 12, 0, tzinfo=UTC)


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FrozenClock(REFERENCE_DATE)


@pytest.fixture
def repository():
    return InMemoryRewardRepository()


@pytest.fixture
def store(repository, clock):
    return RewardStore(repository, clock=clock)


def test_ensure_week_populated_creates_seven_pending_rewards(store, repository):
    store.ensure_week_populated("1", REFERENCE_DATE)

    rewards = repository.get_rewards("1")
    assert len(rewards) == 7
    for offset, reward in enumerate(rewards):
        expected_day = datetime(2022, 2, 6, tzinfo=UTC) + timedelta(days=offset)
        assert reward.available_at == expected_day
        assert reward.expires_at == expected_day + timedelta(hours=24)
        assert reward.redeemed_at is None


def test_ensure_week_populated_is_idempotent(store, repository):
    store.ensure_week_populated("1", REFERENCE_DATE)
    store.ensure_week_populated("1", REFERENCE_DATE)
    # another time of day, and another day of the same week
    store.ensure_week_populated("1", datetime(2022, 2, 12, 23, 0, tzinfo=UTC))

    assert len(repository.get_rewards("1")) == 7
    assert len(store.get_week("1", REFERENCE_DATE)) == 7


def test_ensure_week_populated_appends_other_weeks(store, repository):
    store.ensure_week_populated("1", REFERENCE_DATE)
    store.ensure_week_populated("1", datetime(2022, 1, 31, tzinfo=UTC))

    rewards = repository.get_rewards("1")
    assert len(rewards) == 14
    # insertion order is kept, the earlier week comes last
    assert rewards[0].available_at == datetime(2022, 2, 6, tzinfo=UTC)
    assert rewards[7].available_at == datetime(2022, 1, 30, tzinfo=UTC)


def test_ensure_week_populated_keeps_users_apart(store, repository):
    store.ensure_week_populated("1", REFERENCE_DATE)

    assert repository.get_rewards("2") is None
    assert store.get_week("2", REFERENCE_DATE) == []


def test_first_record_early_exit_stops_on_first_stored_day(repository, clock):
    # a collection whose first record sits mid-week
    first = datetime(2022, 2, 9, tzinfo=UTC)
    repository.add_reward(
        "1", Reward(available_at=first, expires_at=first + timedelta(hours=24))
    )
    store = RewardStore(repository, clock=clock, early_exit=EarlyExitPolicy.first_record)

    store.ensure_week_populated("1", REFERENCE_DATE)

    days = [reward.available_at.day for reward in repository.get_rewards("1")]
    # Sunday to Tuesday are added, walking stops on Wednesday
    assert days == [9, 6, 7, 8]


def test_all_days_early_exit_fills_the_whole_week(repository, clock):
    first = datetime(2022, 2, 9, tzinfo=UTC)
    repository.add_reward(
        "1", Reward(available_at=first, expires_at=first + timedelta(hours=24))
    )
    store = RewardStore(repository, clock=clock, early_exit=EarlyExitPolicy.all_days)

    store.ensure_week_populated("1", REFERENCE_DATE)
    store.ensure_week_populated("1", REFERENCE_DATE)

    days = sorted(reward.available_at.day for reward in repository.get_rewards("1"))
    assert days == [6, 7, 8, 9, 10, 11, 12]


def test_get_week_filters_by_calendar_day(store):
    store.ensure_week_populated("1", REFERENCE_DATE)
    store.ensure_week_populated("1", datetime(2022, 2, 14, tzinfo=UTC))

    week = store.get_week("1", datetime(2022, 2, 12, 23, 59, tzinfo=UTC))

    assert [reward.available_at.day for reward in week] == [6, 7, 8, 9, 10, 11, 12]


def test_redeem_sets_redeemed_at_to_now(store, repository, clock):
    store.ensure_week_populated("1", REFERENCE_DATE)

    reward = store.redeem("1", datetime(2022, 2, 10, 23, 0, tzinfo=UTC))

    assert reward.redeemed_at == clock.now
    assert reward.available_at == datetime(2022, 2, 10, tzinfo=UTC)
    stored = repository.get_rewards("1")
    # updated in place
    assert stored[4] == reward
    assert len(stored) == 7


def test_redeem_twice_fails(store):
    store.ensure_week_populated("1", REFERENCE_DATE)
    store.redeem("1", REFERENCE_DATE)

    with pytest.raises(AlreadyRedeemedError) as exc_info:
        store.redeem("1", REFERENCE_DATE)
    assert exc_info.value.kind == ErrorKind.RewardAlreadyRedeemed


def test_redeem_without_records_fails(store):
    with pytest.raises(NoRecordError) as exc_info:
        store.redeem("unknown", REFERENCE_DATE)
    assert exc_info.value.kind == ErrorKind.NoRecordFound


def test_redeem_unknown_date_fails(store):
    store.ensure_week_populated("1", REFERENCE_DATE)

    with pytest.raises(DateNotFoundError):
        store.redeem("1", datetime(2022, 3, 1, tzinfo=UTC))


def test_redeem_future_reward_fails_and_leaves_it_pending(store, repository):
    store.ensure_week_populated("1", REFERENCE_DATE)
    before = repository.get_rewards("1")

    with pytest.raises(FutureRedemptionError):
        store.redeem("1", datetime(2022, 2, 11, tzinfo=UTC))

    assert repository.get_rewards("1") == before


def test_redeem_expired_reward_fails(store):
    store.ensure_week_populated("1", REFERENCE_DATE)

    with pytest.raises(ExpiredError):
        store.redeem("1", datetime(2022, 2, 9, tzinfo=UTC))


def test_redeem_checks_expiry_before_redemption(store, clock):
    store.ensure_week_populated("1", REFERENCE_DATE)
    store.redeem("1", REFERENCE_DATE)

    clock.now = datetime(2022, 2, 12, tzinfo=UTC)

    with pytest.raises(ExpiredError):
        store.redeem("1", REFERENCE_DATE)


@pytest.mark.parametrize(
    "now",
    [
        datetime(2022, 2, 10, 0, 0, tzinfo=UTC),
        datetime(2022, 2, 11, 0, 0, tzinfo=UTC),
    ],
)
def test_redeem_window_bounds_are_inclusive(store, clock, now):
    store.ensure_week_populated("1", REFERENCE_DATE)
    clock.now = now

    reward = store.redeem("1", REFERENCE_DATE)

    assert reward.redeemed_at == now


class FailingOnceRepository(InMemoryRewardRepository):
    def __init__(self):
        super().__init__()
        self.failures_left = 1

    def add_rewards(self, user_id, rewards):
        if self.failures_left:
            self.failures_left -= 1
            raise RuntimeError("store unavailable")
        super().add_rewards(user_id, rewards)


@pytest.mark.parametrize("early_exit", list(EarlyExitPolicy))
def test_failed_write_leaves_no_partial_week(clock, early_exit):
    repository = FailingOnceRepository()
    store = RewardStore(repository, clock=clock, early_exit=early_exit)

    with pytest.raises(RuntimeError):
        store.ensure_week_populated("1", REFERENCE_DATE)
    assert repository.get_rewards("1") is None

    store.ensure_week_populated("1", REFERENCE_DATE)

    assert len(repository.get_rewards("1")) == 7
    assert len(store.get_week("1", REFERENCE_DATE)) == 7


def test_week_is_written_in_one_call(store, repository):
    with patch.object(repository, "add_rewards", wraps=repository.add_rewards) as add_rewards:
        store.ensure_week_populated("1", REFERENCE_DATE)

    add_rewards.assert_called_once()
    assert len(add_rewards.call_args.args[1]) == 7


def test_user_locks_are_released_after_use(store, repository):
    with pytest.raises(NoRecordError):
        store.redeem("unknown", REFERENCE_DATE)
    store.ensure_week_populated("1", REFERENCE_DATE)
    gc.collect()

    assert "unknown" not in repository._locks
    assert "1" not in repository._locks


def test_user_lock_is_shared_while_held(repository):
    with repository.lock("1"):
        assert "1" in repository._locks
        assert not repository._locks["1"].acquire(blocking=False)
