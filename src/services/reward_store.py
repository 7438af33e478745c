import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from core.constants import REWARD_WINDOW, EarlyExitPolicy
from core.exceptions import (
    AlreadyRedeemedError,
    DateNotFoundError,
    ExpiredError,
    FutureRedemptionError,
    NoRecordError,
    RewardError,
)
from schemas import Reward
from storage.base import RewardRepository
from utils.date import days_equal, in_week, to_calendar_day, utc_now, week_days

logger = logging.getLogger(__name__)


class RewardStore:
    """
    Issues one reward per calendar day of a requested week and redeems them.

    All reads and writes for a user happen under the repository's per-user
    lock, and every guard runs before the single write of a redemption.
    """

    def __init__(
        self,
        repository: RewardRepository,
        clock: Callable[[], datetime] = utc_now,
        early_exit: EarlyExitPolicy = EarlyExitPolicy.first_record,
    ):
        self.repository = repository
        self.clock = clock
        self.early_exit = early_exit

    def _is_week_populated(
        self, rewards: List[Reward], available_at: datetime, days: List[datetime]
    ) -> bool:
        if self.early_exit == EarlyExitPolicy.all_days:
            return all(
                any(days_equal(reward.available_at, day) for reward in rewards)
                for day in days
            )
        # the collection starts with the first week ever populated, so hitting
        # its first day means this week was already walked
        return days_equal(rewards[0].available_at, available_at)

    def ensure_week_populated(self, user_id: str, reference_date: datetime) -> None:
        days = week_days(reference_date)
        new_rewards: List[Reward] = []

        with self.repository.lock(user_id):
            rewards = self.repository.get_rewards(user_id) or []

            for day in days:
                available_at = to_calendar_day(day)
                reward = Reward(
                    available_at=available_at,
                    redeemed_at=None,
                    expires_at=available_at + REWARD_WINDOW,
                )

                if not rewards:
                    new_rewards.append(reward)
                    rewards.append(reward)
                    continue

                if self._is_week_populated(rewards, available_at, days):
                    logger.debug(
                        "Week of %s already populated for user %s",
                        days[0].to_date_string(),
                        user_id,
                    )
                    break

                if any(days_equal(existing.available_at, available_at) for existing in rewards):
                    continue

                new_rewards.append(reward)
                rewards.append(reward)

            # a single write, so a failure never leaves the week half stored
            self.repository.add_rewards(user_id, new_rewards)

        if new_rewards:
            logger.info(
                "Created %d rewards for user %s in week of %s",
                len(new_rewards),
                user_id,
                days[0].to_date_string(),
            )

    def get_week(self, user_id: str, reference_date: datetime) -> List[Reward]:
        rewards = self.repository.get_rewards(user_id) or []
        return [
            reward for reward in rewards if in_week(reward.available_at, reference_date)
        ]

    def get_weekly_rewards(self, user_id: str, reference_date: datetime) -> List[Reward]:
        self.ensure_week_populated(user_id, reference_date)
        return self.get_week(user_id, reference_date)

    def redeem(self, user_id: str, target_date: datetime) -> Reward:
        with self.repository.lock(user_id):
            rewards = self.repository.get_rewards(user_id)
            now = self.clock()
            try:
                index, reward = self._find_redeemable(rewards, target_date, now)
            except RewardError as exc:
                logger.info(
                    "Redeem rejected for user %s on %s: %s",
                    user_id,
                    to_calendar_day(target_date).to_date_string(),
                    exc.kind.value,
                )
                raise

            updated = reward.model_copy(update={"redeemed_at": now})
            self.repository.replace_reward(user_id, index, updated)

        logger.info(
            "Redeemed reward of %s for user %s",
            to_calendar_day(updated.available_at).to_date_string(),
            user_id,
        )
        return updated

    @staticmethod
    def _find_redeemable(
        rewards: Optional[List[Reward]], target_date: datetime, now: datetime
    ) -> Tuple[int, Reward]:
        if not rewards:
            raise NoRecordError()

        index = next(
            (
                position
                for position, reward in enumerate(rewards)
                if days_equal(reward.available_at, target_date)
            ),
            None,
        )
        if index is None:
            raise DateNotFoundError()

        reward = rewards[index]
        if reward.available_at > now:
            raise FutureRedemptionError()
        if reward.expires_at < now:
            raise ExpiredError()
        if reward.redeemed_at is not None:
            raise AlreadyRedeemedError()
        return index, reward
