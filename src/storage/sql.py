from typing import List, Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from models.reward import UserReward
from schemas import Reward
from storage.base import RewardRepository
from utils.date import as_utc


def _to_schema(row: UserReward) -> Reward:
    return Reward(
        available_at=as_utc(row.available_at),
        expires_at=as_utc(row.expires_at),
        redeemed_at=as_utc(row.redeemed_at) if row.redeemed_at else None,
    )


class SqlRewardRepository(RewardRepository):
    def __init__(self, engine: Engine):
        super().__init__()
        self.engine = engine

    def _select_user_rewards(self, session: Session, user_id: str) -> List[UserReward]:
        statement = (
            select(UserReward)
            .where(UserReward.user_id == user_id)
            .order_by(UserReward.id)
        )
        return session.exec(statement).all()

    def get_rewards(self, user_id: str) -> Optional[List[Reward]]:
        with Session(self.engine) as session:
            rows = self._select_user_rewards(session, user_id)
        if not rows:
            return None
        return [_to_schema(row) for row in rows]

    def add_rewards(self, user_id: str, rewards: List[Reward]) -> None:
        if not rewards:
            return
        with Session(self.engine) as session:
            session.add_all(
                [
                    UserReward(
                        user_id=user_id,
                        available_at=reward.available_at,
                        expires_at=reward.expires_at,
                        redeemed_at=reward.redeemed_at,
                    )
                    for reward in rewards
                ]
            )
            session.commit()

    def replace_reward(self, user_id: str, index: int, reward: Reward) -> None:
        with Session(self.engine) as session:
            row = self._select_user_rewards(session, user_id)[index]
            row.available_at = reward.available_at
            row.expires_at = reward.expires_at
            row.redeemed_at = reward.redeemed_at
            session.add(row)
            session.commit()
