from typing import Dict, List, Optional

from schemas import Reward
from storage.base import RewardRepository


class InMemoryRewardRepository(RewardRepository):
    def __init__(self):
        super().__init__()
        self._rewards: Dict[str, List[Reward]] = {}

    def get_rewards(self, user_id: str) -> Optional[List[Reward]]:
        rewards = self._rewards.get(user_id)
        if rewards is None:
            return None
        return list(rewards)

    def add_rewards(self, user_id: str, rewards: List[Reward]) -> None:
        if rewards:
            self._rewards.setdefault(user_id, []).extend(rewards)

    def replace_reward(self, user_id: str, index: int, reward: Reward) -> None:
        self._rewards[user_id][index] = reward
