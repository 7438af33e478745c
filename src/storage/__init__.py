from .base import RewardRepository
from .memory import InMemoryRewardRepository
from .sql import SqlRewardRepository
