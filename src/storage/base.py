import abc
import threading
import weakref
from contextlib import contextmanager
from typing import Iterator, List, Optional

from schemas import Reward


class RewardRepository(abc.ABC):
    """
    Storage for per-user reward collections.

    A collection is created lazily by the first ``add_rewards`` for a user,
    keeps insertion order, and is only ever appended to or has one record
    replaced in place. Read-modify-write sequences for a user must run
    inside ``lock(user_id)``.
    """

    def __init__(self):
        # a user's lock lives only while some caller holds it
        self._locks: "weakref.WeakValueDictionary[str, threading.Lock]" = (
            weakref.WeakValueDictionary()
        )
        self._locks_guard = threading.Lock()

    @contextmanager
    def lock(self, user_id: str) -> Iterator[None]:
        with self._locks_guard:
            user_lock = self._locks.get(user_id)
            if user_lock is None:
                user_lock = threading.Lock()
                self._locks[user_id] = user_lock
        with user_lock:
            yield

    @abc.abstractmethod
    def get_rewards(self, user_id: str) -> Optional[List[Reward]]:
        """Return the user's rewards in insertion order, or None if the user has none."""

    @abc.abstractmethod
    def add_rewards(self, user_id: str, rewards: List[Reward]) -> None:
        """Append all of ``rewards`` in one write: either every one is stored or none is."""

    def add_reward(self, user_id: str, reward: Reward) -> None:
        self.add_rewards(user_id, [reward])

    @abc.abstractmethod
    def replace_reward(self, user_id: str, index: int, reward: Reward) -> None:
        ...
