"""
In-memory data store for users and goals.

All state lives in process memory and is lost on restart. Every read
takes the shared side of a fair reader/writer lock, every write the
exclusive side, and the lock is only held around dictionary work.

Records are copied on the way in and on the way out, so callers never
hold a live reference to a stored object.
"""
from typing import Callable, Dict, List

from fastapi import Request
from readerwriterlock import rwlock

from app.core.errors import AlreadyExistsError, NotFoundError
from app.models.goal import Goal
from app.models.user import User


class InMemoryStore:
    def __init__(self):
        # Primary user index by email, secondary by id. Both change under the same write lock.
        self._users_by_email: Dict[str, User] = {}
        self._users_by_id: Dict[str, User] = {}
        self._goals: Dict[str, Goal] = {}
        self._lock = rwlock.RWLockFair()

    # --- Users ---

    def create_user(self, user: User) -> None:
        with self._lock.gen_wlock():
            if user.email in self._users_by_email:
                raise AlreadyExistsError("User with this email already exists")
            if user.id in self._users_by_id:
                raise AlreadyExistsError("User with this id already exists")
            stored = user.model_copy(deep=True)
            self._users_by_email[stored.email] = stored
            self._users_by_id[stored.id] = stored

    def get_user_by_email(self, email: str) -> User:
        with self._lock.gen_rlock():
            user = self._users_by_email.get(email)
            if user is None:
                raise NotFoundError("User not found")
            return user.model_copy(deep=True)

    def get_user_by_id(self, user_id: str) -> User:
        with self._lock.gen_rlock():
            user = self._users_by_id.get(user_id)
            if user is None:
                raise NotFoundError("User not found")
            return user.model_copy(deep=True)

    def delete_user(self, email: str) -> None:
        with self._lock.gen_wlock():
            user = self._users_by_email.pop(email, None)
            if user is None:
                raise NotFoundError("User not found")
            del self._users_by_id[user.id]

    def list_users(self) -> List[User]:
        with self._lock.gen_rlock():
            return [u.model_copy(deep=True) for u in self._users_by_email.values()]

    def count_users(self) -> int:
        with self._lock.gen_rlock():
            return len(self._users_by_email)

    # --- Goals ---

    def create_goal(self, goal: Goal) -> None:
        with self._lock.gen_wlock():
            if goal.id in self._goals:
                raise AlreadyExistsError("Goal with this id already exists")
            self._goals[goal.id] = goal.model_copy(deep=True)

    def get_goal_by_id(self, goal_id: str) -> Goal:
        with self._lock.gen_rlock():
            goal = self._goals.get(goal_id)
            if goal is None:
                raise NotFoundError("Goal not found")
            return goal.model_copy(deep=True)

    def get_goals_by_user_id(self, user_id: str) -> List[Goal]:
        with self._lock.gen_rlock():
            return [g.model_copy(deep=True) for g in self._goals.values() if g.user_id == user_id]

    def update_goal(self, goal: Goal) -> None:
        """Replace the stored goal with ``goal`` (full record, no merge)."""
        with self._lock.gen_wlock():
            if goal.id not in self._goals:
                raise NotFoundError("Goal not found")
            self._goals[goal.id] = goal.model_copy(deep=True)

    def apply_goal_update(self, goal_id: str, mutate: Callable[[Goal], Goal]) -> Goal:
        """
        Read-modify-write a goal as one exclusive operation.

        ``mutate`` gets a private copy of the stored goal and returns the
        record to store. If it raises, nothing is written. It runs while the
        write lock is held, so it must not block or call back into the store.
        """
        with self._lock.gen_wlock():
            current = self._goals.get(goal_id)
            if current is None:
                raise NotFoundError("Goal not found")
            updated = mutate(current.model_copy(deep=True))
            if updated.id != goal_id:
                raise ValueError("Goal update must not change the goal id")
            self._goals[goal_id] = updated.model_copy(deep=True)
            return updated

    def delete_goal(self, goal_id: str) -> None:
        with self._lock.gen_wlock():
            if self._goals.pop(goal_id, None) is None:
                raise NotFoundError("Goal not found")

    def count_goals(self) -> int:
        with self._lock.gen_rlock():
            return len(self._goals)


def get_db(request: Request) -> InMemoryStore:
    return request.app.state.store
