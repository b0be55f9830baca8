import logging
from datetime import datetime, timezone
from typing import List

from app.core.errors import ForbiddenError, ValidationError
from app.core.security import Identity
from app.database import InMemoryStore
from app.models.goal import Goal, GoalCreate
from app.services.goal_calculator import GoalCalculator

logger = logging.getLogger(__name__)

class GoalService:
    """Savings goal CRUD, always scoped to the authenticated identity."""

    def __init__(self, store: InMemoryStore):
        self.store = store

    def create_goal(self, identity: Identity, goal_in: GoalCreate) -> Goal:
        if not goal_in.title.strip():
            raise ValidationError("Title is required")
        if goal_in.target_amount <= 0:
            raise ValidationError("Target amount must be greater than 0")

        now = datetime.now(timezone.utc)
        goal = Goal(
            user_id=identity.user_id,
            title=goal_in.title,
            target_amount=goal_in.target_amount,
            duration=goal_in.duration,
            current_amount=0.0,
            completed=False,
            start_date=now,
            end_date=GoalCalculator.calculate_end_date(now, goal_in.duration),
            created_at=now,
        )
        self.store.create_goal(goal)
        logger.info(f"User {identity.user_id} created {goal.duration.value} goal {goal.id}")
        return goal

    def list_goals(self, identity: Identity) -> List[Goal]:
        return self.store.get_goals_by_user_id(identity.user_id)

    def update_progress(self, identity: Identity, goal_id: str, amount: float) -> Goal:
        if amount <= 0:
            raise ValidationError("Amount must be greater than 0")

        # Runs under the store's write lock: no logging or other I/O in here
        def contribute(goal: Goal) -> Goal:
            if goal.user_id != identity.user_id:
                raise ForbiddenError("Forbidden")
            return GoalCalculator.apply_contribution(goal, amount, datetime.now(timezone.utc))

        try:
            goal = self.store.apply_goal_update(goal_id, contribute)
        except ForbiddenError:
            self._log_denied(identity, goal_id)
            raise
        if goal.completed and goal.current_amount - amount < goal.target_amount:
            logger.info(f"Goal {goal.id} reached its target")
        return goal

    def delete_goal(self, identity: Identity, goal_id: str) -> None:
        goal = self.store.get_goal_by_id(goal_id)
        if goal.user_id != identity.user_id:
            self._log_denied(identity, goal_id)
            raise ForbiddenError("Forbidden")
        self.store.delete_goal(goal_id)
        logger.info(f"User {identity.user_id} deleted goal {goal_id}")

    @staticmethod
    def _log_denied(identity: Identity, goal_id: str) -> None:
        logger.warning(f"User {identity.user_id} denied access to goal {goal_id}")
