from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta

from app.models.goal import Goal, GoalDuration

class GoalCalculator:
    """
    Date and progress arithmetic for savings goals.

    Months and years are calendar based: adding a month to Jan 31 lands on
    the last day of February rather than spilling into March.
    """
    PERIODS = {
        GoalDuration.WEEKLY: timedelta(days=7),
        GoalDuration.MONTHLY: relativedelta(months=1),
        GoalDuration.YEARLY: relativedelta(years=1),
    }

    @staticmethod
    def calculate_end_date(start: datetime, duration: GoalDuration) -> datetime:
        return start + GoalCalculator.PERIODS[GoalDuration(duration)]

    @staticmethod
    def apply_contribution(goal: Goal, amount: float, now: datetime) -> Goal:
        """
        Adds ``amount`` to the goal and marks it completed once the target is reached.

        ``completed_at`` is recorded the first time only; later contributions
        keep increasing ``current_amount`` but never move or clear it.
        """
        goal.current_amount += amount
        if goal.current_amount >= goal.target_amount:
            goal.completed = True
            if goal.completed_at is None:
                goal.completed_at = now
        return goal
