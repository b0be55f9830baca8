from typing import Any, List
from fastapi import APIRouter, Depends, status

from app.api import deps
from app.core.security import Identity
from app.models.goal import Goal, GoalCreate, GoalProgressUpdate
from app.services.goal_service import GoalService

router = APIRouter()

@router.post("", response_model=Goal, status_code=status.HTTP_201_CREATED)
def create_goal(
    goal_in: GoalCreate,
    identity: Identity = Depends(deps.get_current_identity),
    goals: GoalService = Depends(deps.get_goal_service)
) -> Any:
    return goals.create_goal(identity, goal_in)

@router.get("", response_model=List[Goal])
def list_goals(
    identity: Identity = Depends(deps.get_current_identity),
    goals: GoalService = Depends(deps.get_goal_service)
) -> Any:
    """
    Fetch all goals belonging to the current user.
    """
    return goals.list_goals(identity)

@router.patch("/{goal_id}/progress", response_model=Goal)
def update_goal_progress(
    goal_id: str,
    progress_in: GoalProgressUpdate,
    identity: Identity = Depends(deps.get_current_identity),
    goals: GoalService = Depends(deps.get_goal_service)
) -> Any:
    return goals.update_progress(identity, goal_id, progress_in.amount)

@router.delete("/{goal_id}")
def delete_goal(
    goal_id: str,
    identity: Identity = Depends(deps.get_current_identity),
    goals: GoalService = Depends(deps.get_goal_service)
) -> Any:
    goals.delete_goal(identity, goal_id)
    return {"message": "Goal deleted successfully"}
