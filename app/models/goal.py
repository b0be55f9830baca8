from enum import Enum
from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field

from app.models.user import new_id, utcnow

# Goals Models

class GoalDuration(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

class GoalBase(SQLModel):
    title: str
    target_amount: float
    duration: GoalDuration

class Goal(GoalBase):
    id: str = Field(default_factory=new_id)
    user_id: str

    # Progress & Status
    current_amount: float = 0.0
    completed: bool = False
    completed_at: Optional[datetime] = None

    # Timestamps
    start_date: datetime
    end_date: datetime
    created_at: datetime = Field(default_factory=utcnow)

class GoalCreate(GoalBase):
    title: str = Field(min_length=1)
    target_amount: float = Field(gt=0)

class GoalProgressUpdate(SQLModel):
    amount: float = Field(gt=0)
