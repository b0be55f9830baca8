from typing import Any, Optional
from fastapi import APIRouter, Depends

from app.core.errors import ValidationError
from app.database import InMemoryStore, get_db
from app.models.user import UserRead

router = APIRouter()

def _read(user) -> UserRead:
    return UserRead.model_validate(user, from_attributes=True)

@router.get("")
def list_users(db: InMemoryStore = Depends(get_db)) -> Any:
    users = [_read(u) for u in db.list_users()]
    return {
        "users": users,
        "count": len(users)
    }

# Search only supports email for now
@router.get("/search")
def search_users(
    email: Optional[str] = None,
    db: InMemoryStore = Depends(get_db)
) -> Any:
    if not email:
        raise ValidationError("At least one search parameter (email) must be provided")
    return {"user": _read(db.get_user_by_email(email))}

@router.get("/{user_id}")
def get_user(user_id: str, db: InMemoryStore = Depends(get_db)) -> Any:
    return {"user": _read(db.get_user_by_id(user_id))}
