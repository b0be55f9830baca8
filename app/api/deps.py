from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from app.core.config import settings
from app.core.errors import UnauthorizedError
from app.core.security import Identity
from app.database import InMemoryStore, get_db
from app.services.auth_service import AuthService
from app.services.goal_service import GoalService
from app.services.token_service import TokenService

reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/login",
    auto_error=False
)

def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service

def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service

def get_goal_service(db: InMemoryStore = Depends(get_db)) -> GoalService:
    return GoalService(db)

def get_current_identity(
    token: Optional[str] = Depends(reusable_oauth2),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    """
    Gatekeeper for protected routes: any failure is a 401 before the route runs.
    The returned Identity is the only way routes learn who the caller is.
    """
    if not token:
        raise UnauthorizedError("Authorization header is required")

    claims = tokens.validate(token)
    return Identity(user_id=claims.user_id, email=claims.email)
