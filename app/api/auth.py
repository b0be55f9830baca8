from typing import Any, Optional
from fastapi import APIRouter, Depends, Header, status

from app.api import deps
from app.core.security import Identity
from app.models.user import AuthResponse, LoginRequest, SignupRequest
from app.services.auth_service import AuthService

router = APIRouter()

@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    signup_data: SignupRequest,
    auth: AuthService = Depends(deps.get_auth_service)
) -> Any:
    return auth.signup(signup_data)

@router.post("/login", response_model=AuthResponse)
def login(
    login_data: LoginRequest,
    auth: AuthService = Depends(deps.get_auth_service)
) -> Any:
    return auth.login(login_data)

@router.post("/logout")
def logout(
    authorization: Optional[str] = Header(None),
    auth: AuthService = Depends(deps.get_auth_service)
) -> Any:
    # Stateless tokens: this confirms the token, the client is expected to drop it
    user_id = auth.logout(authorization)
    return {
        "message": "Successfully logged out",
        "user_id": user_id
    }

@router.get("/me")
def read_users_me(
    identity: Identity = Depends(deps.get_current_identity),
    auth: AuthService = Depends(deps.get_auth_service)
) -> Any:
    return {"user": auth.current_user(identity)}
