import logging
from datetime import datetime, timezone
from typing import Optional

from app.core import security
from app.core.errors import AlreadyExistsError, ConflictError, NotFoundError, UnauthorizedError
from app.core.security import Identity
from app.database import InMemoryStore
from app.models.user import AuthResponse, LoginRequest, SignupRequest, User, UserRead, UserResponse
from app.services.token_service import TokenService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"

def parse_bearer_header(authorization: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header value."""
    if not authorization:
        raise UnauthorizedError("No authorization header provided")
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise UnauthorizedError("Authorization header format must be Bearer <token>")
    return parts[1]

class AuthService:
    """Signup, login and logout on top of the user store and the token service."""

    def __init__(
        self,
        store: InMemoryStore,
        tokens: TokenService,
        bcrypt_rounds: int = 10,
        revoke_on_logout: bool = False,
    ):
        self.store = store
        self.tokens = tokens
        self.bcrypt_rounds = bcrypt_rounds
        self.revoke_on_logout = revoke_on_logout
        # Compared against when the email is unknown, so both login failures cost one bcrypt check
        self._dummy_hash = security.get_password_hash("not-a-real-password", rounds=bcrypt_rounds)

    def _auth_response(self, user: User) -> AuthResponse:
        token = self.tokens.issue(user.id, user.email)
        return AuthResponse(
            token=token,
            user=UserResponse(id=user.id, email=user.email, created_at=user.created_at),
        )

    def signup(self, signup_data: SignupRequest) -> AuthResponse:
        # 1. Check existing
        try:
            self.store.get_user_by_email(signup_data.email)
        except NotFoundError:
            pass
        else:
            raise ConflictError("User with this email already exists")

        # 2. Create User
        now = datetime.now(timezone.utc)
        user = User(
            email=signup_data.email,
            password=security.get_password_hash(signup_data.password, rounds=self.bcrypt_rounds),
            created_at=now,
            updated_at=now,
        )
        try:
            self.store.create_user(user)
        except AlreadyExistsError:
            # Lost a race with a concurrent signup for the same email
            raise ConflictError("User with this email already exists")
        logger.info(f"Registered user {user.id} ({user.email})")

        # 3. Login immediately
        return self._auth_response(user)

    def login(self, login_data: LoginRequest) -> AuthResponse:
        try:
            user = self.store.get_user_by_email(login_data.email)
        except NotFoundError:
            security.verify_password(login_data.password, self._dummy_hash)
            logger.info(f"Failed login for {login_data.email}")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if not security.verify_password(login_data.password, user.password):
            logger.info(f"Failed login for {login_data.email}")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        return self._auth_response(user)

    def logout(self, authorization: Optional[str]) -> str:
        """
        Checks the presented bearer token and returns its user id.

        Tokens are stateless, so unless revocation is enabled the token keeps
        working until it expires; the client is expected to discard it.
        """
        token = parse_bearer_header(authorization)
        claims = self.tokens.validate(token)
        if self.revoke_on_logout:
            self.tokens.revoke(claims)
        logger.info(f"User {claims.user_id} logged out")
        return claims.user_id

    def current_user(self, identity: Identity) -> UserRead:
        user = self.store.get_user_by_id(identity.user_id)
        return UserRead.model_validate(user, from_attributes=True)
