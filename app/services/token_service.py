import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import jwt

from app.core.config import HMAC_ALGORITHMS, Settings
from app.core.errors import InternalError, InvalidTokenError

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["sub", "email", "iat", "nbf", "exp", "jti"]

@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    email: str
    issued_at: datetime
    not_before: datetime
    expires_at: datetime
    token_id: str

class TokenService:
    """
    Issues and validates HMAC-signed JWTs.

    Tokens are stateless: nothing is stored when they are issued. The only
    server-side state is an optional denylist of revoked token ids, kept
    until each token would have expired anyway.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60 * 24):
        if algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f"Unsupported signing algorithm: {algorithm}")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.lifetime = timedelta(minutes=expire_minutes)
        self._revoked: Dict[str, datetime] = {}
        self._revoked_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret_key=settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
            expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        )

    def issue(self, user_id: str, email: str, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "email": email,
            "iat": issued_at,
            "nbf": issued_at,
            "exp": issued_at + self.lifetime,
            "jti": uuid.uuid4().hex,
        }
        try:
            return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        except jwt.PyJWTError as e:
            logger.error(f"Token signing failed: {e}")
            raise InternalError("Failed to generate token") from e

    def validate(self, token: str) -> TokenClaims:
        try:
            # Only the HMAC family is accepted, which rules out "none" and key-confusion attacks
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=list(HMAC_ALGORITHMS),
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError:
            raise InvalidTokenError("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.debug(f"Rejected token: {e}")
            raise InvalidTokenError("Invalid or expired token")

        claims = TokenClaims(
            user_id=str(payload["sub"]),
            email=str(payload["email"]),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            not_before=datetime.fromtimestamp(payload["nbf"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            token_id=str(payload["jti"]),
        )
        if self.is_revoked(claims.token_id):
            raise InvalidTokenError("Token has been revoked")
        return claims

    def revoke(self, claims: TokenClaims) -> None:
        now = datetime.now(timezone.utc)
        with self._revoked_lock:
            # Expired tokens fail validation on their own, no need to remember them
            self._revoked = {jti: exp for jti, exp in self._revoked.items() if exp > now}
            self._revoked[claims.token_id] = claims.expires_at
        logger.info(f"Revoked token for user {claims.user_id}")

    def is_revoked(self, token_id: str) -> bool:
        with self._revoked_lock:
            return token_id in self._revoked
