# core/security.py
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from jose import JWTError, jwt

from app.core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """Caller identity taken from a verified access token"""

    user_id: int
    role: str = "student"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class JWTManager:
    """
    Verifies access tokens issued by the auth service.

    Tokens are HS256 JWTs carrying ``user_id``, ``role``, ``type`` and
    ``iss`` claims.
    """

    def __init__(self):
        self.secret_key = settings.jwt_secret
        self.algorithm = settings.jwt_algorithm
        self.issuer = settings.jwt_issuer

    def create_access_token(
        self,
        user_id: int,
        role: str = "student",
        expires_in: timedelta = timedelta(hours=1),
    ) -> str:
        """Mint an access token (local development and tests)"""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "user_id": user_id,
            "role": role,
            "type": "access",
            "iss": self.issuer,
            "iat": int(now.timestamp()),
            "exp": int((now + expires_in).timestamp()),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str, token_type: str = "access") -> Dict[str, Any]:
        """
        Verify and decode JWT token
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"verify_exp": True},
            )
        except JWTError as e:
            logger.warning(f"JWT verification failed: {e}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired token",
                headers={"WWW-Authenticate": "Bearer"},
            )

        # Verify token type (check 'type' field, not 'role')
        if payload.get("type") != token_type:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid token type. Expected {token_type}",
            )

        # Verify issuer
        if payload.get("iss") != self.issuer:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token issuer",
            )

        return payload

    def principal_from_token(self, token: str) -> Principal:
        payload = self.verify_token(token, "access")
        user_id: Optional[int] = payload.get("user_id")
        if user_id is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token: Not a valid user token",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return Principal(user_id=int(user_id), role=payload.get("role") or "student")


jwt_manager = JWTManager()
