"""
# Credential Manager

Wraps the three credential collaborators behind one class:

- **Passwords**: `bcrypt` with cost factor 10. Hashing and verification run in a worker thread
  (`asyncio.to_thread`) so a sign-up burst does not stall the event loop.
- **Session tokens**: HS256 JWTs signed with `SECRET_KEY` via `python-jose`. The payload is
  `{"id": "<user _id>"}` plus `exp` unless `ACCESS_TOKEN_EXPIRE_MINUTES` is 0.
- **Google sign-in**: Firebase ID tokens verified with `firebase-admin`. The Firebase app is
  initialized lazily on first use from `FIREBASE_CREDENTIALS_PATH`.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials as firebase_credentials
from jose import JWTError, jwt

from blog_platform.config import settings
from blog_platform.managers.logging_manager import get_logger
from blog_platform.utils.errors import AuthError, DependencyError

logger = get_logger(prefix="[CredentialManager]")

BCRYPT_ROUNDS: int = 10
INVALID_TOKEN_MESSAGE: str = "Access token is invalid"
FEDERATED_FAILURE_MESSAGE: str = "Failed to authenticate with Google. Try with another Google account"


class CredentialManager:
    """Password hashing, session tokens and federated token verification."""

    def __init__(self, secret_key: Optional[str] = None, algorithm: Optional[str] = None,
                 expire_minutes: Optional[int] = None):
        self._secret_key = secret_key or settings.SECRET_KEY.get_secret_value()
        self._algorithm = algorithm or settings.ALGORITHM
        self._expire_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES if expire_minutes is None else expire_minutes
        self._firebase_app: Optional[firebase_admin.App] = None

    # --- Passwords ---
    async def hash_password(self, password: str) -> str:
        def _hash() -> bytes:
            return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))

        try:
            hashed = await asyncio.to_thread(_hash)
        except ValueError as e:
            raise DependencyError("Failed to hash password") from e
        return hashed.decode("utf-8")

    async def verify_password(self, password: str, hashed: str) -> bool:
        """Return whether `password` matches `hashed`. A malformed hash counts as a mismatch."""

        def _check() -> bool:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))

        try:
            return await asyncio.to_thread(_check)
        except ValueError:
            logger.warning("Stored password hash could not be parsed")
            return False

    # --- Session tokens ---
    def create_session_token(self, user_id: Any) -> str:
        payload: Dict[str, Any] = {"id": str(user_id)}
        if self._expire_minutes > 0:
            payload["exp"] = datetime.now(timezone.utc) + timedelta(minutes=self._expire_minutes)
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def decode_session_token(self, token: str) -> str:
        """
        Verify a session token and return the user id it carries.

        Raises:
            AuthError: 403 when the signature, expiry or payload is invalid.
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError as e:
            logger.info("Rejected session token: %s", e)
            raise AuthError(INVALID_TOKEN_MESSAGE, status_code=403) from e

        user_id = payload.get("id")
        if not user_id:
            raise AuthError(INVALID_TOKEN_MESSAGE, status_code=403)
        return str(user_id)

    # --- Google sign-in ---
    def _get_firebase_app(self) -> firebase_admin.App:
        if self._firebase_app is None:
            try:
                self._firebase_app = firebase_admin.get_app()
            except ValueError:
                if settings.FIREBASE_CREDENTIALS_PATH:
                    cred = firebase_credentials.Certificate(settings.FIREBASE_CREDENTIALS_PATH)
                    self._firebase_app = firebase_admin.initialize_app(cred)
                else:
                    self._firebase_app = firebase_admin.initialize_app()
                logger.info("Initialized Firebase app for Google sign-in")
        return self._firebase_app

    async def verify_federated_token(self, identity_token: str) -> Dict[str, Any]:
        """
        Verify a Firebase ID token and return its claims (`email`, `name`, `picture`, ...).

        Raises:
            AuthError: If the token cannot be verified for any reason.
        """
        if not identity_token:
            raise AuthError(FEDERATED_FAILURE_MESSAGE)
        try:
            app = self._get_firebase_app()
            claims = await asyncio.to_thread(firebase_auth.verify_id_token, identity_token, app)
        except Exception as e:
            logger.warning("Google token verification failed: %s", e)
            raise AuthError(FEDERATED_FAILURE_MESSAGE) from e

        if not claims.get("email"):
            raise AuthError(FEDERATED_FAILURE_MESSAGE)
        return claims
