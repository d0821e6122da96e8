"""
# Identity Service

Local and Google accounts over the `users` collection.

## Flows

| Operation           | Failure modes                                                       |
|---------------------|---------------------------------------------------------------------|
| `sign_up`           | `ValidationError` (fullname, email, password), `ConflictError` on duplicate email |
| `sign_in`           | `NotFoundError`, `ConflictError` for Google accounts, `AuthError`   |
| `federated_sign_in` | `AuthError` on a bad token, `ConflictError` for local accounts      |

Every success returns a `SessionProfile` carrying a fresh session token. Attempts and their
outcome are counted in `blog_auth_attempts_total`.
"""

import re
from typing import Any, Dict, Optional

from blog_platform.database.identity_store import IdentityStore
from blog_platform.managers.credential_manager import CredentialManager
from blog_platform.managers.logging_manager import get_logger
from blog_platform.models.user_models import PersonalInfo, SessionProfile, UserDocument
from blog_platform.services.metrics import blog_metrics
from blog_platform.utils.errors import AuthError, ConflictError, NotFoundError, ValidationError
from blog_platform.utils.identifiers import USERNAME_SUFFIX_LENGTH, email_local_part, random_suffix

logger = get_logger(prefix="[IdentityService]")

EMAIL_REGEX = re.compile(r"^\w+([\.-]?\w+)*@\w+([\.-]?\w+)*(\.\w{2,3})+$")
PASSWORD_REGEX = re.compile(r"^(?=.*\d)(?=.*[a-z])(?=.*[A-Z]).{6,20}$")

FULLNAME_MIN_LENGTH = 3

# Google serves 96px avatars by default; ask for the 384px variant instead
GOOGLE_SMALL_AVATAR = "s96-c"
GOOGLE_LARGE_AVATAR = "s384-c"


def format_session_profile(user: Dict[str, Any], access_token: str) -> SessionProfile:
    personal_info = user.get("personal_info", {})
    return SessionProfile(
        access_token=access_token,
        profile_img=personal_info.get("profile_img", ""),
        username=personal_info.get("username", ""),
        fullname=personal_info.get("fullname", ""),
    )


class IdentityService:
    """
    Account creation and sign-in, local (email + password) and federated (Google).

    An email is bound to exactly one auth method for life: signing in through the other method
    is a `ConflictError` and changes nothing.
    """

    def __init__(self, identity_store: IdentityStore, credentials: CredentialManager):
        self.identity_store = identity_store
        self.credentials = credentials

    async def generate_unique_username(self, email: str) -> str:
        """
        Derive a username from the email's local part, adding a short random suffix if taken.

        There is no retry loop: the unique index on `personal_info.username` rejects the rare
        collision between concurrent sign-ups.
        """
        username = email_local_part(email)
        if await self.identity_store.username_exists(username):
            username += random_suffix(USERNAME_SUFFIX_LENGTH)
        return username

    def _session_for(self, user: Dict[str, Any]) -> SessionProfile:
        return format_session_profile(user, self.credentials.create_session_token(user["_id"]))

    async def sign_up(self, fullname: str, email: str, password: str) -> SessionProfile:
        """
        Create a local account and return its session profile.

        Validation runs in a fixed order (fullname, email, password) and stops at the first
        failure. Email uniqueness is not pre-checked; the unique index turns a duplicate into
        `ConflictError("Email already exists")`.
        """
        fullname = fullname or ""
        email = email or ""
        password = password or ""

        if len(fullname) < FULLNAME_MIN_LENGTH:
            raise ValidationError("fullname", "Full Name must be at least 3 letters long")
        if not email:
            raise ValidationError("email", "Enter valid email")
        if not EMAIL_REGEX.match(email):
            raise ValidationError("email", "Email is invalid")
        if not PASSWORD_REGEX.match(password):
            raise ValidationError(
                "password",
                "Password should be 6 to 20 characters long with a numeric, 1 lowercase and 1 uppercase letters",
            )

        hashed_password = await self.credentials.hash_password(password)
        username = await self.generate_unique_username(email)

        document = UserDocument(
            personal_info=PersonalInfo(fullname=fullname, email=email, password=hashed_password, username=username),
            google_auth=False,
        ).to_mongo()

        try:
            user = await self.identity_store.insert(document)
        except ConflictError:
            blog_metrics.record_auth_attempt("sign_up", "conflict")
            raise

        blog_metrics.record_auth_attempt("sign_up", "success")
        logger.info(f"Created local account {username}")
        return self._session_for(user)

    async def sign_in(self, email: str, password: str) -> SessionProfile:
        user = await self.identity_store.find_by_email(email or "")
        if user is None:
            blog_metrics.record_auth_attempt("password", "not_found")
            raise NotFoundError("Email not found")

        if user.get("google_auth"):
            blog_metrics.record_auth_attempt("password", "conflict")
            raise ConflictError("Account was created using Google, try logging in with Google")

        hashed = user.get("personal_info", {}).get("password") or ""
        if not await self.credentials.verify_password(password or "", hashed):
            blog_metrics.record_auth_attempt("password", "rejected")
            raise AuthError("Incorrect password")

        blog_metrics.record_auth_attempt("password", "success")
        return self._session_for(user)

    async def federated_sign_in(self, identity_token: str) -> SessionProfile:
        """
        Sign in (or sign up on first sight) with a Google identity token.

        New accounts are created with `google_auth=True`, no password, the token's display name
        and the 384px variant of the Google avatar.
        """
        try:
            claims = await self.credentials.verify_federated_token(identity_token)
        except AuthError:
            blog_metrics.record_auth_attempt("google", "rejected")
            raise

        email: str = claims["email"]
        name: Optional[str] = claims.get("name")
        picture: Optional[str] = claims.get("picture")
        if picture:
            picture = picture.replace(GOOGLE_SMALL_AVATAR, GOOGLE_LARGE_AVATAR)

        user = await self.identity_store.find_by_email(email)
        if user is not None:
            if not user.get("google_auth"):
                blog_metrics.record_auth_attempt("google", "conflict")
                raise ConflictError(
                    "This email was signed up without Google. Please login with password to access this account"
                )
            blog_metrics.record_auth_attempt("google", "success")
            return self._session_for(user)

        username = await self.generate_unique_username(email)
        personal_info: Dict[str, Any] = {"fullname": name or username, "email": email, "username": username}
        if picture:
            personal_info["profile_img"] = picture

        document = UserDocument(personal_info=PersonalInfo(**personal_info), google_auth=True).to_mongo()
        user = await self.identity_store.insert(document)

        blog_metrics.record_auth_attempt("google", "created")
        logger.info(f"Created Google account {username}")
        return self._session_for(user)
