"""
# User Models

Request, response and document models for accounts.

## Document Shape (`users` collection)

```json
{
  "personal_info": {
    "fullname": "Ada Lovelace",
    "email": "ada@example.com",
    "password": "$2b$10$...",          // absent for Google accounts
    "username": "ada",
    "bio": "",
    "profile_img": "https://api.dicebear.com/6.x/fun-emoji/svg?seed=Leo"
  },
  "social_links": {"youtube": "", "instagram": "", "facebook": "", "twitter": "", "github": "", "website": ""},
  "account_info": {"total_posts": 0, "total_reads": 0},
  "google_auth": false,
  "blogs": [],
  "joinedAt": "...",
  "updatedAt": "..."
}
```

`account_info` and `blogs` are denormalized from the `blogs` collection and are only updated
as the second, best-effort step of publishing and reading.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

from blog_platform.utils.identifiers import default_profile_img

BIO_MAX_LENGTH: int = 200

# Fields safe to expose next to a blog or in search results
AUTHOR_PUBLIC_PROJECTION: Dict[str, int] = {
    "personal_info.fullname": 1,
    "personal_info.username": 1,
    "personal_info.profile_img": 1,
}

# Fields removed from the profile page payload
PROFILE_EXCLUDED_PROJECTION: Dict[str, int] = {
    "personal_info.password": 0,
    "google_auth": 0,
    "updatedAt": 0,
    "blogs": 0,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Request Models
class SignUpRequest(BaseModel):
    """Body of `POST /sign-up`. Field rules are enforced by `IdentityService.sign_up`."""

    fullname: str = ""
    email: str = ""
    password: str = ""


class SignInRequest(BaseModel):
    """Body of `POST /sign-in`."""

    email: str = ""
    password: str = ""


class GoogleAuthRequest(BaseModel):
    """Body of `POST /google-auth`; `access_token` is a Firebase ID token."""

    access_token: str = ""


class SearchUsersRequest(BaseModel):
    query: str = ""


class GetProfileRequest(BaseModel):
    username: str = ""


# Response Models
class SessionProfile(BaseModel):
    """
    Payload returned by every successful sign-up or sign-in.

    `access_token` is the signed session credential carrying the user id.
    """

    access_token: str
    profile_img: str
    username: str
    fullname: str


class UserSearchResponse(BaseModel):
    users: List[Dict[str, Any]]


# Database Schema Models (for internal use)
class PersonalInfo(BaseModel):
    fullname: str = Field(..., min_length=1)
    email: str
    password: Optional[str] = None
    username: str
    bio: str = Field(default="", max_length=BIO_MAX_LENGTH)
    profile_img: str = Field(default_factory=default_profile_img)


class SocialLinks(BaseModel):
    youtube: str = ""
    instagram: str = ""
    facebook: str = ""
    twitter: str = ""
    github: str = ""
    website: str = ""


class AccountInfo(BaseModel):
    total_posts: int = Field(default=0, ge=0)
    total_reads: int = Field(default=0, ge=0)


class UserDocument(BaseModel):
    """
    MongoDB document model for the `users` collection.

    Used to build the insert payload so defaults (avatar, counters, timestamps) are applied in one
    place. `password` is dropped from the stored document when it is `None`.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    personal_info: PersonalInfo
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    account_info: AccountInfo = Field(default_factory=AccountInfo)
    google_auth: bool = False
    blogs: List[ObjectId] = Field(default_factory=list)
    joinedAt: datetime = Field(default_factory=_utcnow)
    updatedAt: datetime = Field(default_factory=_utcnow)

    def to_mongo(self) -> Dict[str, Any]:
        doc = self.model_dump()
        if doc["personal_info"].get("password") is None:
            doc["personal_info"].pop("password", None)
        return doc
