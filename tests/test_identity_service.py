"""
Tests for sign-up, sign-in and Google sign-in.
"""
import asyncio
from unittest.mock import AsyncMock

import pytest
from bson import ObjectId

from blog_platform.services.identity_service import IdentityService
from blog_platform.utils.errors import AuthError, ConflictError, NotFoundError, ValidationError
from blog_platform.utils.identifiers import UNAMBIGUOUS_ALPHABET
from tests.factories import make_user


@pytest.fixture
def identity_service(identity_store, credentials):
    return IdentityService(identity_store, credentials)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "fullname, email, password, field, message",
    [
        ("Al", "not-an-email", "weak", "fullname", "Full Name must be at least 3 letters long"),
        ("Ada Lovelace", "", "weak", "email", "Enter valid email"),
        ("Ada Lovelace", "ada@", "weak", "email", "Email is invalid"),
        ("Ada Lovelace", "ada@example.com", "Ab1cd", "password", None),
        ("Ada Lovelace", "ada@example.com", "nouppercase1", "password", None),
        ("Ada Lovelace", "ada@example.com", "NoDigitsHere", "password", None),
        ("Ada Lovelace", "ada@example.com", "Waytoolongpassword12345", "password", None),
    ],
)
async def test_sign_up_validation_reports_first_failing_field(
    identity_service, users_collection, fullname, email, password, field, message
):
    with pytest.raises(ValidationError) as exc_info:
        await identity_service.sign_up(fullname, email, password)

    assert exc_info.value.field == field
    assert exc_info.value.status_code == 400
    if message:
        assert exc_info.value.message == message
    assert users_collection.documents == []


@pytest.mark.asyncio
async def test_sign_up_creates_local_account(identity_service, users_collection, credentials):
    profile = await identity_service.sign_up("Ada Lovelace", "ada@example.com", "Secret12")

    assert profile.username == "ada"
    assert profile.fullname == "Ada Lovelace"
    assert profile.profile_img.startswith("https://api.dicebear.com/6.x/")

    [stored] = users_collection.documents
    assert stored["google_auth"] is False
    assert stored["personal_info"]["password"] != "Secret12"
    assert await credentials.verify_password("Secret12", stored["personal_info"]["password"])
    assert stored["account_info"] == {"total_posts": 0, "total_reads": 0}
    assert stored["blogs"] == []
    assert credentials.decode_session_token(profile.access_token) == str(stored["_id"])


@pytest.mark.asyncio
async def test_sign_up_with_taken_email_is_conflict(identity_service, users_collection):
    users_collection.documents.append(make_user("ada", email="ada@example.com"))

    with pytest.raises(ConflictError) as exc_info:
        await identity_service.sign_up("Ada Again", "ada@example.com", "Secret12")

    assert exc_info.value.message == "Email already exists"
    assert len(users_collection.documents) == 1


@pytest.mark.asyncio
async def test_concurrent_sign_ups_with_same_email_create_one_user(identity_service, users_collection):
    results = await asyncio.gather(
        identity_service.sign_up("Ada Lovelace", "ada@example.com", "Secret12"),
        identity_service.sign_up("Ada Lovelace", "ada@example.com", "Secret12"),
        return_exceptions=True,
    )

    conflicts = [result for result in results if isinstance(result, ConflictError)]
    assert len(conflicts) == 1
    assert len(users_collection.documents) == 1


@pytest.mark.asyncio
async def test_generate_unique_username_appends_suffix_when_taken(identity_service, users_collection):
    users_collection.documents.append(make_user("ada", email="ada@other.com"))

    username = await identity_service.generate_unique_username("ada@example.com")

    assert username.startswith("ada")
    assert len(username) == len("ada") + 5
    assert all(char in UNAMBIGUOUS_ALPHABET for char in username[3:])


@pytest.mark.asyncio
async def test_generate_unique_username_keeps_free_local_part(identity_service):
    assert await identity_service.generate_unique_username("grace@example.com") == "grace"


@pytest.mark.asyncio
async def test_sign_in_success(identity_service, credentials):
    await identity_service.sign_up("Ada Lovelace", "ada@example.com", "Secret12")

    profile = await identity_service.sign_in("ada@example.com", "Secret12")

    assert profile.username == "ada"
    assert credentials.decode_session_token(profile.access_token)


@pytest.mark.asyncio
async def test_sign_in_unknown_email(identity_service):
    with pytest.raises(NotFoundError):
        await identity_service.sign_in("nobody@example.com", "Secret12")


@pytest.mark.asyncio
async def test_sign_in_wrong_password(identity_service):
    await identity_service.sign_up("Ada Lovelace", "ada@example.com", "Secret12")

    with pytest.raises(AuthError) as exc_info:
        await identity_service.sign_in("ada@example.com", "Secret13")

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_sign_in_with_password_on_google_account_is_conflict(identity_service, users_collection):
    users_collection.documents.append(make_user("ada", email="ada@gmail.com", google_auth=True))

    with pytest.raises(ConflictError):
        await identity_service.sign_in("ada@gmail.com", "Secret12")


@pytest.mark.asyncio
async def test_federated_sign_in_creates_google_account(identity_service, credentials, users_collection):
    credentials.verify_federated_token = AsyncMock(
        return_value={"email": "grace@gmail.com", "name": "Grace Hopper", "picture": "https://lh3/a/photo=s96-c"}
    )

    profile = await identity_service.federated_sign_in("id-token")

    assert profile.fullname == "Grace Hopper"
    assert profile.username == "grace"
    assert profile.profile_img == "https://lh3/a/photo=s384-c"

    [stored] = users_collection.documents
    assert stored["google_auth"] is True
    assert "password" not in stored["personal_info"]


@pytest.mark.asyncio
async def test_federated_sign_in_returns_existing_google_account(identity_service, credentials, users_collection):
    existing = make_user("grace", email="grace@gmail.com", google_auth=True)
    users_collection.documents.append(existing)
    credentials.verify_federated_token = AsyncMock(return_value={"email": "grace@gmail.com", "name": "Grace"})

    profile = await identity_service.federated_sign_in("id-token")

    assert profile.username == "grace"
    assert len(users_collection.documents) == 1
    assert credentials.decode_session_token(profile.access_token) == str(existing["_id"])


@pytest.mark.asyncio
async def test_federated_sign_in_on_local_account_is_conflict(identity_service, credentials, users_collection):
    existing = make_user("ada", email="ada@gmail.com")
    users_collection.documents.append(existing)
    credentials.verify_federated_token = AsyncMock(return_value={"email": "ada@gmail.com", "name": "Ada"})

    with pytest.raises(ConflictError):
        await identity_service.federated_sign_in("id-token")

    [stored] = users_collection.documents
    assert stored["google_auth"] is False
    assert stored["personal_info"]["password"] == existing["personal_info"]["password"]


@pytest.mark.asyncio
async def test_federated_sign_in_with_bad_token(identity_service, credentials, users_collection):
    credentials.verify_federated_token = AsyncMock(side_effect=AuthError("Failed to authenticate with Google"))

    with pytest.raises(AuthError):
        await identity_service.federated_sign_in("bad-token")

    assert users_collection.documents == []


@pytest.mark.asyncio
async def test_identity_store_lookup_by_id(identity_store, users_collection):
    user = make_user("ada")
    users_collection.documents.append(user)

    found = await identity_store.find_by_id(user["_id"])

    assert found["personal_info"]["username"] == "ada"
    assert await identity_store.find_by_id(ObjectId()) is None
