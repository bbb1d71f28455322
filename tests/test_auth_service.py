import asyncio
from unittest.mock import AsyncMock

import pytest

from app.core.errors import ConflictError, NotFoundError, UnauthorizedError
from app.models.auth import LoginRequest, RegisterRequest, UserUpdate


@pytest.mark.asyncio
async def test_register_stores_hash_and_returns_sanitized_user(auth_service, store, ana_request):
    result = await auth_service.register(ana_request)

    assert result.message == "User registered successfully"
    assert result.user.email == "ana@test.com"
    assert "password" not in result.model_dump_json()

    record = store.find_by_email("ana@test.com")
    assert record.password_hash != "secret1"
    assert await auth_service.hasher.verify("secret1", record.password_hash)


@pytest.mark.asyncio
@pytest.mark.parametrize("email", ["ana@test.com", "ANA@TEST.COM", "  Ana@Test.com  "])
async def test_register_duplicate_email_conflicts(auth_service, store, ana_payload, email):
    await auth_service.register(RegisterRequest(**ana_payload))

    with pytest.raises(ConflictError) as exc_info:
        await auth_service.register(RegisterRequest(**{**ana_payload, "email": email, "username": "other"}))

    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == "Email already registered"
    assert len(store) == 1


@pytest.mark.asyncio
async def test_register_duplicate_skips_hashing(auth_service, ana_request):
    await auth_service.register(ana_request)
    auth_service.hasher.hash = AsyncMock(side_effect=AssertionError("hash should not run"))

    with pytest.raises(ConflictError):
        await auth_service.register(ana_request)

    auth_service.hasher.hash.assert_not_called()


@pytest.mark.asyncio
async def test_login_returns_token_for_registered_user(auth_service, tokens, ana_request):
    registered = await auth_service.register(ana_request)

    result = await auth_service.login(LoginRequest(email="ANA@TEST.COM", password="secret1"))

    assert result.token_type == "bearer"
    assert result.user == registered.user
    claims = tokens.validate(result.access_token)
    assert claims.user_id == registered.user.id
    assert claims.display_name == "Ana"
    assert claims.username == "anad"


@pytest.mark.asyncio
async def test_wrong_password_and_unknown_email_fail_identically(auth_service, ana_request):
    await auth_service.register(ana_request)

    with pytest.raises(UnauthorizedError) as wrong_password:
        await auth_service.login(LoginRequest(email="ana@test.com", password="wrong-pass"))
    with pytest.raises(UnauthorizedError) as unknown_email:
        await auth_service.login(LoginRequest(email="ghost@test.com", password="secret1"))

    assert wrong_password.value.detail == unknown_email.value.detail == "Invalid credentials"
    assert wrong_password.value.status_code == unknown_email.value.status_code == 401


@pytest.mark.asyncio
async def test_deactivated_user_cannot_login(auth_service, ana_request):
    registered = await auth_service.register(ana_request)
    auth_service.deactivate(registered.user.id)

    with pytest.raises(UnauthorizedError) as exc_info:
        await auth_service.login(LoginRequest(email="ana@test.com", password="secret1"))

    assert exc_info.value.detail == "Inactive user"


@pytest.mark.asyncio
async def test_deactivated_user_with_wrong_password_gets_generic_message(auth_service, ana_request):
    registered = await auth_service.register(ana_request)
    auth_service.deactivate(registered.user.id)

    with pytest.raises(UnauthorizedError) as exc_info:
        await auth_service.login(LoginRequest(email="ana@test.com", password="wrong-pass"))

    assert exc_info.value.detail == "Invalid credentials"


@pytest.mark.asyncio
async def test_get_profile(auth_service, ana_request):
    registered = await auth_service.register(ana_request)

    assert auth_service.get_profile(registered.user.id) == registered.user

    with pytest.raises(NotFoundError):
        auth_service.get_profile(999)


@pytest.mark.asyncio
async def test_update_profile_rehashes_password(auth_service, ana_request):
    registered = await auth_service.register(ana_request)

    updated = await auth_service.update_profile(
        registered.user.id, UserUpdate(firstName="Anabel", password="newsecret")
    )

    assert updated.first_name == "Anabel"
    assert updated.last_name == "Diaz"
    result = await auth_service.login(LoginRequest(email="ana@test.com", password="newsecret"))
    assert result.user.first_name == "Anabel"
    with pytest.raises(UnauthorizedError):
        await auth_service.login(LoginRequest(email="ana@test.com", password="secret1"))


@pytest.mark.asyncio
async def test_update_profile_email_taken_by_other_user_conflicts(auth_service, ana_payload):
    await auth_service.register(RegisterRequest(**ana_payload))
    other = await auth_service.register(RegisterRequest(**{**ana_payload, "email": "bob@test.com"}))

    with pytest.raises(ConflictError):
        await auth_service.update_profile(other.user.id, UserUpdate(email="ANA@test.com"))


@pytest.mark.asyncio
async def test_update_profile_keeping_own_email_is_allowed(auth_service, ana_request):
    registered = await auth_service.register(ana_request)

    updated = await auth_service.update_profile(registered.user.id, UserUpdate(email="Ana@Test.com"))

    assert updated.email == "ana@test.com"


@pytest.mark.asyncio
async def test_deactivate_missing_user(auth_service):
    with pytest.raises(NotFoundError):
        auth_service.deactivate(5)


@pytest.mark.asyncio
async def test_concurrent_registrations_for_same_email_create_one_user(auth_service, store, ana_payload):
    results = await asyncio.gather(
        auth_service.register(RegisterRequest(**ana_payload)),
        auth_service.register(RegisterRequest(**{**ana_payload, "email": "ANA@test.com"})),
        return_exceptions=True,
    )

    conflicts = [result for result in results if isinstance(result, ConflictError)]
    assert len(conflicts) == 1
    assert len(store) == 1


@pytest.mark.asyncio
async def test_email_change_racing_registration_keeps_email_unique(auth_service, store, ana_payload):
    bob = await auth_service.register(RegisterRequest(**{**ana_payload, "email": "bob@test.com"}))

    results = await asyncio.gather(
        auth_service.update_profile(bob.user.id, UserUpdate(email="carl@test.com", password="newsecret")),
        auth_service.register(RegisterRequest(**{**ana_payload, "email": "carl@test.com"})),
        return_exceptions=True,
    )

    assert sum(isinstance(result, ConflictError) for result in results) == 1
    assert [user.email for user in store.find_all()].count("carl@test.com") == 1
