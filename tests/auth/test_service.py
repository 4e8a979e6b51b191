import pytest
from unittest.mock import AsyncMock, patch

from haggle.auth.dependencies import extract_access_token
from haggle.auth.exceptions import InvalidCredentialsException, TokenInvalidException
from haggle.auth.service import AuthService
from haggle.users.models import User
from haggle.users.security import get_password_hash


@pytest.fixture
def user() -> User:
    return User(
        id=1,
        name="alice",
        email="alice@example.com",
        password_hash=get_password_hash("password1"),
        access_token="a" * 256,
    )


@pytest.fixture
def mock_user_repo():
    return AsyncMock()


@pytest.fixture
def auth_service(mock_user_repo):
    return AuthService(user_repo=mock_user_repo)


@pytest.mark.asyncio
async def test_authenticate_by_token(auth_service, mock_user_repo, user):
    mock_user_repo.get_by_access_token.return_value = user
    assert await auth_service.authenticate_by_token(user.access_token) is user


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [None, ""])
async def test_authenticate_by_token_missing(auth_service, mock_user_repo, token):
    with pytest.raises(TokenInvalidException):
        await auth_service.authenticate_by_token(token)
    mock_user_repo.get_by_access_token.assert_not_awaited()


@pytest.mark.asyncio
async def test_authenticate_by_token_unknown(auth_service, mock_user_repo):
    mock_user_repo.get_by_access_token.return_value = None
    with pytest.raises(TokenInvalidException):
        await auth_service.authenticate_by_token("inconnu")


@pytest.mark.asyncio
async def test_authenticate_by_password(auth_service, mock_user_repo, user):
    mock_user_repo.get_by_email.return_value = user
    authenticated = await auth_service.authenticate_by_password(user.email, "password1")
    assert authenticated.access_token == user.access_token


@pytest.mark.asyncio
async def test_authenticate_by_password_wrong_password(auth_service, mock_user_repo, user):
    mock_user_repo.get_by_email.return_value = user
    with pytest.raises(InvalidCredentialsException):
        await auth_service.authenticate_by_password(user.email, "password2")


@pytest.mark.asyncio
async def test_authenticate_by_password_unknown_email_runs_dummy_check(auth_service, mock_user_repo):
    mock_user_repo.get_by_email.return_value = None
    with patch("haggle.auth.service.verify_password_against_nothing", return_value=False) as dummy_check:
        with pytest.raises(InvalidCredentialsException):
            await auth_service.authenticate_by_password("ghost@example.com", "password1")
    dummy_check.assert_called_once_with("password1")


@pytest.mark.asyncio
async def test_authenticate_by_password_normalizes_email_domain(auth_service, mock_user_repo, user):
    mock_user_repo.get_by_email.return_value = user
    await auth_service.authenticate_by_password("alice@Example.COM", "password1")
    mock_user_repo.get_by_email.assert_awaited_once_with("alice@example.com")


@pytest.mark.asyncio
async def test_authenticate_by_password_malformed_email_is_looked_up_as_is(auth_service, mock_user_repo):
    mock_user_repo.get_by_email.return_value = None
    with pytest.raises(InvalidCredentialsException):
        await auth_service.authenticate_by_password("pas-un-email", "password1")
    mock_user_repo.get_by_email.assert_awaited_once_with("pas-un-email")


@pytest.mark.asyncio
async def test_release_ends_read_transaction(auth_service, mock_user_repo):
    await auth_service.release()
    mock_user_repo.end_transaction.assert_awaited_once()


@pytest.mark.parametrize(
    "header, expected",
    [
        (None, None),
        ("", None),
        ("abc", "abc"),
        ("Bearer abc", "abc"),
        ("  abc  ", "abc"),
    ],
)
def test_extract_access_token(header, expected):
    assert extract_access_token(header) == expected
