"""Unit tests for RequestAuthenticator: the per-request token gate."""

from datetime import timedelta

import pytest

from application.services.request_authenticator import RequestAuthenticator
from domain.exceptions import (
    TokenExpiredError,
    TokenInvalidError,
    UpstreamLookupError,
    UserNoLongerExistsError,
)
from domain.value_objects.auth import AuthenticatedIdentity, TokenStatus


@pytest.fixture
def authenticator(mock_user_repository, codec) -> RequestAuthenticator:
    return RequestAuthenticator(
        repository=mock_user_repository,
        codec=codec,
        api_prefix="/api",
        login_path="/api/login",
    )


class TestRouteClassification:

    def test_login_path_is_the_only_public_path(self, authenticator):
        assert authenticator.public_paths == frozenset({"/api/login"})
        assert authenticator.is_public("/api/login")
        assert not authenticator.is_protected("/api/login")

    @pytest.mark.parametrize(
        "path",
        ["/api/me", "/api", "/api/login/extra", "/api/loginx", "/api/users/login", "/api/LOGIN"],
    )
    def test_paths_under_prefix_are_protected(self, authenticator, path):
        assert authenticator.is_protected(path)

    @pytest.mark.parametrize("path", ["/health", "/apix", "/", "/docs"])
    def test_paths_outside_prefix_are_not_gated(self, authenticator, path):
        assert not authenticator.is_protected(path)

    def test_login_path_must_be_under_prefix(self, mock_user_repository, codec):
        with pytest.raises(ValueError):
            RequestAuthenticator(mock_user_repository, codec, api_prefix="/api", login_path="/login")


class TestExtractToken:

    def test_extracts_bearer_token(self, authenticator):
        assert authenticator.extract_token("Bearer abc.def.ghi") == "abc.def.ghi"

    def test_scheme_is_case_insensitive(self, authenticator):
        assert authenticator.extract_token("bearer abc") == "abc"

    def test_surrounding_whitespace_is_ignored(self, authenticator):
        assert authenticator.extract_token("  Bearer   abc.def.ghi  ") == "abc.def.ghi"

    @pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer   ", "Basic abc", "abc.def.ghi"])
    def test_rejects_missing_or_foreign_header(self, authenticator, header):
        with pytest.raises(TokenInvalidError) as exc_info:
            authenticator.extract_token(header)
        assert exc_info.value.status is None


class TestAuthenticate:

    @pytest.mark.asyncio
    async def test_valid_token_resolves_identity(self, authenticator, mock_user_repository, codec, alice):
        mock_user_repository.find_by_id.return_value = alice
        token = codec.issue(alice.id, timedelta(days=7)).token

        identity = await authenticator.authenticate(f"Bearer {token}")

        assert identity == AuthenticatedIdentity(id=alice.id, username="alice")
        mock_user_repository.find_by_id.assert_awaited_once_with(alice.id)

    @pytest.mark.asyncio
    async def test_user_is_resolved_on_every_call(self, authenticator, mock_user_repository, codec, alice):
        mock_user_repository.find_by_id.return_value = alice
        header = f"Bearer {codec.issue(alice.id, timedelta(days=7)).token}"

        await authenticator.authenticate(header)
        await authenticator.authenticate(header)

        assert mock_user_repository.find_by_id.await_count == 2

    @pytest.mark.asyncio
    async def test_missing_header_is_rejected(self, authenticator, mock_user_repository):
        with pytest.raises(TokenInvalidError):
            await authenticator.authenticate(None)
        mock_user_repository.find_by_id.assert_not_called()

    @pytest.mark.asyncio
    async def test_expired_token_is_rejected(self, authenticator, mock_user_repository, codec, alice):
        token = codec.issue(alice.id, timedelta(seconds=-1)).token

        with pytest.raises(TokenExpiredError):
            await authenticator.authenticate(f"Bearer {token}")
        mock_user_repository.find_by_id.assert_not_called()

    @pytest.mark.asyncio
    async def test_tampered_token_is_rejected_before_lookup(self, authenticator, mock_user_repository, codec, alice):
        token = codec.issue(alice.id, timedelta(days=7)).token
        header, payload, signature = token.split(".")
        flipped = "A" if signature[5] != "A" else "B"
        tampered = f"{header}.{payload}.{signature[:5]}{flipped}{signature[6:]}"

        with pytest.raises(TokenInvalidError) as exc_info:
            await authenticator.authenticate(f"Bearer {tampered}")

        assert exc_info.value.status is TokenStatus.SIGNATURE_MISMATCH
        mock_user_repository.find_by_id.assert_not_called()

    @pytest.mark.asyncio
    async def test_removed_user_invalidates_token(self, authenticator, mock_user_repository, codec, alice):
        mock_user_repository.find_by_id.return_value = None
        token = codec.issue(alice.id, timedelta(days=7)).token

        with pytest.raises(UserNoLongerExistsError) as exc_info:
            await authenticator.authenticate(f"Bearer {token}")

        assert exc_info.value.user_id == alice.id
        assert "user removed" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_directory_failure_is_upstream_error(self, authenticator, mock_user_repository, codec, alice):
        mock_user_repository.find_by_id.side_effect = RuntimeError("connection reset")
        token = codec.issue(alice.id, timedelta(days=7)).token

        with pytest.raises(UpstreamLookupError):
            await authenticator.authenticate(f"Bearer {token}")
