import logging
from datetime import timedelta

import pytest

from modules.auth.service import SessionResolver, parse_role
from shared.config import Settings
from shared.models import Identity, UserRole

from tests.conftest import TEST_JWT_SECRET, create_test_token


@pytest.fixture
def resolver(session_repository, test_settings):
    return SessionResolver(session_repository, test_settings)


class TestParseRole:
    def test_known_roles(self):
        assert parse_role("admin") == UserRole.ADMIN
        assert parse_role("editor") == UserRole.EDITOR
        assert parse_role("user") == UserRole.USER

    def test_missing_role_defaults_to_user(self):
        assert parse_role(None) == UserRole.USER

    def test_unknown_role_is_demoted(self, caplog):
        with caplog.at_level(logging.WARNING, logger="modules.auth.service"):
            assert parse_role("superadmin") == UserRole.USER
        assert "superadmin" in caplog.text


class TestExtractToken:
    def test_cookie(self, resolver):
        headers = {"cookie": "theme=dark; session_token=abc123"}
        assert resolver.extract_token(headers) == "abc123"

    def test_bearer(self, resolver):
        assert resolver.extract_token({"Authorization": "Bearer xyz"}) == "xyz"

    def test_cookie_wins_over_bearer(self, resolver):
        headers = {"Cookie": "session_token=from-cookie", "Authorization": "Bearer from-header"}
        assert resolver.extract_token(headers) == "from-cookie"

    def test_non_bearer_scheme_ignored(self, resolver):
        assert resolver.extract_token({"authorization": "Basic dXNlcjpwYXNz"}) is None

    def test_no_token(self, resolver):
        assert resolver.extract_token({"cookie": "theme=dark"}) is None
        assert resolver.extract_token({}) is None


class TestResolveOpaqueSession:
    @pytest.mark.asyncio
    async def test_no_headers_is_anonymous(self, resolver, session_repository):
        identity = await resolver.resolve({})
        assert identity == Identity.anonymous()
        assert session_repository.session_lookups == 0

    @pytest.mark.asyncio
    async def test_valid_session(self, resolver, session_repository):
        session_repository.add_user("user-1", role="editor")
        session_repository.add_session("tok", "user-1")

        identity = await resolver.resolve({"cookie": "session_token=tok"})

        assert identity.authenticated is True
        assert identity.id == "user-1"
        assert identity.role == UserRole.EDITOR

    @pytest.mark.asyncio
    async def test_bearer_session(self, resolver, session_repository):
        session_repository.add_user("user-1", role="admin")
        session_repository.add_session("tok", "user-1")

        identity = await resolver.resolve({"authorization": "Bearer tok"})

        assert identity.role == UserRole.ADMIN

    @pytest.mark.asyncio
    async def test_unknown_token(self, resolver):
        identity = await resolver.resolve({"cookie": "session_token=nope"})
        assert identity == Identity.anonymous()

    @pytest.mark.asyncio
    async def test_expired_session(self, resolver, session_repository):
        session_repository.add_user("user-1", role="admin")
        session_repository.add_session("tok", "user-1", expires_in=timedelta(seconds=-5))

        identity = await resolver.resolve({"cookie": "session_token=tok"})

        assert identity.authenticated is False
        assert identity.role is None

    @pytest.mark.asyncio
    async def test_session_for_deleted_user(self, resolver, session_repository):
        session_repository.add_session("tok", "ghost")
        identity = await resolver.resolve({"cookie": "session_token=tok"})
        assert identity == Identity.anonymous()

    @pytest.mark.asyncio
    async def test_storage_failure_is_silent(self, resolver, session_repository, caplog):
        session_repository.fail_with = ConnectionError("database unreachable")

        with caplog.at_level(logging.WARNING, logger="modules.auth.service"):
            identity = await resolver.resolve({"cookie": "session_token=tok"})

        assert identity == Identity.anonymous()
        assert "Session lookup failed" in caplog.text

    @pytest.mark.asyncio
    async def test_unknown_stored_role_is_user(self, resolver, session_repository):
        session_repository.add_user("user-1", role="owner")
        session_repository.add_session("tok", "user-1")

        identity = await resolver.resolve({"cookie": "session_token=tok"})

        assert identity.role == UserRole.USER

    @pytest.mark.asyncio
    async def test_resolves_fresh_each_call(self, resolver, session_repository):
        session_repository.add_user("user-1", role="admin")
        session_repository.add_session("tok", "user-1")
        headers = {"cookie": "session_token=tok"}

        assert (await resolver.resolve(headers)).authenticated
        del session_repository.sessions["tok"]
        assert not (await resolver.resolve(headers)).authenticated
        assert session_repository.session_lookups == 2


class TestResolveJWT:
    @pytest.mark.asyncio
    async def test_valid_jwt_uses_stored_role(self, resolver, session_repository):
        session_repository.add_user("user-1", role="editor")
        token = create_test_token(user_id="user-1")

        identity = await resolver.resolve({"authorization": f"Bearer {token}"})

        assert identity.id == "user-1"
        assert identity.role == UserRole.EDITOR
        assert session_repository.session_lookups == 0

    @pytest.mark.asyncio
    async def test_expired_jwt(self, resolver, session_repository):
        session_repository.add_user("user-1", role="admin")
        token = create_test_token(user_id="user-1", expired=True)

        identity = await resolver.resolve({"authorization": f"Bearer {token}"})

        assert identity == Identity.anonymous()

    @pytest.mark.asyncio
    async def test_wrong_secret(self, resolver, session_repository):
        session_repository.add_user("user-1", role="admin")
        token = create_test_token(user_id="user-1", secret="wrong-secret")

        identity = await resolver.resolve({"authorization": f"Bearer {token}"})

        assert identity == Identity.anonymous()

    @pytest.mark.asyncio
    async def test_wrong_audience(self, resolver, session_repository):
        session_repository.add_user("user-1", role="admin")
        token = create_test_token(user_id="user-1", audience="anon")

        identity = await resolver.resolve({"authorization": f"Bearer {token}"})

        assert identity == Identity.anonymous()

    @pytest.mark.asyncio
    async def test_jwt_treated_as_opaque_without_secret(self, session_repository):
        resolver = SessionResolver(session_repository, Settings(supabase_jwt_secret=""))
        token = create_test_token(user_id="user-1")

        identity = await resolver.resolve({"authorization": f"Bearer {token}"})

        assert identity == Identity.anonymous()
        assert session_repository.session_lookups == 1

    def test_secret_matches_fixture(self, test_settings):
        assert test_settings.supabase_jwt_secret == TEST_JWT_SECRET
