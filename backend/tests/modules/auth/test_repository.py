"""Tests for the session repository."""

from unittest.mock import MagicMock

from modules.auth.repository import SessionRepository


def make_db(rows: list) -> MagicMock:
    """Supabase mock whose select chain returns rows."""
    db = MagicMock()
    chain = db.table.return_value.select.return_value.eq.return_value.limit.return_value
    chain.execute.return_value.data = rows
    return db


class TestSessionRepository:
    def test_get_session(self):
        db = make_db([{"token": "tok", "user_id": "user-1", "expires_at": "2030-01-01T00:00:00Z"}])
        repo = SessionRepository(db)

        session = repo.get_session("tok")

        assert session.token == "tok"
        assert session.user_id == "user-1"
        db.table.assert_called_once_with("session")
        db.table.return_value.select.return_value.eq.assert_called_once_with("token", "tok")

    def test_get_session_missing(self):
        repo = SessionRepository(make_db([]))
        assert repo.get_session("tok") is None

    def test_get_user(self):
        db = make_db([{"id": "user-1", "name": "Ana", "email": "ana@example.com", "image": None, "role": "admin"}])
        repo = SessionRepository(db)

        user = repo.get_user("user-1")

        assert user.id == "user-1"
        assert user.role == "admin"
        db.table.assert_called_once_with("user")

    def test_get_user_missing(self):
        repo = SessionRepository(make_db([]))
        assert repo.get_user("user-1") is None
