"""Tests for the operator scripts (create_user, view_users) and the server entrypoint."""

import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from sos_api import __main__ as server_main
from sos_api.core.config import get_settings
from sos_api.core.security import verify_password
from sos_api.models import LoginAttempt, User
from sos_api.scripts import create_user, view_users
from tests.support import make_database


class TestCreateUser(unittest.TestCase):
    def setUp(self) -> None:
        self.database = make_database()

    def tearDown(self) -> None:
        self.database.dispose()

    def _run(self, *argv: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = create_user.main(list(argv), database=self.database)
        return code, out.getvalue(), err.getvalue()

    def test_creates_admin(self) -> None:
        code, out, _ = self._run("coordinator", "secret-pass", "Admin")
        self.assertEqual(code, 0)
        self.assertIn("Created user 'coordinator' with role 'Admin'.", out)
        with self.database.session() as db:
            user = db.query(User).filter(User.username == "coordinator").one()
            self.assertEqual(user.role, "Admin")
            self.assertTrue(verify_password("secret-pass", user.password_hash))

    def test_default_role_is_user(self) -> None:
        self.assertEqual(self._run("helper", "secret-pass")[0], 0)
        with self.database.session() as db:
            self.assertEqual(db.query(User).one().role, "User")

    def test_rejects_short_values(self) -> None:
        code, _, err = self._run("ab", "secret-pass")
        self.assertEqual(code, 1)
        self.assertIn("Invalid username length.", err)
        code, _, err = self._run("abc", "12345")
        self.assertEqual(code, 1)
        self.assertIn("at least 6", err)

    def test_duplicate(self) -> None:
        self._run("helper", "secret-pass")
        code, _, err = self._run("helper", "other-pass")
        self.assertEqual(code, 1)
        self.assertIn("already exists", err)


class TestViewUsers(unittest.TestCase):
    def test_prints_users_and_attempts(self) -> None:
        database = make_database()
        with database.session() as db:
            db.add(User(username="alice", password_hash="x", role="User"))
            db.add(LoginAttempt(username="alice", role="User", success=True))
            db.add(LoginAttempt(username="mallory", role="Admin", success=False, blocked=True))
            db.commit()
        out = io.StringIO()
        code = view_users.main(["--attempts", "5"], database=database, out=out)
        text = out.getvalue()
        self.assertEqual(code, 0)
        self.assertIn("=== USERS ===", text)
        self.assertIn("alice", text)
        self.assertIn("=== LOGIN ATTEMPTS (Last 2) ===", text)
        self.assertLess(text.index("mallory"), text.rindex("alice"))
        database.dispose()


class TestServerEntrypoint(unittest.TestCase):
    def test_runs_uvicorn_on_configured_port(self) -> None:
        with patch("sos_api.__main__.uvicorn.run") as run:
            server_main.main()
        run.assert_called_once()
        args, kwargs = run.call_args
        self.assertEqual(args[0], "sos_api.main:app")
        self.assertEqual(kwargs["port"], get_settings().PORT)
        self.assertEqual(kwargs["host"], get_settings().HOST)


if __name__ == "__main__":
    unittest.main()
