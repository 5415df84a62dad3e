"""Unit tests for sos_api.services.auth: signup, login, audit trail, admin seeding."""

import unittest

from sos_api.core.errors import AuthenticationError, ClientInputError, ConflictError
from sos_api.core.security import verify_password
from sos_api.models import LoginAttempt, User
from sos_api.services import auth
from tests.support import make_database, make_settings


class AuthServiceTestCase(unittest.TestCase):
    settings_overrides: dict = {}

    def setUp(self) -> None:
        self.settings = make_settings(**self.settings_overrides)
        self.database = make_database(self.settings)
        self._ctx = self.database.session()
        self.db = self._ctx.__enter__()

    def tearDown(self) -> None:
        self._ctx.__exit__(None, None, None)
        self.database.dispose()

    def _login(self, username, password, role):
        return auth.login(
            self.db, username, password, role, self.settings,
            ip_address="10.0.0.5", user_agent="pytest-agent",
        )

    def _attempts(self) -> list[LoginAttempt]:
        return self.db.query(LoginAttempt).order_by(LoginAttempt.id).all()


class TestSignup(AuthServiceTestCase):
    def test_creates_user_with_hashed_password(self) -> None:
        user = auth.signup(self.db, "abc", "abcdef")
        self.assertEqual(user.username, "abc")
        self.assertEqual(user.role, "User")
        self.assertNotEqual(user.password_hash, "abcdef")
        self.assertTrue(verify_password("abcdef", user.password_hash))
        self.assertIsNotNone(user.created_at)

    def test_missing_fields(self) -> None:
        for username, password in ((None, "abcdef"), ("abc", ""), ("", "")):
            with self.subTest(username=username, password=password):
                with self.assertRaises(ClientInputError) as ctx:
                    auth.signup(self.db, username, password)
                self.assertEqual(ctx.exception.message, "username and password are required")

    def test_short_username_checked_first(self) -> None:
        with self.assertRaises(ClientInputError) as ctx:
            auth.signup(self.db, "ab", "x")
        self.assertEqual(ctx.exception.message, "username must be at least 3 characters")

    def test_short_password(self) -> None:
        with self.assertRaises(ClientInputError) as ctx:
            auth.signup(self.db, "abc", "abcde")
        self.assertEqual(ctx.exception.message, "password must be at least 6 characters")

    def test_admin_role_downgraded(self) -> None:
        self.assertEqual(auth.signup(self.db, "mallory", "abcdef", "Admin").role, "User")

    def test_other_roles_kept(self) -> None:
        self.assertEqual(auth.signup(self.db, "vol", "abcdef", "Volunteer").role, "Volunteer")

    def test_missing_role_defaults_to_user(self) -> None:
        self.assertEqual(auth.signup(self.db, "norole", "abcdef", None).role, "User")

    def test_duplicate_username_conflicts(self) -> None:
        auth.signup(self.db, "abc", "abcdef")
        with self.assertRaises(ConflictError):
            auth.signup(self.db, "abc", "different")
        self.assertEqual(self.db.query(User).count(), 1)


class TestLogin(AuthServiceTestCase):
    def setUp(self) -> None:
        super().setUp()
        auth.signup(self.db, "alice", "wonderland")

    def test_success(self) -> None:
        outcome = self._login("alice", "wonderland", "User")
        self.assertTrue(outcome.success)
        self.assertEqual(outcome.message, "Login successful")
        self.assertEqual(outcome.role, "User")
        attempts = self._attempts()
        self.assertEqual(len(attempts), 1)
        self.assertTrue(attempts[0].success)
        self.assertFalse(attempts[0].blocked)
        self.assertEqual(attempts[0].ip_address, "10.0.0.5")
        self.assertEqual(attempts[0].user_agent, "pytest-agent")

    def test_missing_fields(self) -> None:
        with self.assertRaises(ClientInputError) as ctx:
            self._login("alice", "wonderland", None)
        self.assertEqual(ctx.exception.message, "username, password, and role are required")
        self.assertEqual(self._attempts(), [])

    def test_wrong_password(self) -> None:
        with self.assertRaises(AuthenticationError) as ctx:
            self._login("alice", "wrongpass", "User")
        self.assertEqual(ctx.exception.message, "Invalid password")
        self.assertFalse(self._attempts()[0].success)

    def test_role_mismatch_names_actual_role(self) -> None:
        with self.assertRaises(AuthenticationError) as ctx:
            self._login("alice", "wonderland", "Admin")
        self.assertEqual(ctx.exception.message, "Invalid role. This account is registered as User")
        self.assertEqual(len(self._attempts()), 1)

    def test_unknown_user(self) -> None:
        with self.assertRaises(AuthenticationError) as ctx:
            self._login("bob", "whatever", "User")
        self.assertEqual(ctx.exception.message, "User not found. Please sign up first.")
        self.assertEqual(self._attempts()[0].username, "bob")

    def test_injection_short_circuits_without_audit(self) -> None:
        with self.assertRaises(AuthenticationError) as ctx:
            self._login("admin' OR '1'='1", "anything", "Admin")
        self.assertEqual(ctx.exception.message, "Invalid credentials")
        self.assertEqual(self._attempts(), [])

    def test_injection_in_password_or_role(self) -> None:
        for password, role in (("pass=word", "User"), ("wonderland", "User;")):
            with self.subTest(password=password, role=role):
                with self.assertRaises(AuthenticationError) as ctx:
                    self._login("alice", password, role)
                self.assertEqual(ctx.exception.message, "Invalid credentials")

    def test_missing_client_details_recorded_as_unknown(self) -> None:
        auth.login(self.db, "alice", "wonderland", "User", self.settings)
        attempt = self._attempts()[0]
        self.assertEqual(attempt.ip_address, "unknown")
        self.assertEqual(attempt.user_agent, "unknown")


class TestDefaultAdminFallback(AuthServiceTestCase):
    def test_fallback_succeeds_without_admin_row(self) -> None:
        outcome = self._login("admin", "admin123", "Admin")
        self.assertTrue(outcome.success)
        self.assertEqual(outcome.role, "Admin")
        self.assertEqual(outcome.message, "Login successful (default admin)")
        self.assertTrue(self._attempts()[0].success)

    def test_fallback_wrong_password(self) -> None:
        with self.assertRaises(AuthenticationError) as ctx:
            self._login("admin", "admin1234", "Admin")
        self.assertEqual(ctx.exception.message, "Invalid admin credentials")


class TestDefaultAdminFallbackDisabled(AuthServiceTestCase):
    settings_overrides = {"DEFAULT_ADMIN_FALLBACK": False}

    def test_fallback_disabled(self) -> None:
        with self.assertRaises(AuthenticationError):
            self._login("admin", "admin123", "Admin")


class TestAuditBlockedLogins(AuthServiceTestCase):
    settings_overrides = {"AUDIT_BLOCKED_LOGINS": True}

    def test_blocked_attempt_recorded(self) -> None:
        with self.assertRaises(AuthenticationError):
            self._login("admin' OR '1'='1", "anything", "Admin")
        attempts = self._attempts()
        self.assertEqual(len(attempts), 1)
        self.assertFalse(attempts[0].success)
        self.assertTrue(attempts[0].blocked)


class TestListLoginAttempts(AuthServiceTestCase):
    def test_newest_first_and_capped(self) -> None:
        for i in range(105):
            self.db.add(LoginAttempt(username=f"u{i}", role="User", success=False))
        self.db.commit()
        attempts = auth.list_login_attempts(self.db)
        self.assertEqual(len(attempts), 100)
        self.assertEqual(attempts[0].username, "u104")
        self.assertEqual(attempts[-1].username, "u5")


class TestSeedDefaultAdmin(AuthServiceTestCase):
    settings_overrides = {
        "SEED_DEFAULT_ADMIN": True,
        "DEFAULT_ADMIN_USERNAME": "chief",
        "DEFAULT_ADMIN_PASSWORD": "relief-2026",
    }

    def test_seeds_once(self) -> None:
        self.assertTrue(auth.seed_default_admin(self.db, self.settings))
        self.assertFalse(auth.seed_default_admin(self.db, self.settings))
        admin = self.db.query(User).filter(User.username == "chief").one()
        self.assertEqual(admin.role, "Admin")
        self.assertTrue(verify_password("relief-2026", admin.password_hash))

    def test_seeded_admin_logs_in_via_row(self) -> None:
        auth.seed_default_admin(self.db, self.settings)
        outcome = self._login("chief", "relief-2026", "Admin")
        self.assertEqual(outcome.message, "Login successful")

    def test_skipped_when_admin_exists(self) -> None:
        self.db.add(User(username="boss", password_hash="x", role="Admin"))
        self.db.commit()
        self.assertFalse(auth.seed_default_admin(self.db, self.settings))

    def test_skipped_when_username_taken_by_user(self) -> None:
        auth.signup(self.db, "chief", "abcdef")
        self.assertFalse(auth.seed_default_admin(self.db, self.settings))

    def test_disabled(self) -> None:
        settings = make_settings(SEED_DEFAULT_ADMIN=False)
        self.assertFalse(auth.seed_default_admin(self.db, settings))
        self.assertEqual(self.db.query(User).count(), 0)


if __name__ == "__main__":
    unittest.main()
