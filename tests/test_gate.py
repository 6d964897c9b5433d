import unittest

from sqlmodel import Session

from salestrack.auth.admin_session import AdminSessionManager
from salestrack.auth.client_token import ClientTokenService
from salestrack.auth.errors import Expired, Forbidden, InvalidToken, MalformedToken, Unauthenticated
from salestrack.auth.gate import AdminPolicy, ClientPolicy, authorize, parse_bearer, to_rejection
from salestrack.auth.stores import CredentialStore
from salestrack.models.Admin import AdminIdentity
from salestrack.models.Staff import ClientIdentity, StaffRole

from support import ADMIN_PASSWORD, ADMIN_USERNAME, SALT, SECRET, FakeClock, make_engine, seed_admin, seed_staff


class TestParseBearer(unittest.TestCase):

    def test_extracts_token(self):
        self.assertEqual(parse_bearer("Bearer abc.def.ghi"), "abc.def.ghi")

    def test_rejects_missing_or_wrong_scheme(self):
        for header in (None, "", "Bearer", "Bearer ", "Basic abc", "bearer abc", "Token abc", "Bearer a b"):
            with self.assertRaises(Unauthenticated):
                parse_bearer(header)


class TestAuthorize(unittest.TestCase):

    def setUp(self):
        self.engine = make_engine()
        self.session = Session(self.engine)
        seed_admin(self.session)
        directory = seed_staff(self.session)
        self.clock = FakeClock()
        self.admin_sessions = AdminSessionManager(
            CredentialStore(self.session), secret=SECRET, salt=SALT, clock=self.clock
        )
        self.client_tokens = ClientTokenService(directory, secret=SECRET, lifetime_hours=24, clock=self.clock)

    def tearDown(self):
        self.session.close()

    def _authorize(self, header, policy):
        return authorize(header, policy, self.admin_sessions, self.client_tokens)

    def test_admin_policy(self):
        token = self.admin_sessions.login(ADMIN_USERNAME, ADMIN_PASSWORD).token
        identity = self._authorize(f"Bearer {token}", AdminPolicy())
        self.assertIsInstance(identity, AdminIdentity)
        self.assertEqual(identity.username, ADMIN_USERNAME)

    def test_admin_policy_rejects_client_token(self):
        token = self.client_tokens.issue("T1").token
        with self.assertRaises(InvalidToken):
            self._authorize(f"Bearer {token}", AdminPolicy())

    def test_client_policy(self):
        token = self.client_tokens.issue("T2").token
        identity = self._authorize(f"Bearer {token}", ClientPolicy())
        self.assertIsInstance(identity, ClientIdentity)
        self.assertEqual(identity.id, "T2")

    def test_client_policy_rejects_admin_token(self):
        # Admin payloads carry no exp claim
        token = self.admin_sessions.login(ADMIN_USERNAME, ADMIN_PASSWORD).token
        with self.assertRaises(Expired):
            self._authorize(f"Bearer {token}", ClientPolicy())

    def test_role_requirement(self):
        manager = self.client_tokens.issue("T1").token
        salesperson = self.client_tokens.issue("T2").token
        policy = ClientPolicy(role=StaffRole.MANAGER)

        self.assertEqual(self._authorize(f"Bearer {manager}", policy).id, "T1")
        with self.assertRaises(Forbidden) as ctx:
            self._authorize(f"Bearer {salesperson}", policy)
        self.assertEqual(ctx.exception.status_code, 403)

    def test_role_check_runs_after_verification(self):
        with self.assertRaises(MalformedToken):
            self._authorize("Bearer abc.def", ClientPolicy(role=StaffRole.MANAGER))

    def test_missing_header(self):
        for policy in (AdminPolicy(), ClientPolicy()):
            with self.assertRaises(Unauthenticated):
                self._authorize(None, policy)


class TestRejection(unittest.TestCase):

    def test_unauthorized_carries_bearer_challenge(self):
        status_code, rejection, headers = to_rejection(Expired())
        self.assertEqual(status_code, 401)
        self.assertEqual(headers, {"WWW-Authenticate": "Bearer"})
        self.assertTrue(rejection.message)

    def test_forbidden_has_no_challenge(self):
        status_code, rejection, headers = to_rejection(Forbidden("Requires role 'manager'"))
        self.assertEqual(status_code, 403)
        self.assertEqual(headers, {})
        self.assertEqual(rejection.message, "Requires role 'manager'")


if __name__ == "__main__":
    unittest.main()
