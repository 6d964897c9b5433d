import unittest

from fastapi.testclient import TestClient
from sqlmodel import Session

from salestrack.main import create_app

from support import ADMIN_PASSWORD, ADMIN_USERNAME, FakeClock, make_settings, seed_staff
from salestrack.core.database import build_engine


class TestAuthApi(unittest.TestCase):

    def setUp(self):
        self.clock = FakeClock()
        self.engine = build_engine("sqlite://")
        settings = make_settings(ADMIN_USERNAME=ADMIN_USERNAME, ADMIN_PASSWORD=ADMIN_PASSWORD)
        self.app = create_app(settings, engine=self.engine, clock=self.clock)
        self.client = TestClient(self.app)
        self.client.__enter__()  # runs lifespan: tables + seed admin
        with Session(self.engine) as session:
            seed_staff(session)

    def tearDown(self):
        self.client.__exit__(None, None, None)

    def _admin_login(self):
        resp = self.client.post("/api/v1/admin/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
        self.assertEqual(resp.status_code, 200)
        return resp.json()

    def _client_token(self, tracking_id):
        resp = self.client.post("/api/v1/auth", json={"user_id": tracking_id})
        self.assertEqual(resp.status_code, 200)
        return resp.json()["token"]

    def test_admin_login_and_verify(self):
        body = self._admin_login()
        self.assertEqual(body["expiresIn"], 86_400_000)

        resp = self.client.get("/api/v1/admin/verify", headers={"Authorization": f"Bearer {body['token']}"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "success")

    def test_admin_login_wrong_password(self):
        resp = self.client.post("/api/v1/admin/login", json={"username": ADMIN_USERNAME, "password": "wrong"})
        self.assertEqual(resp.status_code, 401)
        self.assertIn("message", resp.json())
        self.assertEqual(resp.headers["WWW-Authenticate"], "Bearer")

    def test_admin_login_empty_fields(self):
        resp = self.client.post("/api/v1/admin/login", json={"username": "", "password": ""})
        self.assertEqual(resp.status_code, 401)

    def test_admin_verify_requires_bearer(self):
        self.assertEqual(self.client.get("/api/v1/admin/verify").status_code, 401)
        resp = self.client.get("/api/v1/admin/verify", headers={"Authorization": "Basic abc"})
        self.assertEqual(resp.status_code, 401)

    def test_admin_session_expires(self):
        token = self._admin_login()["token"]
        self.clock.advance(hours=24)
        resp = self.client.get("/api/v1/admin/verify", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 401)

    def test_relogin_invalidates_previous_token(self):
        first = self._admin_login()["token"]
        second = self._admin_login()["token"]
        self.assertNotEqual(first, second)

        resp = self.client.get("/api/v1/admin/verify", headers={"Authorization": f"Bearer {first}"})
        self.assertEqual(resp.status_code, 401)
        resp = self.client.get("/api/v1/admin/verify", headers={"Authorization": f"Bearer {second}"})
        self.assertEqual(resp.status_code, 200)

    def test_admin_logout_revokes(self):
        token = self._admin_login()["token"]
        headers = {"Authorization": f"Bearer {token}"}

        self.assertEqual(self.client.post("/api/v1/admin/logout", headers=headers).status_code, 200)
        self.assertEqual(self.client.get("/api/v1/admin/verify", headers=headers).status_code, 401)

    def test_client_auth_and_me(self):
        token = self._client_token("T1")
        resp = self.client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            {
                "id": "T1",
                "name": "李雷",
                "role": "manager",
                "storeIds": ["S1", "S2"],
                "storeNames": {"S1": "旗舰店", "S2": "东区店"},
            },
        )

    def test_client_auth_unknown_id(self):
        resp = self.client.post("/api/v1/auth", json={"user_id": "nope"})
        self.assertEqual(resp.status_code, 404)

    def test_client_token_expires(self):
        token = self._client_token("T2")
        self.clock.advance(hours=24)
        resp = self.client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 401)

    def test_malformed_client_token(self):
        resp = self.client.get("/api/v1/auth/me", headers={"Authorization": "Bearer abc.def"})
        self.assertEqual(resp.status_code, 401)

    def test_admin_token_does_not_open_client_routes(self):
        token = self._admin_login()["token"]
        resp = self.client.get("/api/v1/sales/stores", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 401)

    def test_sales_stores_for_caller(self):
        token = self._client_token("T2")
        resp = self.client.get("/api/v1/sales/stores", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), [{"store_id": "S1", "store_name": "旗舰店"}])

    def test_sales_staff_is_manager_only(self):
        salesperson = self._client_token("T2")
        resp = self.client.get("/api/v1/sales/staff", headers={"Authorization": f"Bearer {salesperson}"})
        self.assertEqual(resp.status_code, 403)

        manager = self._client_token("T1")
        resp = self.client.get("/api/v1/sales/staff", headers={"Authorization": f"Bearer {manager}"})
        self.assertEqual(resp.status_code, 200)
        staff = {row["user_id"]: row for row in resp.json()}
        # T3 works only in S3, outside the manager's stores
        self.assertEqual(set(staff), {"T1", "T2"})
        self.assertEqual(staff["T1"]["store_ids"], ["S1", "S2"])
        self.assertEqual(staff["T2"]["role"], "salesperson")


if __name__ == "__main__":
    unittest.main()
