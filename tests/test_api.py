"""HTTP-level tests for the auth and user routes against an in-memory store."""

import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import get_db
from app.main import app
from app.models import Base, Role
from app.services.users import register_user

ALICE = {"name": "Alice", "email": "a@x.com", "password": "pw123", "username": "alice1"}


class _ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(engine)
        self.SessionTesting = sessionmaker(bind=engine, autocommit=False, autoflush=False)

        def override_get_db():
            db = self.SessionTesting()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def _login(self, email: str, password: str) -> str:
        resp = self.client.post("/api/login", json={"email": email, "password": password})
        self.assertEqual(resp.status_code, 200, resp.text)
        return resp.json()["data"]["AccessToken"]

    def _make_admin(self) -> str:
        db = self.SessionTesting()
        try:
            register_user(db, "Root", "root@x.com", "rootpw", "root", role=Role.ADMIN)
        finally:
            db.close()
        return self._login("root@x.com", "rootpw")


class TestRegisterLoginFlow(_ApiTestCase):
    """Register -> login -> token-gated routes."""

    def test_example_flow(self) -> None:
        resp = self.client.post("/api/users", json=ALICE)
        self.assertEqual(resp.status_code, 201, resp.text)
        body = resp.json()
        self.assertEqual(body["message"], "successful")
        user = body["data"][0]
        self.assertEqual(len(user["id"]), 12)
        self.assertEqual(user["role"], "USER")
        self.assertNotIn("password", user)
        self.assertNotIn("password_hash", user)

        resp = self.client.post("/api/login", json={"email": "a@x.com", "password": "pw123"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "OK")
        token = resp.json()["data"]["AccessToken"]

        headers = {"Authorization": f"Bearer {token}"}
        resp = self.client.get("/api/check-token", headers=headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"message": "successful"})

        resp = self.client.get("/api/allUsers", headers=headers)
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"], "You are not authorized to perform this action")

    def test_admin_lists_users_without_passwords(self) -> None:
        self.client.post("/api/users", json=ALICE)
        token = self._make_admin()
        resp = self.client.get("/api/allUsers", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 201, resp.text)
        users = resp.json()["data"]
        self.assertEqual(sorted(u["username"] for u in users), ["alice1", "root"])
        for u in users:
            self.assertNotIn("password", u)
            self.assertNotIn("password_hash", u)


class TestRegistrationErrors(_ApiTestCase):
    """POST /users answers 400 for missing and duplicate fields."""

    def test_missing_fields(self) -> None:
        for field in ALICE:
            with self.subTest(field=field):
                body = {k: v for k, v in ALICE.items() if k != field}
                resp = self.client.post("/api/users", json=body)
                self.assertEqual(resp.status_code, 400)
                self.assertEqual(resp.json()["detail"], "Missing parameters")

    def test_duplicate_email(self) -> None:
        self.client.post("/api/users", json=ALICE)
        resp = self.client.post("/api/users", json={**ALICE, "username": "alice2"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], "This email has already been registered")

    def test_duplicate_username(self) -> None:
        self.client.post("/api/users", json=ALICE)
        resp = self.client.post("/api/users", json={**ALICE, "email": "b@x.com"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], "Username already taken")


class TestLoginErrors(_ApiTestCase):
    """POST /login answers 401 for missing or invalid credentials."""

    def setUp(self) -> None:
        super().setUp()
        self.client.post("/api/users", json=ALICE)

    def test_missing_parameters(self) -> None:
        resp = self.client.post("/api/login", json={"email": "a@x.com"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"], "Missing parameters")

    def test_unknown_email(self) -> None:
        resp = self.client.post("/api/login", json={"email": "z@x.com", "password": "pw123"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"], "Invalid email or password")

    def test_wrong_password(self) -> None:
        resp = self.client.post("/api/login", json={"email": "a@x.com", "password": "nope"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"], "Invalid email or password")


class TestAuthGate(_ApiTestCase):
    """Token-gated routes reject absent, malformed and foreign tokens."""

    def test_no_authorization_header(self) -> None:
        for path in ("/api/check-token", "/api/allUsers"):
            with self.subTest(path=path):
                resp = self.client.get(path)
                self.assertEqual(resp.status_code, 401)
                self.assertEqual(resp.json()["detail"], "Unauthorized")
                self.assertEqual(resp.headers["www-authenticate"], "Bearer")

    def test_non_bearer_scheme(self) -> None:
        resp = self.client.get("/api/check-token", headers={"Authorization": "Basic abc"})
        self.assertEqual(resp.status_code, 401)

    def test_invalid_token(self) -> None:
        for path in ("/api/check-token", "/api/allUsers"):
            with self.subTest(path=path):
                resp = self.client.get(path, headers={"Authorization": "Bearer garbage"})
                self.assertEqual(resp.status_code, 401)
                self.assertEqual(resp.json()["detail"], "This Token is Invalid")


class TestMisc(_ApiTestCase):
    """Root and health endpoints."""

    def test_root(self) -> None:
        resp = self.client.get("/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"message": "Gatekeeper API"})

    def test_health(self) -> None:
        resp = self.client.get("/api/health")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["database"], "connected")


class TestRequestBodies(_ApiTestCase):
    """Absent or form-encoded bodies reach the services instead of failing schema validation."""

    def test_login_without_body(self) -> None:
        resp = self.client.post("/api/login")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"], "Missing parameters")

    def test_register_without_body(self) -> None:
        resp = self.client.post("/api/users")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], "Missing parameters")

    def test_non_object_json_counts_as_missing(self) -> None:
        for body in ([], "text", None):
            with self.subTest(body=body):
                resp = self.client.post("/api/users", json=body)
                self.assertEqual(resp.status_code, 400)
                self.assertEqual(resp.json()["detail"], "Missing parameters")

    def test_non_string_field_counts_as_missing(self) -> None:
        resp = self.client.post("/api/users", json={**ALICE, "password": 12345})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], "Missing parameters")

    def test_malformed_json(self) -> None:
        resp = self.client.post(
            "/api/login",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(resp.status_code, 400)

    def test_form_encoded_register_and_login(self) -> None:
        resp = self.client.post("/api/users", data=ALICE)
        self.assertEqual(resp.status_code, 201, resp.text)
        resp = self.client.post(
            "/api/login", data={"email": "a@x.com", "password": "pw123"}
        )
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertTrue(resp.json()["data"]["AccessToken"])

    def test_form_encoded_missing_field(self) -> None:
        resp = self.client.post("/api/login", data={"email": "a@x.com"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"], "Missing parameters")

    def test_over_long_field(self) -> None:
        resp = self.client.post("/api/users", json={**ALICE, "password": "x" * 200})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], "password must be at most 128 characters")


class TestUnhandledErrors(_ApiTestCase):
    """Unexpected exceptions become a 500 carrying the error message."""

    def test_store_failure_returns_500(self) -> None:
        token = self._make_admin()
        client = TestClient(app, raise_server_exceptions=False)
        with patch("app.api.v1.users.list_users", side_effect=RuntimeError("store unavailable")):
            resp = client.get("/api/allUsers", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"status": 500, "message": "store unavailable"})


if __name__ == "__main__":
    unittest.main()
