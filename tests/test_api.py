"""End-to-end tests for the user center HTTP API."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

from usercenter.api import SESSION_COOKIE_NAME, create_app
from usercenter.config import Settings
from usercenter.database import Database
from usercenter.models import User


class UserCenterAPITests(unittest.TestCase):
    def setUp(self) -> None:
        self._tempdir = tempfile.TemporaryDirectory()
        db_path = Path(self._tempdir.name) / "usercenter.sqlite3"
        self.database = Database(db_path)
        self.settings = Settings(
            database_path=str(db_path),
            password_salt="tests-salt",
            secure_cookies=False,
        )
        self.app = create_app(database=self.database, settings=self.settings)

    def tearDown(self) -> None:
        self._tempdir.cleanup()

    def _register(self, client: TestClient, account: str = "abcdef", password: str = "password"):
        return client.post(
            "/user/register",
            json={"account": account, "password": password, "check_password": password},
        )

    def test_healthcheck(self) -> None:
        with TestClient(self.app) as client:
            response = client.get("/healthz")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_register_then_duplicate(self) -> None:
        with TestClient(self.app) as client:
            created = self._register(client)
            self.assertEqual(created.status_code, 201, created.text)
            self.assertGreater(created.json()["id"], 0)

            duplicate = self._register(client, password="anotherpass")
            self.assertEqual(duplicate.status_code, 409, duplicate.text)

    def test_register_rejects_invalid_input(self) -> None:
        with TestClient(self.app) as client:
            missing = client.post("/user/register", json={"account": "abcdef"})
            self.assertEqual(missing.status_code, 400)

            mismatch = client.post(
                "/user/register",
                json={"account": "abcdef", "password": "password", "check_password": "passw0rd"},
            )
            self.assertEqual(mismatch.status_code, 400)
            self.assertIn("do not match", mismatch.json()["detail"])

            invalid = self._register(client, account="9lives")
            self.assertEqual(invalid.status_code, 400)

        self.assertEqual(self.database.list_users(), [])

    def test_login_sets_session_and_current_user(self) -> None:
        with TestClient(self.app) as client:
            self._register(client)

            login = client.post("/user/login", json={"account": "abcdef", "password": "password"})
            self.assertEqual(login.status_code, 200, login.text)
            payload = login.json()
            self.assertEqual(payload["account"], "abcdef")
            self.assertNotIn("password", payload)
            self.assertNotIn("is_deleted", payload)
            self.assertIn(SESSION_COOKIE_NAME, login.cookies)

            current = client.get("/user/current")
            self.assertEqual(current.status_code, 200, current.text)
            self.assertEqual(current.json()["id"], payload["id"])

            logout = client.post("/user/logout")
            self.assertEqual(logout.status_code, 204)

            after = client.get("/user/current")
            self.assertEqual(after.status_code, 401)

    def test_login_failures_share_one_message(self) -> None:
        with TestClient(self.app) as client:
            self._register(client)

            wrong_password = client.post("/user/login", json={"account": "abcdef", "password": "wrongpass1"})
            unknown = client.post("/user/login", json={"account": "nobody1", "password": "password"})

            self.assertEqual(wrong_password.status_code, 401)
            self.assertEqual(unknown.status_code, 401)
            self.assertEqual(wrong_password.json(), unknown.json())
            self.assertNotIn(SESSION_COOKIE_NAME, wrong_password.cookies)

            current = client.get("/user/current")
            self.assertEqual(current.status_code, 401)

    def test_failed_login_keeps_existing_session(self) -> None:
        with TestClient(self.app) as client:
            self._register(client)

            login = client.post("/user/login", json={"account": "abcdef", "password": "password"})
            self.assertEqual(login.status_code, 200, login.text)

            bad = client.post("/user/login", json={"account": "abcdef", "password": "wrongpass1"})
            self.assertEqual(bad.status_code, 401)

            current = client.get("/user/current")
            self.assertEqual(current.status_code, 200, current.text)
            self.assertEqual(current.json()["account"], "abcdef")

    def test_search_with_huge_page_number_returns_last_page(self) -> None:
        self.database.insert(User(account="user000", password="digest", username="Alice"))

        with TestClient(self.app) as client:
            response = client.get("/user/search", params={"current": "10000000000000000000", "size": 10})
            self.assertEqual(response.status_code, 200, response.text)
            body = response.json()
            self.assertEqual(body["current"], 1)
            self.assertEqual([row["username"] for row in body["records"]], ["Alice"])

    def test_search_pages_and_sanitizes(self) -> None:
        self.database.initialize()
        for index, name in enumerate(["Alice", "Alicia", "Bob"]):
            self.database.insert(User(account=f"user{index:03d}", password="digest", username=name))

        with TestClient(self.app) as client:
            filtered = client.get("/user/search", params={"username": "Ali", "current": 1, "size": 10})
            self.assertEqual(filtered.status_code, 200, filtered.text)
            body = filtered.json()
            self.assertEqual(body["total"], 2)
            self.assertEqual([row["username"] for row in body["records"]], ["Alice", "Alicia"])
            self.assertTrue(all("password" not in row for row in body["records"]))

            overflow = client.get("/user/search", params={"current": 99, "size": 2})
            self.assertEqual(overflow.status_code, 200, overflow.text)
            overflow_body = overflow.json()
            self.assertEqual(overflow_body["current"], 2)
            self.assertEqual([row["username"] for row in overflow_body["records"]], ["Bob"])

            bad_size = client.get("/user/search", params={"size": 0})
            self.assertEqual(bad_size.status_code, 400)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
