"""HTTP tests for /api/auth and /api/product via FastAPI TestClient and in-memory SQLite."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_product_service, get_token_service
from app.core.database import get_db
from app.core.security import JwtSettings, TokenService
from app.main import app
from app.models import Base, Product, User


def _make_session_factory() -> sessionmaker:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


class ApiTestCase(unittest.TestCase):
    """Wires the app to a fresh database and a test TokenService per test."""

    def setUp(self) -> None:
        rounds = patch("app.core.security.BCRYPT_ROUNDS", 4)
        rounds.start()
        self.addCleanup(rounds.stop)

        self.session_factory = _make_session_factory()
        self.tokens = TokenService(
            JwtSettings(
                secret_key="api-test-secret-key-0123456789abcdef",
                issuer="test-issuer",
                audience="test-audience",
                expire_minutes=30,
            )
        )

        def override_get_db():
            db = self.session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_token_service] = lambda: self.tokens
        self.addCleanup(app.dependency_overrides.clear)
        self.client = TestClient(app)

    def register(self, username: str = "alice", password: str = "secret123") -> dict:
        res = self.client.post(
            "/api/auth/register",
            json={"username": username, "password": password, "confirmPassword": password},
        )
        self.assertEqual(res.status_code, 201, res.text)
        return res.json()

    def auth_headers(self, username: str = "alice", password: str = "secret123") -> dict:
        token = self.register(username, password)["token"]
        return {"Authorization": f"Bearer {token}"}

    def count(self, model: type) -> int:
        db = self.session_factory()
        try:
            return db.query(model).count()
        finally:
            db.close()


class TestAuthEndpoints(ApiTestCase):
    def test_register_then_login(self) -> None:
        registered = self.register()
        self.assertIn("token", registered)
        self.assertIn("expiresAt", registered)
        self.assertEqual(registered["user"]["username"], "alice")

        res = self.client.post("/api/auth/login", json={"username": "alice", "password": "secret123"})
        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertEqual(body["user"]["id"], registered["user"]["id"])
        self.assertEqual(self.tokens.extract_user_id(body["token"]), registered["user"]["id"])

    def test_wrong_password_indistinguishable_from_unknown_user(self) -> None:
        self.register()
        wrong = self.client.post("/api/auth/login", json={"username": "alice", "password": "bad-pass"})
        unknown = self.client.post("/api/auth/login", json={"username": "ghost", "password": "bad-pass"})
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.json(), unknown.json())
        self.assertEqual(wrong.json(), {"message": "Invalid credentials"})

    def test_password_mismatch_fails_before_persistence(self) -> None:
        res = self.client.post(
            "/api/auth/register",
            json={"username": "alice", "password": "secret123", "confirmPassword": "secret124"},
        )
        self.assertEqual(res.status_code, 400)
        body = res.json()
        self.assertEqual(body["message"], "Invalid input data")
        self.assertIn("Passwords do not match", body["errors"])
        self.assertEqual(self.count(User), 0)

    def test_duplicate_username_is_400(self) -> None:
        self.register()
        res = self.client.post(
            "/api/auth/register",
            json={"username": "alice", "password": "other123", "confirmPassword": "other123"},
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["message"], "Username already exists")
        self.assertEqual(self.count(User), 1)

    def test_username_whitespace_is_stripped(self) -> None:
        first = self.register("alice")
        res = self.client.post(
            "/api/auth/register",
            json={"username": " alice ", "password": "secret123", "confirmPassword": "secret123"},
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json(), {"message": "Username already exists"})

        login = self.client.post(
            "/api/auth/login", json={"username": "alice  ", "password": "secret123"}
        )
        self.assertEqual(login.status_code, 200, login.text)
        self.assertEqual(login.json()["user"]["id"], first["user"]["id"])
        self.assertEqual(self.count(User), 1)

    def test_field_validation_lists_errors(self) -> None:
        res = self.client.post("/api/auth/login", json={"username": "", "password": "123"})
        self.assertEqual(res.status_code, 400)
        body = res.json()
        self.assertEqual(len(body["errors"]), 2)
        self.assertTrue(any(e.startswith("username") for e in body["errors"]))
        self.assertTrue(any(e.startswith("password") for e in body["errors"]))


class TestAuthorizationGate(ApiTestCase):
    def test_missing_token_is_401(self) -> None:
        res = self.client.get("/api/product")
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.json(), {"message": "Not authenticated"})
        self.assertEqual(res.headers.get("www-authenticate"), "Bearer")

    def test_non_bearer_scheme_is_401(self) -> None:
        res = self.client.get("/api/product", headers={"Authorization": "Basic YWxpY2U6eA=="})
        self.assertEqual(res.status_code, 401)

    def test_expired_token_is_401(self) -> None:
        user_id = self.register()["user"]["id"]
        expired = self.tokens.issue(user_id, "alice", now=datetime.now(UTC) - timedelta(hours=2))
        res = self.client.get("/api/product", headers={"Authorization": f"Bearer {expired.token}"})
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.json()["message"], "Invalid or expired token")

    def test_token_for_unknown_user_is_401(self) -> None:
        token = self.tokens.issue(999, "ghost").token
        res = self.client.get("/api/product", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(res.status_code, 401)

    def test_forged_token_is_401(self) -> None:
        self.register()
        forger = TokenService(
            JwtSettings(
                secret_key="forged-secret-key-0123456789abcdef",
                issuer="test-issuer",
                audience="test-audience",
            )
        )
        token = forger.issue(1, "alice").token
        res = self.client.get("/api/product", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(res.status_code, 401)


class TestProductEndpoints(ApiTestCase):
    def test_widget_lifecycle(self) -> None:
        headers = self.auth_headers()
        created = self.client.post(
            "/api/product",
            json={"description": "Widget", "price": 9.99, "stock": 10},
            headers=headers,
        )
        self.assertEqual(created.status_code, 201, created.text)
        product = created.json()
        self.assertIsInstance(product["id"], int)
        self.assertEqual(product["description"], "Widget")
        self.assertAlmostEqual(product["price"], 9.99)
        self.assertEqual(product["stock"], 10)

        fetched = self.client.get(f"/api/product/{product['id']}", headers=headers)
        self.assertEqual(fetched.status_code, 200)
        self.assertEqual(fetched.json(), product)

        deleted = self.client.delete(f"/api/product/{product['id']}", headers=headers)
        self.assertEqual(deleted.status_code, 200)
        self.assertEqual(deleted.json(), {"message": "Product deleted successfully"})

        gone = self.client.get(f"/api/product/{product['id']}", headers=headers)
        self.assertEqual(gone.status_code, 404)
        self.assertEqual(gone.json(), {"message": "Product not found"})
        self.assertEqual(self.count(Product), 1)

    def test_price_and_stock_boundaries(self) -> None:
        headers = self.auth_headers()
        zero_price = self.client.post(
            "/api/product", json={"description": "A", "price": 0, "stock": 1}, headers=headers
        )
        negative_stock = self.client.post(
            "/api/product", json={"description": "A", "price": 1, "stock": -1}, headers=headers
        )
        minimum = self.client.post(
            "/api/product", json={"description": "A", "price": 0.01, "stock": 0}, headers=headers
        )
        self.assertEqual(zero_price.status_code, 400)
        self.assertEqual(zero_price.json(), {"message": "Price must be greater than 0"})
        self.assertEqual(negative_stock.status_code, 400)
        self.assertEqual(negative_stock.json(), {"message": "Stock cannot be negative"})
        self.assertEqual(minimum.status_code, 201)
        self.assertEqual(self.count(Product), 1)

    def test_price_outside_column_range_is_400_and_not_stored(self) -> None:
        headers = self.auth_headers()
        sub_cent = self.client.post(
            "/api/product", json={"description": "A", "price": 0.001, "stock": 0}, headers=headers
        )
        oversize = self.client.post(
            "/api/product",
            json={"description": "A", "price": 10000000000, "stock": 0},
            headers=headers,
        )
        self.assertEqual(sub_cent.status_code, 400)
        self.assertEqual(
            sub_cent.json(), {"message": "Price cannot have more than 2 decimal places"}
        )
        self.assertEqual(oversize.status_code, 400)
        self.assertEqual(oversize.json(), {"message": "Price must be less than 10000000000"})
        self.assertEqual(self.count(Product), 0)

    def test_search_wildcards_match_literally(self) -> None:
        headers = self.auth_headers()
        for description in ("Widget", "Gadget", "50% off"):
            res = self.client.post(
                "/api/product",
                json={"description": description, "price": 1, "stock": 1},
                headers=headers,
            )
            self.assertEqual(res.status_code, 201, res.text)
        underscore = self.client.get(
            "/api/product/search", params={"searchTerm": "_"}, headers=headers
        )
        percent = self.client.get(
            "/api/product/search", params={"searchTerm": "50%"}, headers=headers
        )
        self.assertEqual(underscore.json(), [])
        self.assertEqual([p["description"] for p in percent.json()], ["50% off"])

    def test_update_and_ownership(self) -> None:
        owner = self.auth_headers("alice")
        intruder = self.auth_headers("mallory")
        product = self.client.post(
            "/api/product", json={"description": "Widget", "price": 5, "stock": 1}, headers=owner
        ).json()

        payload = {"description": "Gizmo", "price": 7.5, "stock": 2, "category": "toys"}
        forbidden = self.client.put(f"/api/product/{product['id']}", json=payload, headers=intruder)
        self.assertEqual(forbidden.status_code, 403)
        forbidden_delete = self.client.delete(f"/api/product/{product['id']}", headers=intruder)
        self.assertEqual(forbidden_delete.status_code, 403)

        updated = self.client.put(f"/api/product/{product['id']}", json=payload, headers=owner)
        self.assertEqual(updated.status_code, 200)
        self.assertEqual(updated.json()["description"], "Gizmo")
        self.assertEqual(updated.json()["category"], "toys")

        missing = self.client.put("/api/product/9999", json=payload, headers=owner)
        self.assertEqual(missing.status_code, 404)
        missing_delete = self.client.delete("/api/product/9999", headers=owner)
        self.assertEqual(missing_delete.status_code, 404)

    def test_queries(self) -> None:
        alice = self.auth_headers("alice")
        bob = self.auth_headers("bob")
        for body, headers in (
            ({"description": "Claw Hammer", "category": "Tools", "price": 12, "stock": 4}, alice),
            ({"description": "Hammer Pants", "category": "Apparel", "price": 30, "stock": 1}, bob),
            ({"description": "Screwdriver", "category": "tools", "price": 4, "stock": 9}, bob),
        ):
            res = self.client.post("/api/product", json=body, headers=headers)
            self.assertEqual(res.status_code, 201, res.text)

        everything = self.client.get("/api/product", headers=alice).json()
        self.assertEqual(len(everything), 3)

        tools = self.client.get("/api/product/category/TOOLS", headers=alice).json()
        self.assertEqual(sorted(p["description"] for p in tools), ["Claw Hammer", "Screwdriver"])

        hammers = self.client.get(
            "/api/product/search", params={"searchTerm": "hammer"}, headers=alice
        ).json()
        self.assertEqual(len(hammers), 2)

        no_term = self.client.get("/api/product/search", headers=alice)
        self.assertEqual(no_term.status_code, 400)
        self.assertEqual(no_term.json(), {"message": "Search term cannot be empty"})

        mine = self.client.get("/api/product/my-products", headers=bob).json()
        self.assertEqual(sorted(p["description"] for p in mine), ["Hammer Pants", "Screwdriver"])
        self.assertTrue(all(p["ownerId"] == mine[0]["ownerId"] for p in mine))

        stats = self.client.get("/api/product/statistics", headers=alice).json()
        self.assertEqual(stats["totalProducts"], 3)
        self.assertIn("timestamp", stats)

    def test_empty_results_are_not_errors(self) -> None:
        headers = self.auth_headers()
        self.assertEqual(self.client.get("/api/product", headers=headers).json(), [])
        self.assertEqual(self.client.get("/api/product/category/none", headers=headers).json(), [])
        self.assertEqual(self.client.get("/api/product/my-products", headers=headers).json(), [])

    def test_non_integer_id_is_400(self) -> None:
        res = self.client.get("/api/product/abc", headers=self.auth_headers())
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["message"], "Invalid input data")


class TestUnexpectedErrors(ApiTestCase):
    def test_internal_error_is_generic_500(self) -> None:
        headers = self.auth_headers()
        broken = MagicMock()
        broken.list_all.side_effect = RuntimeError("connection string leaked here")
        app.dependency_overrides[get_product_service] = lambda: broken
        client = TestClient(app, raise_server_exceptions=False)
        with self.assertLogs("app.api.errors", level="ERROR"):
            res = client.get("/api/product", headers=headers)
        self.assertEqual(res.status_code, 500)
        self.assertEqual(res.json(), {"message": "Internal server error"})
        self.assertNotIn("leaked", res.text)


if __name__ == "__main__":
    unittest.main()
