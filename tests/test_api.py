"""HTTP flows through FastAPI TestClient with an in-memory database and a fake image host."""

import unittest
from datetime import UTC, datetime, timedelta

from fastapi.testclient import TestClient

from app.api.v1.auth import get_token_issuer
from app.api.v1.common import get_image_host
from app.core.database import get_db
from app.core.security import TokenIssuer
from app.main import app
from app.models import RoleId
from app.schemas.auth import RoleItem, UserPublic
from app.scripts.create_user import create_user
from tests.support import FakeImageHost, image_bytes, make_session_factory

PREFIX = "/api/v1"
SECRET = "api-test-secret"


class ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.session_factory = make_session_factory()
        self.host = FakeImageHost()

        def override_get_db():
            db = self.session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_token_issuer] = lambda: TokenIssuer(SECRET)
        app.dependency_overrides[get_image_host] = lambda: self.host
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def signup(self, email: str = "jane@example.com", **overrides: str):
        body = {
            "fullname": "Jane Doe",
            "email": email,
            "password": "s3cret-pass",
            "password_confirmation": "s3cret-pass",
        }
        body.update(overrides)
        return self.client.post(f"{PREFIX}/signup", json=body)

    def token_for(self, email: str, *roles: str) -> str:
        """Create a user directly with extra roles and sign in over HTTP."""
        with self.session_factory() as session:
            create_user(session, "Moderator", email, "s3cret-pass", list(roles))
        response = self.client.post(
            f"{PREFIX}/signin", json={"email": email, "password": "s3cret-pass"}
        )
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()["data"]["access_token"]

    @staticmethod
    def bearer(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}


class TestAuthFlows(ApiTestCase):
    def test_signup_returns_member_and_sets_refresh_cookie(self) -> None:
        response = self.signup()

        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["status"], "success")
        self.assertEqual(body["code"], 201)
        self.assertNotIn("error", body)
        self.assertEqual(body["data"]["user"]["roles"], [{"id": 4, "name": "member"}])
        self.assertTrue(body["data"]["access_token"])
        cookie = response.headers["set-cookie"]
        self.assertIn(f"refresh_token={body['data']['refresh_token']}", cookie)
        self.assertIn("HttpOnly", cookie)
        self.assertIn("Path=/api/v1/refresh", cookie)
        self.assertIn("Max-Age=604800", cookie)
        self.assertIn("X-Request-ID", response.headers)

    def test_signup_confirmation_mismatch(self) -> None:
        response = self.signup(password_confirmation="something-else")

        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body["status"], "fail")
        self.assertNotIn("data", body)
        self.assertIn("password_confirmation", body["error"]["details"])
        self.assertNotIn("set-cookie", response.headers)

    def test_duplicate_signup(self) -> None:
        self.signup()
        response = self.signup()
        self.assertEqual(response.status_code, 400)
        self.assertIn("already registered", response.json()["error"]["message"])

    def test_non_json_body_is_400(self) -> None:
        response = self.client.post(
            f"{PREFIX}/signup", content=b"not json", headers={"Content-Type": "application/json"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["status"], "fail")

    def test_signin_errors_are_identical(self) -> None:
        self.signup()
        wrong_password = self.client.post(
            f"{PREFIX}/signin", json={"email": "jane@example.com", "password": "nope"}
        )
        unknown_email = self.client.post(
            f"{PREFIX}/signin", json={"email": "ghost@example.com", "password": "s3cret-pass"}
        )
        self.assertEqual(wrong_password.status_code, 400)
        self.assertEqual(wrong_password.json(), unknown_email.json())

    def test_signin_with_mixed_case_domain(self) -> None:
        created = self.signup("Jane@Example.COM")
        self.assertEqual(created.status_code, 201, created.text)

        for email in ("Jane@Example.COM", "Jane@example.com"):
            response = self.client.post(
                f"{PREFIX}/signin", json={"email": email, "password": "s3cret-pass"}
            )
            self.assertEqual(response.status_code, 200, response.text)
            self.assertEqual(
                response.json()["data"]["user"]["id"], created.json()["data"]["user"]["id"]
            )

    def test_refresh_with_cookie(self) -> None:
        refresh_token = self.signup().json()["data"]["refresh_token"]

        response = self.client.get(
            f"{PREFIX}/refresh", headers={"Cookie": f"refresh_token={refresh_token}"}
        )
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["refresh_token"], refresh_token)
        self.assertEqual(TokenIssuer(SECRET).decode(data["access_token"])["email"], "jane@example.com")

    def test_refresh_unknown_or_missing_cookie(self) -> None:
        unknown = self.client.get(f"{PREFIX}/refresh", headers={"Cookie": "refresh_token=nope"})
        missing = self.client.get(f"{PREFIX}/refresh")
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(missing.status_code, 401)


class TestAccessTokens(ApiTestCase):
    def _user(self) -> UserPublic:
        return UserPublic(
            id="u1", email="jane@example.com", fullname="Jane", roles=[RoleItem(id=4, name="member")]
        )

    def test_missing_token(self) -> None:
        response = self.client.post(f"{PREFIX}/posts/p1/likes")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"]["message"], "Invalid or missing access token")

    def test_expired_token(self) -> None:
        token = TokenIssuer(SECRET).issue(self._user(), now=datetime.now(UTC) - timedelta(minutes=6))
        response = self.client.post(f"{PREFIX}/posts/p1/likes", headers=self.bearer(token))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["error"]["message"], "Access token expired")

    def test_malformed_token(self) -> None:
        response = self.client.post(f"{PREFIX}/posts/p1/likes", headers=self.bearer("abc.def"))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"]["message"], "Malformed access token")

    def test_foreign_signature(self) -> None:
        token = TokenIssuer("someone-else").issue(self._user())
        response = self.client.post(f"{PREFIX}/posts/p1/likes", headers=self.bearer(token))
        self.assertEqual(response.status_code, 401)

    def test_member_cannot_create_subforum(self) -> None:
        token = self.signup().json()["data"]["access_token"]
        response = self.client.post(
            f"{PREFIX}/subforums", headers=self.bearer(token), data={"name": "python"}
        )
        self.assertEqual(response.status_code, 403)


class TestForumFlows(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.mod_token = self.token_for(
            "mod@example.com", "create-subforum", "delete-subforum", "take-down-post"
        )

    def create_subforum(self, name: str = "python") -> dict:
        response = self.client.post(
            f"{PREFIX}/subforums",
            headers=self.bearer(self.mod_token),
            data={"name": name, "description": "All things Python"},
            files={
                "icon": ("icon.png", image_bytes("PNG"), "image/png"),
                "banner": ("banner.jpg", image_bytes("JPEG"), "image/jpeg"),
            },
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["data"]["subforum"]

    def create_post(self, subforum_id: str, media_count: int = 2):
        return self.client.post(
            f"{PREFIX}/posts",
            headers=self.bearer(self.mod_token),
            data={"caption": "first post", "subforum_id": subforum_id},
            files=[
                ("media", (f"{i}.png", image_bytes("PNG"), "image/png")) for i in range(media_count)
            ],
        )

    def test_subforum_create_find_delete(self) -> None:
        subforum = self.create_subforum()
        self.assertTrue(subforum["icon"].startswith("https://"))

        found = self.client.get(
            f"{PREFIX}/subforums", params={"name": "python"}, headers=self.bearer(self.mod_token)
        )
        self.assertEqual([s["id"] for s in found.json()["data"]["subforums"]], [subforum["id"]])

        deleted = self.client.delete(
            f"{PREFIX}/subforums/{subforum['id']}", headers=self.bearer(self.mod_token)
        )
        self.assertEqual(deleted.status_code, 200)
        again = self.client.delete(
            f"{PREFIX}/subforums/{subforum['id']}", headers=self.bearer(self.mod_token)
        )
        self.assertEqual(again.status_code, 404)

    def test_post_like_and_take_down(self) -> None:
        subforum = self.create_subforum()
        created = self.create_post(subforum["id"])
        self.assertEqual(created.status_code, 201, created.text)
        post = created.json()["data"]["post"]
        self.assertEqual(len(post["media"]), 2)
        self.assertEqual(post["subforum"]["name"], "python")

        like = self.client.post(f"{PREFIX}/posts/{post['id']}/likes", headers=self.bearer(self.mod_token))
        self.assertEqual(like.status_code, 201)
        self.assertEqual(like.json()["data"]["post"]["like_count"], 1)
        again = self.client.post(f"{PREFIX}/posts/{post['id']}/likes", headers=self.bearer(self.mod_token))
        self.assertEqual(again.status_code, 400)

        taken = self.client.put(
            f"{PREFIX}/moderators/posts/{post['id']}/status", headers=self.bearer(self.mod_token)
        )
        self.assertEqual(taken.status_code, 200)
        self.assertEqual(taken.json()["data"]["post"]["status"], "take_down")

    def test_take_down_unknown_post(self) -> None:
        response = self.client.put(
            f"{PREFIX}/moderators/posts/does-not-exist/status", headers=self.bearer(self.mod_token)
        )
        self.assertEqual(response.status_code, 404)

    def test_post_in_unknown_subforum_uploads_nothing(self) -> None:
        response = self.create_post("does-not-exist")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["error"]["message"], "subforum not found")
        self.assertEqual(self.host.uploads, [])

    def test_post_with_too_many_images(self) -> None:
        subforum = self.create_subforum()
        response = self.create_post(subforum["id"], media_count=11)
        self.assertEqual(response.status_code, 400)
        self.assertIn("media", response.json()["error"]["details"])
        self.assertEqual(len(self.host.uploads), 2)

    def test_grant_and_revoke_roles(self) -> None:
        member = self.signup("member@example.com").json()["data"]["user"]

        granted = self.client.post(
            f"{PREFIX}/moderators",
            headers=self.bearer(self.mod_token),
            json={"user_id": member["id"], "role_id": [int(RoleId.TAKE_DOWN_POST)]},
        )
        self.assertEqual(granted.status_code, 201, granted.text)
        self.assertEqual([r["id"] for r in granted.json()["data"]["user"]["roles"]], [4, 7])

        duplicate = self.client.post(
            f"{PREFIX}/moderators",
            headers=self.bearer(self.mod_token),
            json={"user_id": member["id"], "role_id": [int(RoleId.TAKE_DOWN_POST)]},
        )
        self.assertEqual(duplicate.status_code, 400)

        revoked = self.client.request(
            "DELETE",
            f"{PREFIX}/moderators",
            headers=self.bearer(self.mod_token),
            json={"user_id": member["id"], "role_id": [int(RoleId.TAKE_DOWN_POST)]},
        )
        self.assertEqual(revoked.status_code, 200)
        self.assertEqual([r["id"] for r in revoked.json()["data"]["user"]["roles"]], [4])

    def test_cannot_grant_role_not_held(self) -> None:
        member = self.signup("member@example.com").json()["data"]["user"]
        response = self.client.post(
            f"{PREFIX}/moderators",
            headers=self.bearer(self.mod_token),
            json={"user_id": member["id"], "role_id": [int(RoleId.APPROVE_POST)]},
        )
        self.assertEqual(response.status_code, 403)


class TestHealth(ApiTestCase):
    def test_health(self) -> None:
        response = self.client.get(f"{PREFIX}/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["database"], "connected")

    def test_unknown_route_uses_envelope(self) -> None:
        response = self.client.get(f"{PREFIX}/nope")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["status"], "fail")


if __name__ == "__main__":
    unittest.main()
