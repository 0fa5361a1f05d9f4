"""Service tests with mocked repositories: response codes, validation gating and error mapping."""

import unittest
from unittest.mock import MagicMock

from app.core.errors import GENERIC_ERROR, VALIDATION_ERROR, AppError, RepositoryError
from app.core.security import TokenIssuer, hash_password
from app.models import RoleId
from app.repositories.auth import INCORRECT_CREDENTIALS
from app.schemas.auth import CurrentUser, RoleItem, StoredUser, UserPublic
from app.schemas.post import PostAuthor, PostItem, PostSubforum
from app.schemas.subforum import SubforumItem
from app.services.auth import AuthService
from app.services.image_host import ImageHostNotConfiguredError, ImageUploadError
from app.services.moderator import FORBIDDEN, ModeratorService
from app.services.post import PostService
from app.services.subforum import SubforumService
from tests.support import FakeImageHost, image_bytes

MEMBER = RoleItem(id=4, name="member")


def _registration(**overrides: str) -> dict[str, str]:
    payload = {
        "fullname": "Jane Doe",
        "email": "jane@example.com",
        "password": "s3cret-pass",
        "password_confirmation": "s3cret-pass",
    }
    payload.update(overrides)
    return payload


def _actor(*role_ids: int) -> CurrentUser:
    return CurrentUser(
        id="actor-1",
        email="mod@example.com",
        fullname="Mod",
        roles=[RoleItem(id=int(r), name=str(r)) for r in role_ids],
    )


class TestAuthService(unittest.TestCase):
    def setUp(self) -> None:
        self.repository = MagicMock()
        self.tokens = TokenIssuer("test-secret")
        self.service = AuthService(self.repository, self.tokens)

    def test_register_success(self) -> None:
        self.repository.register.side_effect = lambda user, auth: UserPublic(
            id=user.id, email=user.email, fullname=user.fullname, roles=[MEMBER]
        )
        result = self.service.register(_registration(), agent="ua", remote_ip="10.0.0.1")

        self.assertEqual(result.code, 201)
        self.assertEqual(result.status, "success")
        self.assertEqual(result.data.user.roles, [MEMBER])
        claims = self.tokens.decode(result.data.access_token)
        self.assertEqual(claims["email"], "jane@example.com")
        user, auth = self.repository.register.call_args.args
        self.assertEqual(auth.refresh_token, result.data.refresh_token)
        self.assertEqual((auth.agent, auth.remote_ip), ("ua", "10.0.0.1"))
        self.assertNotEqual(user.password_hash, "s3cret-pass")

    def test_invalid_registration_never_reaches_repository(self) -> None:
        result = self.service.register(_registration(password_confirmation="different"))

        self.assertEqual(result.code, 400)
        self.assertEqual(result.error.message, VALIDATION_ERROR)
        self.assertIn("password_confirmation", result.error.details)
        self.repository.register.assert_not_called()

    def test_bad_email_is_field_error(self) -> None:
        result = self.service.register(_registration(email="not-an-email"))
        self.assertEqual(result.code, 400)
        self.assertIn("email", result.error.details)

    def test_duplicate_email_is_forwarded(self) -> None:
        self.repository.register.side_effect = AppError(400, "this email is already registered")
        result = self.service.register(_registration())
        self.assertEqual((result.code, result.error.message), (400, "this email is already registered"))

    def test_repository_failure_is_generic(self) -> None:
        self.repository.register.side_effect = RepositoryError("insert new user failed")
        result = self.service.register(_registration())
        self.assertEqual(result.code, 500)
        self.assertNotIn("insert", result.error.message)

    def test_login_success_checks_password_through_callback(self) -> None:
        stored_hash = hash_password("s3cret-pass")

        def login(email, auth, password_matches):
            self.assertTrue(password_matches(stored_hash))
            self.assertFalse(password_matches(hash_password("other")))
            return StoredUser(
                id="u1", email=email, fullname="Jane", roles=[MEMBER], password_hash=stored_hash
            )

        self.repository.login_by_email.side_effect = login
        result = self.service.login({"email": "jane@example.com", "password": "s3cret-pass"})

        self.assertEqual(result.code, 200)
        dumped = result.model_dump(mode="json", exclude_none=True)
        self.assertNotIn("password_hash", dumped["data"]["user"])

    def test_login_missing_fields(self) -> None:
        result = self.service.login({"email": ""})
        self.assertEqual(result.code, 400)
        self.assertEqual(set(result.error.details), {"email", "password"})
        self.repository.login_by_email.assert_not_called()

    def test_login_failure_message(self) -> None:
        self.repository.login_by_email.side_effect = AppError(400, INCORRECT_CREDENTIALS)
        result = self.service.login({"email": "jane@example.com", "password": "nope"})
        self.assertEqual((result.code, result.error.message), (400, INCORRECT_CREDENTIALS))

    def test_refresh_keeps_token(self) -> None:
        self.repository.find_refresh_token.return_value = UserPublic(
            id="u1", email="jane@example.com", fullname="Jane", roles=[MEMBER]
        )
        result = self.service.refresh("refresh-abc")
        self.assertEqual(result.code, 200)
        self.assertEqual(result.data.refresh_token, "refresh-abc")

    def test_refresh_without_token(self) -> None:
        result = self.service.refresh(None)
        self.assertEqual(result.code, 401)
        self.repository.find_refresh_token.assert_not_called()


class TestModeratorService(unittest.TestCase):
    def setUp(self) -> None:
        self.repository = MagicMock()
        self.service = ModeratorService(self.repository)

    def test_add_roles(self) -> None:
        self.repository.add_roles.return_value = [MEMBER, RoleItem(id=7, name="take-down-post")]
        result = self.service.add_roles(
            {"user_id": "u1", "role_id": [7, 7]}, _actor(RoleId.TAKE_DOWN_POST)
        )
        self.assertEqual(result.code, 201)
        self.assertEqual([r.id for r in result.data.user.roles], [4, 7])
        self.repository.add_roles.assert_called_once_with("u1", [7])

    def test_actor_must_hold_granted_roles(self) -> None:
        result = self.service.add_roles(
            {"user_id": "u1", "role_id": [7]}, _actor(RoleId.CREATE_SUBFORUM)
        )
        self.assertEqual((result.code, result.error.message), (403, FORBIDDEN))
        self.repository.add_roles.assert_not_called()

    def test_empty_or_unknown_roles_are_validation_errors(self) -> None:
        actor = _actor(*range(1, 8))
        for role_id in ([], [99]):
            result = self.service.add_roles({"user_id": "u1", "role_id": role_id}, actor)
            self.assertEqual(result.code, 400)
            self.assertIn("role_id", result.error.details)
        self.repository.add_roles.assert_not_called()

    def test_remove_roles_failure(self) -> None:
        self.repository.remove_roles.side_effect = AppError(400, "role not found for this user")
        result = self.service.remove_roles(
            {"user_id": "u1", "role_id": [1]}, _actor(RoleId.CREATE_SUBFORUM)
        )
        self.assertEqual(result.code, 400)


def _post_item() -> PostItem:
    return PostItem(
        id="p1",
        caption="hello",
        status="published",
        media=["https://img/1"],
        created_at="2026-01-01T00:00:00Z",
        subforum=PostSubforum(id="s1", name="python"),
        user=PostAuthor(id="u1", fullname="Jane"),
    )


class TestPostService(unittest.TestCase):
    def setUp(self) -> None:
        self.repository = MagicMock()
        self.host = FakeImageHost()
        self.service = PostService(self.repository, self.host, max_image_bytes=1024 * 1024)

    def _payload(self, *contents: bytes) -> dict:
        return {
            "caption": "hello",
            "subforum_id": "s1",
            "media": [{"filename": f"{i}.png", "content": c} for i, c in enumerate(contents)],
        }

    def test_create(self) -> None:
        self.repository.create.return_value = _post_item()
        result = self.service.create("u1", self._payload(image_bytes("PNG"), image_bytes("JPEG")))

        self.assertEqual(result.code, 201)
        post, media = self.repository.create.call_args.args
        self.assertEqual((post.user_id, post.subforum_id, post.status), ("u1", "s1", "published"))
        self.assertEqual(len(media), 2)
        self.assertEqual(self.host.uploads, ["0.png", "1.png"])

    def test_one_bad_file_rejects_before_any_upload(self) -> None:
        result = self.service.create("u1", self._payload(image_bytes("PNG"), b"GIF89a..."))
        self.assertEqual(result.code, 400)
        self.assertIn("Only upload jpg or png file", result.error.message)
        self.assertEqual(self.host.uploads, [])
        self.repository.create.assert_not_called()

    def test_unknown_subforum_is_404_before_any_upload(self) -> None:
        self.repository.require_subforum.side_effect = AppError(404, "subforum not found")
        result = self.service.create("u1", self._payload(image_bytes("PNG"), image_bytes("JPEG")))

        self.assertEqual((result.code, result.error.message), (404, "subforum not found"))
        self.repository.require_subforum.assert_called_once_with("s1")
        self.assertEqual(self.host.uploads, [])
        self.repository.create.assert_not_called()

    def test_media_count_limits(self) -> None:
        for count in (0, 11):
            result = self.service.create("u1", self._payload(*[image_bytes("PNG")] * count))
            self.assertEqual(result.code, 400)
            self.assertIn("media", result.error.details)

    def test_unconfigured_host_is_503(self) -> None:
        self.service.image_host = FakeImageHost(error=ImageHostNotConfiguredError("no creds"))
        result = self.service.create("u1", self._payload(image_bytes("PNG")))
        self.assertEqual(result.code, 503)

    def test_upload_failure_is_500(self) -> None:
        self.service.image_host = FakeImageHost(error=ImageUploadError("down"))
        result = self.service.create("u1", self._payload(image_bytes("PNG")))
        self.assertEqual(result.code, 500)
        self.repository.create.assert_not_called()

    def test_take_down(self) -> None:
        result = self.service.take_down("p1")
        self.assertEqual(result.code, 200)
        self.assertEqual(result.data.post.status, "take_down")

    def test_take_down_unknown(self) -> None:
        self.repository.take_down.side_effect = AppError(404, "failed to take down post, post id not found")
        self.assertEqual(self.service.take_down("nope").code, 404)

    def test_like(self) -> None:
        self.repository.like.return_value = 3
        result = self.service.like("p1", "u1")
        self.assertEqual(result.code, 201)
        self.assertEqual(result.data.post.like_count, 3)

    def test_like_repository_failure(self) -> None:
        self.repository.like.side_effect = RepositoryError("add like: 0 rows affected")
        result = self.service.like("p1", "u1")
        self.assertEqual((result.code, result.error.message), (500, GENERIC_ERROR))


class TestSubforumService(unittest.TestCase):
    def setUp(self) -> None:
        self.repository = MagicMock()
        self.host = FakeImageHost()
        self.service = SubforumService(self.repository, self.host, max_image_bytes=1024 * 1024)

    def _payload(self, icon: bytes, banner: bytes) -> dict:
        return {
            "name": "python",
            "description": "All things Python",
            "icon": {"filename": "icon.png", "content": icon},
            "banner": {"filename": "banner.jpg", "content": banner},
        }

    def test_create(self) -> None:
        self.repository.create.side_effect = SubforumItem.model_validate
        result = self.service.create("u1", self._payload(image_bytes("PNG"), image_bytes("JPEG")))
        self.assertEqual(result.code, 201)
        self.assertTrue(result.data.subforum.icon.endswith("icon.png"))
        self.assertEqual(self.host.uploads, ["icon.png", "banner.jpg"])

    def test_bad_banner_rejects_before_icon_upload(self) -> None:
        result = self.service.create("u1", self._payload(image_bytes("PNG"), b"not an image"))
        self.assertEqual(result.code, 400)
        self.assertIn("banner", result.error.message)
        self.assertEqual(self.host.uploads, [])

    def test_missing_icon(self) -> None:
        payload = self._payload(image_bytes("PNG"), image_bytes("PNG"))
        payload["icon"] = None
        result = self.service.create("u1", payload)
        self.assertEqual(result.code, 400)
        self.assertIn("icon", result.error.details)

    def test_find_by_name_requires_name(self) -> None:
        self.assertEqual(self.service.find_by_name("  ").code, 400)
        self.repository.find_by_name.return_value = []
        self.assertEqual(self.service.find_by_name("python").code, 200)
        self.repository.find_by_name.assert_called_once_with("python")

    def test_delete(self) -> None:
        self.assertEqual(self.service.delete_by_id("s1", "u1").code, 200)
        self.repository.delete_by_id.side_effect = AppError(404, "subforum not found")
        self.assertEqual(self.service.delete_by_id("s1", "u1").code, 404)


if __name__ == "__main__":
    unittest.main()
