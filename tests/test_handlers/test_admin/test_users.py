import importlib
import json
import os
import unittest
from unittest.mock import MagicMock, patch

from hotel_core.models.users import User, UserProfile, UserRole
from hotel_core.utils.custom_exceptions import NotFoundException


def _user(role):
    return User(
        user_id="u2",
        email="guest@example.com",
        first_name="Asha",
        last_name="Rao",
        phone=None,
        password="hashed",
        role=role,
    )


class AdminUsersTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.env = patch.dict(os.environ, {"TABLE_NAME": "test-table"}, clear=False)
        cls.env.start()
        cls.resource = patch("hotel_core.utils.dynamodb.resource")
        mock_res = cls.resource.start()
        mock_res.return_value.Table.return_value = MagicMock()
        import hotel_handlers.admin.users as mod
        cls.mod = importlib.reload(mod)

    @classmethod
    def tearDownClass(cls):
        cls.resource.stop()
        cls.env.stop()

    def setUp(self):
        self.p_list = patch.object(self.mod.user_service, "list_users")
        self.p_get = patch.object(self.mod.user_service, "get_user_by_id")
        self.p_role = patch.object(self.mod.user_service, "update_user_role")
        self.mock_list = self.p_list.start()
        self.mock_get = self.p_get.start()
        self.mock_role = self.p_role.start()

    def tearDown(self):
        self.p_list.stop()
        self.p_get.stop()
        self.p_role.stop()

    def _event(self, role="admin", body=None, user_id="u2"):
        return {
            "body": json.dumps(body) if body is not None else None,
            "pathParameters": {"user_id": user_id} if user_id else None,
            "requestContext": {"authorizer": {"user_id": "staff", "role": role}},
        }

    def test_admin_lists_users_without_passwords(self):
        self.mock_list.return_value = [_user(UserRole.GUEST).profile()]

        resp = self.mod.list_users(self._event(), None)

        self.assertEqual(200, resp["statusCode"])
        data = json.loads(resp["body"])["data"]
        self.assertEqual(1, data["count"])
        self.assertNotIn("password", data["users"][0])

    def test_guest_cannot_list_users(self):
        resp = self.mod.list_users(self._event(role="guest"), None)

        self.assertEqual(403, resp["statusCode"])
        self.mock_list.assert_not_called()

    def test_missing_authorizer_returns_401(self):
        resp = self.mod.list_users({"requestContext": {}}, None)
        self.assertEqual(401, resp["statusCode"])

    def test_admin_promotes_guest(self):
        self.mock_get.return_value = _user(UserRole.GUEST)
        self.mock_role.return_value = UserProfile(
            user_id="u2",
            email="guest@example.com",
            first_name="Asha",
            last_name="Rao",
            role=UserRole.ADMIN,
        )

        resp = self.mod.update_user_role(self._event(body={"role": "admin"}), None)

        self.assertEqual(200, resp["statusCode"])
        self.mock_role.assert_called_once_with("u2", UserRole.ADMIN)
        self.assertEqual("admin", json.loads(resp["body"])["data"]["role"])

    def test_admin_cannot_grant_superuser(self):
        self.mock_get.return_value = _user(UserRole.GUEST)

        resp = self.mod.update_user_role(self._event(body={"role": "superuser"}), None)

        self.assertEqual(403, resp["statusCode"])
        self.mock_role.assert_not_called()

    def test_admin_cannot_demote_superuser(self):
        self.mock_get.return_value = _user(UserRole.SUPERUSER)

        resp = self.mod.update_user_role(self._event(body={"role": "guest"}), None)

        self.assertEqual(403, resp["statusCode"])
        self.mock_role.assert_not_called()

    def test_superuser_grants_superuser(self):
        self.mock_role.return_value = _user(UserRole.SUPERUSER).profile()

        resp = self.mod.update_user_role(
            self._event(role="superuser", body={"role": "superuser"}), None
        )

        self.assertEqual(200, resp["statusCode"])
        self.mock_get.assert_not_called()

    def test_unknown_role_returns_400(self):
        resp = self.mod.update_user_role(self._event(body={"role": "owner"}), None)
        self.assertEqual(400, resp["statusCode"])

    def test_unknown_user_returns_404(self):
        self.mock_get.side_effect = NotFoundException("user", "ghost", 404)

        resp = self.mod.update_user_role(self._event(body={"role": "admin"}, user_id="ghost"), None)

        self.assertEqual(404, resp["statusCode"])

    def test_guest_cannot_change_roles(self):
        resp = self.mod.update_user_role(self._event(role="guest", body={"role": "admin"}), None)
        self.assertEqual(403, resp["statusCode"])


if __name__ == "__main__":
    unittest.main()
