import importlib
import json
import os
import unittest
from unittest.mock import MagicMock, patch

from hotel_core.utils.custom_exceptions import DuplicateEmail

VALID = {
    "email": "asha@example.com",
    "first_name": "Asha",
    "last_name": "Rao",
    "password": "StrongPass123",
}


class SignupHandlerTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.env = patch.dict(os.environ, {"TABLE_NAME": "test-table"}, clear=False)
        cls.env.start()
        cls.resource = patch("hotel_core.utils.dynamodb.resource")
        mock_res = cls.resource.start()
        mock_res.return_value.Table.return_value = MagicMock()
        import hotel_handlers.auth.signup as mod
        cls.mod = importlib.reload(mod)

    @classmethod
    def tearDownClass(cls):
        cls.resource.stop()
        cls.env.stop()

    def setUp(self):
        self.p_signup = patch.object(self.mod.service, "signup", return_value="token-123")
        self.mock_signup = self.p_signup.start()

    def tearDown(self):
        self.p_signup.stop()

    def test_success_returns_201(self):
        resp = self.mod.signup_handler({"body": json.dumps(VALID)}, None)
        self.assertEqual(201, resp["statusCode"])
        self.mock_signup.assert_called_once_with(
            email="asha@example.com",
            password="StrongPass123",
            first_name="Asha",
            last_name="Rao",
            phone=None,
        )

    def test_weak_password_returns_400(self):
        resp = self.mod.signup_handler({"body": json.dumps(dict(VALID, password="weak"))}, None)
        self.assertEqual(400, resp["statusCode"])
        self.assertIn("password", json.loads(resp["body"])["message"])
        self.mock_signup.assert_not_called()

    def test_duplicate_email_returns_409(self):
        self.mock_signup.side_effect = DuplicateEmail("email is already in use")
        resp = self.mod.signup_handler({"body": json.dumps(VALID)}, None)
        self.assertEqual(409, resp["statusCode"])

    def test_unexpected_error_returns_500(self):
        self.mock_signup.side_effect = RuntimeError("boom")
        resp = self.mod.signup_handler({"body": json.dumps(VALID)}, None)
        self.assertEqual(500, resp["statusCode"])
        self.assertEqual("Internal server error", json.loads(resp["body"])["message"])


if __name__ == "__main__":
    unittest.main()
