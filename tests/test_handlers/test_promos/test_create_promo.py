import importlib
import json
import os
import unittest
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock, patch

from hotel_core.models.promos import DiscountType, PromoOffer
from hotel_core.utils.custom_exceptions import PromoCodeExists

VALID = {
    "code": "summer20",
    "name": "Summer sale",
    "discount_type": "percentage",
    "discount_value": "20",
    "valid_from": "2030-06-01",
    "valid_until": "2030-08-31",
}


class CreatePromoTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.env = patch.dict(os.environ, {"TABLE_NAME": "test-table"}, clear=False)
        cls.env.start()
        cls.resource = patch("hotel_core.utils.dynamodb.resource")
        mock_res = cls.resource.start()
        mock_res.return_value.Table.return_value = MagicMock()
        import hotel_handlers.promos.promos as mod
        cls.mod = importlib.reload(mod)

    @classmethod
    def tearDownClass(cls):
        cls.resource.stop()
        cls.env.stop()

    def setUp(self):
        self.p_create = patch.object(self.mod.promo_service, "create_promo")
        self.mock_create = self.p_create.start()

    def tearDown(self):
        self.p_create.stop()

    def _event(self, body, role="admin"):
        return {
            "body": json.dumps(body),
            "requestContext": {"authorizer": {"user_id": "staff", "role": role}},
        }

    def test_admin_creates_code(self):
        self.mock_create.return_value = PromoOffer(
            code="SUMMER20",
            name="Summer sale",
            discount_type=DiscountType.PERCENTAGE,
            discount_value=Decimal("20.00"),
            valid_from=date(2030, 6, 1),
            valid_until=date(2030, 8, 31),
        )

        resp = self.mod.create_promo(self._event(VALID), None)

        self.assertEqual(201, resp["statusCode"])
        req = self.mock_create.call_args.args[0]
        self.assertEqual("SUMMER20", req.code)

    def test_guest_forbidden(self):
        resp = self.mod.create_promo(self._event(VALID, role="guest"), None)
        self.assertEqual(403, resp["statusCode"])

    def test_percentage_over_100_returns_400(self):
        resp = self.mod.create_promo(self._event(dict(VALID, discount_value="150")), None)
        self.assertEqual(400, resp["statusCode"])

    def test_duplicate_returns_409(self):
        self.mock_create.side_effect = PromoCodeExists("promo code SUMMER20 already exists")
        resp = self.mod.create_promo(self._event(VALID), None)
        self.assertEqual(409, resp["statusCode"])


if __name__ == "__main__":
    unittest.main()
