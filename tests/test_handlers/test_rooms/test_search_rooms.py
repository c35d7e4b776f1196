import importlib
import json
import os
import unittest
from decimal import Decimal
from unittest.mock import MagicMock, patch

from hotel_core.models.rooms import RoomCategory, RoomType


class SearchRoomsTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.env = patch.dict(os.environ, {"TABLE_NAME": "test-table"}, clear=False)
        cls.env.start()
        cls.resource = patch("hotel_core.utils.dynamodb.resource")
        mock_res = cls.resource.start()
        mock_res.return_value.Table.return_value = MagicMock()
        import hotel_handlers.rooms.search_rooms as mod
        cls.mod = importlib.reload(mod)

    @classmethod
    def tearDownClass(cls):
        cls.resource.stop()
        cls.env.stop()

    def setUp(self):
        self.p_search = patch.object(self.mod.room_service, "search_available_rooms")
        self.mock_search = self.p_search.start()

    def tearDown(self):
        self.p_search.stop()

    def _event(self, **params):
        return {"queryStringParameters": params or None}

    def test_query_strings_are_coerced(self):
        self.mock_search.return_value = [
            RoomType("rt1", "Deluxe", RoomCategory.DELUXE, Decimal("100.00"), 2)
        ]

        resp = self.mod.search_rooms(
            self._event(check_in="2030-07-01", check_out="2030-07-03", guests="2", room_type="deluxe"),
            None,
        )

        self.assertEqual(200, resp["statusCode"])
        data = json.loads(resp["body"])["data"]
        self.assertEqual(1, data["count"])
        self.assertEqual("deluxe", data["room_types"][0]["category"])
        kwargs = self.mock_search.call_args.kwargs
        self.assertEqual(2, kwargs["guests"])
        self.assertEqual(RoomCategory.DELUXE, kwargs["category"])

    def test_missing_params_returns_400(self):
        resp = self.mod.search_rooms(self._event(), None)
        self.assertEqual(400, resp["statusCode"])
        self.mock_search.assert_not_called()

    def test_unknown_category_returns_400(self):
        resp = self.mod.search_rooms(
            self._event(check_in="2030-07-01", check_out="2030-07-03", guests="2", room_type="penthouse"),
            None,
        )
        self.assertEqual(400, resp["statusCode"])

    def test_zero_guests_returns_400(self):
        resp = self.mod.search_rooms(
            self._event(check_in="2030-07-01", check_out="2030-07-03", guests="0"),
            None,
        )
        self.assertEqual(400, resp["statusCode"])


if __name__ == "__main__":
    unittest.main()
