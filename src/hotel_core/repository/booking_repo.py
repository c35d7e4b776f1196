from botocore.exceptions import ClientError
import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple
from boto3.dynamodb.conditions import Attr, Key

from hotel_core.models.bookings import Booking, BookingSlot, BookingStatus
from hotel_core.repository.base import DynamoRepository
from hotel_core.repository.promo_repo import usage_increment_update
from hotel_core.utils.constants import MAX_STAY
from hotel_core.utils.custom_exceptions import (
    InvalidStatus,
    NoAvailableRooms,
    PromoUsageLimitReached,
)
from hotel_core.utils.dates import from_iso_string, iter_nights, to_iso_string, utc_now
from hotel_core.utils.dynamodb import is_conditional_failure
from hotel_core.utils.money import to_money

logger = logging.getLogger(__name__)

# what a failed condition on each kind of transaction item means
_BOOKING = "booking"
_CAPACITY = "capacity"
_ROOM_LOCK = "room_lock"
_PROMO = "promo"


class BookingRepository(DynamoRepository):
    """Bookings in the single table.

    Besides the booking itself each booking writes:

    * ``USER#<user>/BOOKING#<id>``: copy for per-user listing
    * ``ROOMTYPE#<type>/CHECKIN#<date>#BOOKING#<id>``: slot used by the
      availability search
    * ``ROOMTYPE#<type>/NIGHT#<date>``: nightly counter, guarded by the number
      of bookable rooms, so two concurrent writers cannot oversell a night
    * ``ROOM#<room>/NIGHT#<date>``: per-room lock when a room is pinned
    """

    @staticmethod
    def _booking_keys(booking: Booking) -> List[Dict[str, str]]:
        return [
            {"pk": f"BOOKING#{booking.booking_id}", "sk": "DETAILS"},
            {"pk": f"USER#{booking.user_id}", "sk": f"BOOKING#{booking.booking_id}"},
        ]

    @staticmethod
    def _slot_key(booking: Booking) -> Dict[str, str]:
        return {
            "pk": f"ROOMTYPE#{booking.room_type_id}",
            "sk": f"CHECKIN#{booking.check_in.isoformat()}#BOOKING#{booking.booking_id}",
        }

    @staticmethod
    def _to_item(booking: Booking) -> Dict[str, Any]:
        return {
            "booking_id": booking.booking_id,
            "user_id": booking.user_id,
            "room_type_id": booking.room_type_id,
            "room_id": booking.room_id,
            "check_in": booking.check_in.isoformat(),
            "check_out": booking.check_out.isoformat(),
            "guests": booking.guests,
            "total_amount": to_money(booking.total_amount),
            "discount_amount": to_money(booking.discount_amount),
            "promo_code": booking.promo_code,
            "booking_status": booking.status.value,
            "special_requests": booking.special_requests,
            "created_at": to_iso_string(booking.created_at),
        }

    @staticmethod
    def _to_domain(item: Dict[str, Any]) -> Booking:
        return Booking(
            booking_id=item["booking_id"],
            user_id=item["user_id"],
            room_type_id=item["room_type_id"],
            room_id=item.get("room_id"),
            check_in=date.fromisoformat(item["check_in"]),
            check_out=date.fromisoformat(item["check_out"]),
            guests=int(item["guests"]),
            total_amount=to_money(item["total_amount"]),
            discount_amount=to_money(item.get("discount_amount", 0)),
            promo_code=item.get("promo_code"),
            status=BookingStatus(item["booking_status"]),
            special_requests=item.get("special_requests"),
            created_at=from_iso_string(item["created_at"]),
        )

    def _night_counter(self, booking: Booking, night: date, delta: int, capacity: Optional[int] = None):
        update = {
            "TableName": self.table.name,
            "Key": {
                "pk": f"ROOMTYPE#{booking.room_type_id}",
                "sk": f"NIGHT#{night.isoformat()}",
            },
            "UpdateExpression": "ADD #booked :delta",
            "ExpressionAttributeNames": {"#booked": "booked"},
            "ExpressionAttributeValues": {":delta": delta},
        }
        if capacity is not None:
            update["ConditionExpression"] = "attribute_not_exists(#booked) OR #booked < :capacity"
            update["ExpressionAttributeValues"][":capacity"] = capacity
        return {"Update": update}

    def _room_lock_put(self, room_id: str, booking: Booking, night: date):
        return {
            "Put": {
                "TableName": self.table.name,
                "Item": {
                    "pk": f"ROOM#{room_id}",
                    "sk": f"NIGHT#{night.isoformat()}",
                    "booking_id": booking.booking_id,
                },
                "ConditionExpression": "attribute_not_exists(pk)",
            }
        }

    def _room_lock_delete(self, room_id: str, night: date):
        return {
            "Delete": {
                "TableName": self.table.name,
                "Key": {"pk": f"ROOM#{room_id}", "sk": f"NIGHT#{night.isoformat()}"},
            }
        }

    def _transact(self, entries: List[Tuple[str, Dict[str, Any]]], booking_id: str):
        try:
            self.client.transact_write_items(TransactItems=[item for _, item in entries])
        except ClientError as err:
            if is_conditional_failure(err):
                raise self._translate_cancellation(err, [kind for kind, _ in entries], booking_id)
            logger.error(f"Error writing booking {booking_id}: {err}")
            raise

    @staticmethod
    def _translate_cancellation(err: ClientError, kinds: List[str], booking_id: str) -> Exception:
        reasons = err.response.get("CancellationReasons") or []
        failed = {
            kinds[i]
            for i, reason in enumerate(reasons)
            if i < len(kinds) and reason.get("Code") == "ConditionalCheckFailed"
        }
        if _PROMO in failed:
            return PromoUsageLimitReached("promo code has reached its usage limit")
        if _BOOKING in failed:
            return InvalidStatus(f"booking {booking_id} was modified concurrently")
        if _ROOM_LOCK in failed:
            return NoAvailableRooms("the selected room is already booked for these dates")
        return NoAvailableRooms("no rooms available for the selected dates")

    def add_booking(self, booking: Booking, capacity: int, promo_code: Optional[str] = None):
        item = self._to_item(booking)
        details_key, user_key = self._booking_keys(booking)
        slot = {
            **self._slot_key(booking),
            "booking_id": booking.booking_id,
            "room_id": booking.room_id,
            "check_in": item["check_in"],
            "check_out": item["check_out"],
            "booking_status": item["booking_status"],
        }

        entries = [
            (_BOOKING, {
                "Put": {
                    "TableName": self.table.name,
                    "Item": {**details_key, **item},
                    "ConditionExpression": "attribute_not_exists(pk)",
                }
            }),
            (_BOOKING, {"Put": {"TableName": self.table.name, "Item": {**user_key, **item}}}),
            (_BOOKING, {"Put": {"TableName": self.table.name, "Item": slot}}),
        ]
        for night in iter_nights(booking.check_in, booking.check_out):
            entries.append((_CAPACITY, self._night_counter(booking, night, 1, capacity)))
            if booking.room_id:
                entries.append((_ROOM_LOCK, self._room_lock_put(booking.room_id, booking, night)))
        if promo_code:
            entries.append((_PROMO, usage_increment_update(self.table.name, promo_code)))

        self._transact(entries, booking.booking_id)

    def update_booking(self, current: Booking, updated: Booking):
        """Persist status / room / special request changes.

        The write is conditioned on the stored status still being
        ``current.status`` so two racing transitions cannot both apply.
        Cancelling releases the nightly counters and any room locks; moving
        to another room swaps the locks.
        """
        set_parts = ["#booking_status = :status", "#room_id = :room_id",
                     "#special_requests = :special_requests", "#updated_at = :updated_at"]
        names = {
            "#booking_status": "booking_status",
            "#room_id": "room_id",
            "#special_requests": "special_requests",
            "#updated_at": "updated_at",
        }
        values = {
            ":status": updated.status.value,
            ":room_id": updated.room_id,
            ":special_requests": updated.special_requests,
            ":updated_at": to_iso_string(utc_now()),
        }

        entries = []
        for i, key in enumerate(self._booking_keys(current)):
            update = {
                "TableName": self.table.name,
                "Key": key,
                "UpdateExpression": "SET " + ", ".join(set_parts),
                "ExpressionAttributeNames": dict(names),
                "ExpressionAttributeValues": dict(values),
            }
            if i == 0:
                update["ConditionExpression"] = "#booking_status = :expected"
                update["ExpressionAttributeValues"][":expected"] = current.status.value
            entries.append((_BOOKING, {"Update": update}))

        entries.append((_BOOKING, {
            "Update": {
                "TableName": self.table.name,
                "Key": self._slot_key(current),
                "UpdateExpression": "SET #booking_status = :status, #room_id = :room_id",
                "ExpressionAttributeNames": {"#booking_status": "booking_status", "#room_id": "room_id"},
                "ExpressionAttributeValues": {":status": updated.status.value, ":room_id": updated.room_id},
            }
        }))

        # a cancelled booking holds no counters or locks
        released = current.is_active and not updated.is_active
        room_changed = current.room_id != updated.room_id
        for night in iter_nights(current.check_in, current.check_out):
            if released:
                entries.append((_CAPACITY, self._night_counter(current, night, -1)))
            if current.room_id and current.is_active and (released or room_changed):
                entries.append((_ROOM_LOCK, self._room_lock_delete(current.room_id, night)))
            if updated.room_id and room_changed and updated.is_active:
                entries.append((_ROOM_LOCK, self._room_lock_put(updated.room_id, updated, night)))

        self._transact(entries, current.booking_id)

    def get_booking_by_id(self, booking_id: str) -> Optional[Booking]:
        try:
            response = self.table.get_item(
                Key={"pk": f"BOOKING#{booking_id}", "sk": "DETAILS"}
            )
        except ClientError as err:
            logger.error(f"Error retrieving booking {booking_id}: {err}")
            raise

        item = response.get("Item")
        if not item:
            return None
        return self._to_domain(item)

    def get_user_bookings(self, user_id: str) -> List[Booking]:
        items = self._query_all(
            KeyConditionExpression=Key("pk").eq(f"USER#{user_id}")
            & Key("sk").begins_with("BOOKING#")
        )
        return [self._to_domain(item) for item in items]

    def get_room_type_slots(self, room_type_id: str, check_in: date, check_out: date) -> List[BookingSlot]:
        """Bookings of a room type that could overlap [check_in, check_out).

        Stays are capped at MAX_STAY nights, so nothing checking in earlier
        than ``check_in - MAX_STAY`` can still be in-house.
        """
        lower = (check_in - timedelta(days=MAX_STAY)).isoformat()
        upper = check_out.isoformat()
        items = self._query_all(
            KeyConditionExpression=(
                Key("pk").eq(f"ROOMTYPE#{room_type_id}")
                & Key("sk").between(f"CHECKIN#{lower}", f"CHECKIN#{upper}")
            )
        )
        return [
            BookingSlot(
                booking_id=item["booking_id"],
                room_id=item.get("room_id"),
                check_in=date.fromisoformat(item["check_in"]),
                check_out=date.fromisoformat(item["check_out"]),
                status=BookingStatus(item["booking_status"]),
            )
            for item in items
        ]

    def list_bookings(self, status: Optional[BookingStatus] = None) -> List[Booking]:
        condition = Attr("pk").begins_with("BOOKING#") & Attr("sk").eq("DETAILS")
        if status is not None:
            condition = condition & Attr("booking_status").eq(status.value)
        return [self._to_domain(item) for item in self._scan_all(FilterExpression=condition)]

    def count_bookings(self) -> int:
        condition = Attr("pk").begins_with("BOOKING#") & Attr("sk").eq("DETAILS")
        try:
            resp = self.table.scan(FilterExpression=condition, Select="COUNT")
            total = resp.get("Count", 0)
            while "LastEvaluatedKey" in resp:
                resp = self.table.scan(
                    FilterExpression=condition,
                    Select="COUNT",
                    ExclusiveStartKey=resp["LastEvaluatedKey"],
                )
                total += resp.get("Count", 0)
        except ClientError as err:
            logger.error(f"Error counting bookings: {err}")
            raise
        return total
