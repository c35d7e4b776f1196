import logging
from typing import List, Optional
from uuid import uuid4

from hotel_core.models.bookings import Booking
from hotel_core.models.notifications import Notification, NotificationChannel
from hotel_core.models.users import User
from hotel_core.repository.booking_repo import BookingRepository
from hotel_core.repository.notification_repo import NotificationRepository
from hotel_core.repository.user_repo import UserRepository
from hotel_core.utils.custom_exceptions import NotFoundException
from hotel_core.utils.dates import utc_now

logger = logging.getLogger(__name__)

CHECK_IN_TIME = "3:00 PM"


class NotificationService:
    """Stores notification records. Delivery is left to whatever consumes them."""

    def __init__(
        self,
        notification_repo: NotificationRepository,
        booking_repo: BookingRepository,
        user_repo: UserRepository,
    ):
        self.notification_repo = notification_repo
        self.booking_repo = booking_repo
        self.user_repo = user_repo

    def create_notification(
        self,
        user_id: str,
        channel: NotificationChannel,
        title: str,
        message: str,
        booking_id: Optional[str] = None,
    ) -> Notification:
        notification = Notification(
            notification_id=str(uuid4()),
            user_id=user_id,
            booking_id=booking_id,
            channel=channel,
            title=title,
            message=message,
        )
        self.notification_repo.add_notification(notification)
        return notification

    def _booking_and_user(self, booking_id: str):
        booking = self.booking_repo.get_booking_by_id(booking_id)
        if booking is None:
            raise NotFoundException("booking", booking_id, 404)
        user = self.user_repo.get_by_id(booking.user_id)
        if user is None:
            raise NotFoundException("user", booking.user_id, 404)
        return booking, user

    def _send_pair(self, booking: Booking, user: User, email: tuple, in_app: tuple) -> List[Notification]:
        sent = [
            self.create_notification(user.user_id, NotificationChannel.EMAIL, *email, booking_id=booking.booking_id),
            self.create_notification(user.user_id, NotificationChannel.IN_APP, *in_app, booking_id=booking.booking_id),
        ]
        logger.info(f"Queued {email[0]!r} notifications for booking {booking.booking_id}")
        return sent

    def send_booking_confirmation(self, booking_id: str) -> List[Notification]:
        booking, user = self._booking_and_user(booking_id)
        return self._send_pair(
            booking,
            user,
            (
                "Booking Confirmation",
                f"Your booking has been confirmed for {booking.check_in.isoformat()} to "
                f"{booking.check_out.isoformat()}. Booking ID: {booking.booking_id}",
            ),
            (
                "Booking Confirmed",
                f"Welcome {user.first_name}! Your reservation is confirmed. "
                f"Check-in: {booking.check_in.isoformat()}",
            ),
        )

    def send_payment_reminder(self, booking_id: str) -> List[Notification]:
        booking, user = self._booking_and_user(booking_id)
        return self._send_pair(
            booking,
            user,
            (
                "Payment Reminder",
                f"Payment reminder for booking {booking.booking_id}. Amount due: "
                f"{booking.total_amount}. Check-in date: {booking.check_in.isoformat()}",
            ),
            (
                "Payment Due",
                f"Payment of {booking.total_amount} is due for your upcoming stay",
            ),
        )

    def send_check_in_instructions(self, booking_id: str) -> List[Notification]:
        booking, user = self._booking_and_user(booking_id)
        return self._send_pair(
            booking,
            user,
            (
                "Check-in Instructions",
                f"Your stay starts {booking.check_in.isoformat()}. Please arrive after "
                f"{CHECK_IN_TIME} and bring a valid ID and your booking ID: {booking.booking_id}",
            ),
            (
                "Ready for Check-in",
                f"Your room will be ready after {CHECK_IN_TIME} on {booking.check_in.isoformat()}. See you soon!",
            ),
        )

    def get_user_notifications(self, user_id: str) -> List[Notification]:
        return self.notification_repo.get_user_notifications(user_id)

    def mark_as_sent(self, user_id: str, notification_id: str) -> Notification:
        return self.notification_repo.mark_sent(user_id, notification_id, utc_now())
