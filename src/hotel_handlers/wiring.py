from hotel_core.repository.booking_repo import BookingRepository
from hotel_core.repository.notification_repo import NotificationRepository
from hotel_core.repository.payment_repo import PaymentRepository
from hotel_core.repository.promo_repo import PromoRepository
from hotel_core.repository.room_repo import RoomRepository
from hotel_core.repository.room_type_repo import RoomTypeRepository
from hotel_core.repository.seasonal_pricing_repo import SeasonalPricingRepository
from hotel_core.repository.user_repo import UserRepository
from hotel_core.services.availability_service import AvailabilityService
from hotel_core.services.booking_service import BookingService
from hotel_core.services.notification_service import NotificationService
from hotel_core.services.payment_service import PaymentService
from hotel_core.services.pricing_service import PricingService
from hotel_core.services.promo_service import PromoService
from hotel_core.services.report_service import ReportService
from hotel_core.services.room_service import RoomService
from hotel_core.services.room_type_service import RoomTypeService
from hotel_core.services.user_service import UserService
from hotel_core.utils.config import get_settings


def build_pricing_service(table) -> PricingService:
    return PricingService(
        room_type_repo=RoomTypeRepository(table),
        seasonal_repo=SeasonalPricingRepository(table),
    )


def build_availability_service(table) -> AvailabilityService:
    return AvailabilityService(
        room_repo=RoomRepository(table),
        booking_repo=BookingRepository(table),
    )


def build_promo_service(table) -> PromoService:
    return PromoService(promo_repo=PromoRepository(table))


def build_booking_service(table) -> BookingService:
    return BookingService(
        booking_repo=BookingRepository(table),
        user_repo=UserRepository(table),
        room_type_repo=RoomTypeRepository(table),
        room_repo=RoomRepository(table),
        availability_service=build_availability_service(table),
        pricing_service=build_pricing_service(table),
        promo_service=build_promo_service(table),
        allow_past_check_in=get_settings().is_test,
    )


def build_room_service(table) -> RoomService:
    return RoomService(
        room_repo=RoomRepository(table),
        room_type_repo=RoomTypeRepository(table),
        availability_service=build_availability_service(table),
    )


def build_room_type_service(table) -> RoomTypeService:
    return RoomTypeService(room_type_repo=RoomTypeRepository(table))


def build_payment_service(table) -> PaymentService:
    return PaymentService(
        payment_repo=PaymentRepository(table),
        booking_repo=BookingRepository(table),
    )


def build_notification_service(table) -> NotificationService:
    return NotificationService(
        notification_repo=NotificationRepository(table),
        booking_repo=BookingRepository(table),
        user_repo=UserRepository(table),
    )


def build_report_service(table) -> ReportService:
    return ReportService(
        booking_repo=BookingRepository(table),
        payment_repo=PaymentRepository(table),
        room_repo=RoomRepository(table),
        room_type_repo=RoomTypeRepository(table),
    )


def build_user_service(table) -> UserService:
    return UserService(user_repo=UserRepository(table))
