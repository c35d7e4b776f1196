from dataclasses import dataclass, field
from decimal import Decimal
from typing import List


@dataclass
class DashboardStats:
    total_bookings: int
    total_revenue: Decimal
    occupancy_rate: Decimal
    pending_payments: int


@dataclass
class CategoryRevenue:
    category: str
    revenue: Decimal
    count: int


@dataclass
class RevenueReport:
    total_revenue: Decimal
    booking_count: int
    average_booking_value: Decimal
    revenue_by_category: List[CategoryRevenue] = field(default_factory=list)


@dataclass
class CategoryOccupancy:
    category: str
    total_rooms: int
    occupied_rooms: int
    rate: Decimal


@dataclass
class OccupancyReport:
    total_rooms: int
    occupied_rooms: int
    occupancy_rate: Decimal
    occupancy_by_category: List[CategoryOccupancy] = field(default_factory=list)
