from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator
from hotel_core.models.rooms import RoomCategory


class CreateRoomTypeRequest(BaseModel):
    name: str = Field(min_length=1)
    category: RoomCategory
    description: Optional[str] = None
    base_price: Decimal = Field(gt=0, decimal_places=2)
    max_occupancy: int = Field(gt=0)
    amenities: List[str] = Field(default_factory=list)
    image_urls: List[str] = Field(default_factory=list)
    is_active: bool = True


class UpdateRoomTypeRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[RoomCategory] = None
    description: Optional[str] = None
    base_price: Optional[Decimal] = Field(default=None, gt=0, decimal_places=2)
    max_occupancy: Optional[int] = Field(default=None, gt=0)
    amenities: Optional[List[str]] = None
    image_urls: Optional[List[str]] = None
    is_active: Optional[bool] = None


class CreateRoomRequest(BaseModel):
    room_number: str = Field(min_length=1)
    room_type_id: str = Field(min_length=1)
    is_available: bool = True


class CreateSeasonalPricingRequest(BaseModel):
    room_type_id: str = Field(min_length=1)
    season_name: str = Field(min_length=1)
    price_multiplier: Decimal = Field(gt=0, decimal_places=2)
    start_date: date
    end_date: date
    is_active: bool = True

    @model_validator(mode="after")
    def validate_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self
