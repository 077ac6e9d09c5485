from typing import Optional, List
from datetime import date
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

CUSTOMER_NAME_PATTERN = r"^[A-Za-z-']+$"
CUSTOMER_PHONE_PATTERN = r"^[0-9]{11}$"
HOTEL_PHONE_PATTERN = r"^0[0-9]{10}$"
POSTAL_CODE_PATTERN = r"^[a-zA-Z0-9]{6}$"


def _not_blank(value, message):
    if value is not None and not value.strip():
        raise ValueError(message)
    return value

# ---------- Customer ----------
class CustomerBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=50, pattern=CUSTOMER_NAME_PATTERN)
    email: EmailStr
    phone_number: str = Field(..., pattern=CUSTOMER_PHONE_PATTERN)

class CustomerCreate(CustomerBase):
    pass

class CustomerUpdate(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1, max_length=50, pattern=CUSTOMER_NAME_PATTERN)
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = Field(None, pattern=CUSTOMER_PHONE_PATTERN)

class CustomerResponse(CustomerBase):
    model_config = ConfigDict(from_attributes=True)

    id: int

# ---------- Hotel ----------
class HotelBase(BaseModel):
    name: str = Field(..., max_length=50)
    location: str = Field(..., max_length=255)
    phone_number: str = Field(..., pattern=HOTEL_PHONE_PATTERN)
    postal_code: str = Field(..., pattern=POSTAL_CODE_PATTERN)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return _not_blank(v, "Hotel name is required")

    @field_validator("location")
    @classmethod
    def location_not_blank(cls, v):
        return _not_blank(v, "Location is required")

class HotelCreate(HotelBase):
    pass

class HotelUpdate(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = Field(None, max_length=50)
    location: Optional[str] = Field(None, max_length=255)
    phone_number: Optional[str] = Field(None, pattern=HOTEL_PHONE_PATTERN)
    postal_code: Optional[str] = Field(None, pattern=POSTAL_CODE_PATTERN)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return _not_blank(v, "Hotel name is required")

    @field_validator("location")
    @classmethod
    def location_not_blank(cls, v):
        return _not_blank(v, "Location is required")

class HotelResponse(HotelBase):
    model_config = ConfigDict(from_attributes=True)

    id: int

class HotelAvailability(BaseModel):
    hotel_id: int
    check_in_date: date
    check_out_date: date
    available: bool
    conflicting_booking_ids: List[int] = []

# ---------- Booking ----------
class BookingBase(BaseModel):
    customer_id: int
    hotel_id: int
    check_in_date: date
    check_out_date: date

class BookingCreate(BookingBase):
    pass

class BookingUpdate(BaseModel):
    id: Optional[int] = None
    customer_id: Optional[int] = None
    hotel_id: Optional[int] = None
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None

class BookingResponse(BookingBase):
    model_config = ConfigDict(from_attributes=True)

    id: int

# ---------- Guest booking ----------
class GuestBookingDetails(BaseModel):
    """Booking part of a guest booking; the customer is created alongside it."""
    hotel_id: int
    check_in_date: date
    check_out_date: date

class GuestBookingCreate(BaseModel):
    customer: CustomerCreate
    booking: GuestBookingDetails
