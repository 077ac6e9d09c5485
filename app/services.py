"""
services.py
-----------
Business rules for customers, hotels and bookings: uniqueness checks,
reference checks, and the transaction around every write.
"""

from contextlib import contextmanager
from typing import List, Optional

from pydantic import BaseModel, EmailStr, TypeAdapter, ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import models_pydantic as schemas
import models_sqlalchemy as models
from exceptions import (
    ConflictError,
    CustomerNotExistError,
    HotelNotExistError,
    IdMismatchError,
    NotFoundError,
    UniqueEmailError,
    UniquePhoneError,
)
from logger import get_logger
from repositories import BookingRepository, CustomerRepository, HotelRepository

logger = get_logger(__name__)

_email_adapter = TypeAdapter(EmailStr)


@contextmanager
def transaction(db: Session):
    """Commit on success; roll back on any error, reporting constraint violations as conflicts."""
    try:
        yield
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity error, transaction rolled back: {e.orig}")
        raise ConflictError(
            "Request conflicts with an existing record",
            {"database": str(e.orig)},
        ) from e
    except Exception:
        db.rollback()
        raise


def _changes(update: BaseModel) -> dict:
    data = update.model_dump(exclude_unset=True, exclude={"id"})
    return {k: v for k, v in data.items() if v is not None}


class CustomerService:
    """Manages customers and keeps email and phone number unique."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CustomerRepository(db)
        self.booking_repo = BookingRepository(db)

    def find_all(self, name: Optional[str] = None) -> List[models.Customer]:
        if name is None:
            return self.repo.find_all_ordered_by_name()
        return self.repo.find_all_by_name(name)

    def get(self, customer_id: int) -> models.Customer:
        customer = self.repo.find_by_id(customer_id)
        if customer is None:
            logger.debug(f"Customer {customer_id} not found")
            raise NotFoundError("Customer", "id", customer_id)
        return customer

    def get_by_email(self, email: str) -> models.Customer:
        # Stored emails are normalized (lowercase domain), so normalize the lookup too.
        try:
            normalized = _email_adapter.validate_python(email)
        except ValidationError:
            raise NotFoundError("Customer", "email", email) from None
        customer = self.repo.find_by_email(normalized)
        if customer is None:
            raise NotFoundError("Customer", "email", email)
        return customer

    def get_by_phone(self, phone_number: str) -> models.Customer:
        customer = self.repo.find_by_phone(phone_number)
        if customer is None:
            raise NotFoundError("Customer", "phone number", phone_number)
        return customer

    def bookings(self, customer_id: int) -> List[models.Booking]:
        self.get(customer_id)
        return self.booking_repo.find_by_customer_id(customer_id)

    def email_already_exists(self, email: str, customer_id: Optional[int] = None) -> bool:
        existing = self.repo.find_by_email(email)
        return existing is not None and existing.id != customer_id

    def phone_already_exists(self, phone_number: str, customer_id: Optional[int] = None) -> bool:
        existing = self.repo.find_by_phone(phone_number)
        return existing is not None and existing.id != customer_id

    def validate_unique(self, email=None, phone_number=None, customer_id=None):
        if email is not None and self.email_already_exists(email, customer_id):
            logger.warning(f"Email {email} is already registered")
            raise UniqueEmailError()
        if phone_number is not None and self.phone_already_exists(phone_number, customer_id):
            logger.warning(f"Phone number {phone_number} is already registered")
            raise UniquePhoneError()

    def create(self, data: schemas.CustomerCreate) -> models.Customer:
        logger.info(f"Creating customer {data.name}")
        self.validate_unique(data.email, data.phone_number)
        customer = models.Customer(
            name=data.name,
            email=data.email,
            phone_number=data.phone_number,
        )
        with transaction(self.db):
            self.repo.create(customer)
        self.db.refresh(customer)
        return customer

    def update(self, customer_id: int, data: schemas.CustomerUpdate) -> models.Customer:
        customer = self.get(customer_id)
        if data.id is not None and data.id != customer_id:
            raise IdMismatchError("Customer")
        changes = _changes(data)
        logger.info(f"Updating customer {customer_id}: {sorted(changes)}")
        self.validate_unique(changes.get("email"), changes.get("phone_number"), customer_id)
        with transaction(self.db):
            self.repo.update(customer, changes)
        self.db.refresh(customer)
        return customer

    def delete(self, customer_id: int) -> None:
        customer = self.get(customer_id)
        logger.info(f"Deleting customer {customer_id} with {len(customer.bookings)} booking(s)")
        with transaction(self.db):
            self.repo.delete(customer)


class HotelService:
    """Manages hotels and keeps hotel phone numbers unique."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = HotelRepository(db)
        self.booking_repo = BookingRepository(db)

    def find_all(self, name: Optional[str] = None) -> List[models.Hotel]:
        if name is None:
            return self.repo.find_all_ordered_by_name()
        return self.repo.find_all_by_name(name)

    def get(self, hotel_id: int) -> models.Hotel:
        hotel = self.repo.find_by_id(hotel_id)
        if hotel is None:
            logger.debug(f"Hotel {hotel_id} not found")
            raise NotFoundError("Hotel", "id", hotel_id)
        return hotel

    def get_by_phone(self, phone_number: str) -> models.Hotel:
        hotel = self.repo.find_by_phone(phone_number)
        if hotel is None:
            raise NotFoundError("Hotel", "phone number", phone_number)
        return hotel

    def find_by_postal_code(self, postal_code: str) -> List[models.Hotel]:
        return self.repo.find_all_by_postal_code(postal_code)

    def find_by_location(self, location: str) -> List[models.Hotel]:
        return self.repo.find_all_by_location(location)

    def bookings(self, hotel_id: int) -> List[models.Booking]:
        self.get(hotel_id)
        return self.booking_repo.find_by_hotel_id(hotel_id)

    def availability(self, hotel_id: int, check_in_date, check_out_date) -> schemas.HotelAvailability:
        """Report bookings overlapping the given stay. Informational only; nothing is reserved."""
        self.get(hotel_id)
        overlapping = self.booking_repo.find_overlapping(hotel_id, check_in_date, check_out_date)
        return schemas.HotelAvailability(
            hotel_id=hotel_id,
            check_in_date=check_in_date,
            check_out_date=check_out_date,
            available=not overlapping,
            conflicting_booking_ids=[b.id for b in overlapping],
        )

    def phone_already_exists(self, phone_number: str, hotel_id: Optional[int] = None) -> bool:
        existing = self.repo.find_by_phone(phone_number)
        return existing is not None and existing.id != hotel_id

    def create(self, data: schemas.HotelCreate) -> models.Hotel:
        logger.info(f"Creating hotel {data.name}")
        if self.phone_already_exists(data.phone_number):
            logger.warning(f"Hotel phone number {data.phone_number} is already registered")
            raise UniquePhoneError()
        hotel = models.Hotel(
            name=data.name,
            location=data.location,
            phone_number=data.phone_number,
            postal_code=data.postal_code,
        )
        with transaction(self.db):
            self.repo.create(hotel)
        self.db.refresh(hotel)
        return hotel

    def update(self, hotel_id: int, data: schemas.HotelUpdate) -> models.Hotel:
        hotel = self.get(hotel_id)
        if data.id is not None and data.id != hotel_id:
            raise IdMismatchError("Hotel")
        changes = _changes(data)
        logger.info(f"Updating hotel {hotel_id}: {sorted(changes)}")
        if "phone_number" in changes and self.phone_already_exists(changes["phone_number"], hotel_id):
            raise UniquePhoneError()
        with transaction(self.db):
            self.repo.update(hotel, changes)
        self.db.refresh(hotel)
        return hotel

    def delete(self, hotel_id: int) -> None:
        hotel = self.get(hotel_id)
        logger.info(f"Deleting hotel {hotel_id} with {len(hotel.bookings)} booking(s)")
        with transaction(self.db):
            self.repo.delete(hotel)


class BookingService:
    """
    Creates and maintains bookings.

    A booking only needs its customer and hotel to exist. Dates are stored
    as given: no ordering or overlap rule is applied.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookingRepository(db)
        self.customer_repo = CustomerRepository(db)
        self.hotel_repo = HotelRepository(db)

    def find_all(self) -> List[models.Booking]:
        return self.repo.find_all()

    def get(self, booking_id: int) -> models.Booking:
        booking = self.repo.find_by_id(booking_id)
        if booking is None:
            logger.debug(f"Booking {booking_id} not found")
            raise NotFoundError("Booking", "id", booking_id)
        return booking

    def check_customer_exists(self, customer_id: int) -> models.Customer:
        customer = self.customer_repo.find_by_id(customer_id)
        if customer is None:
            logger.warning(f"Booking refers to missing customer {customer_id}")
            raise CustomerNotExistError(customer_id)
        return customer

    def check_hotel_exists(self, hotel_id: int) -> models.Hotel:
        hotel = self.hotel_repo.find_by_id(hotel_id)
        if hotel is None:
            logger.warning(f"Booking refers to missing hotel {hotel_id}")
            raise HotelNotExistError(hotel_id)
        return hotel

    def create(self, data: schemas.BookingCreate) -> models.Booking:
        logger.info(f"Creating booking for customer {data.customer_id} at hotel {data.hotel_id}")
        self.check_customer_exists(data.customer_id)
        self.check_hotel_exists(data.hotel_id)
        booking = models.Booking(
            customer_id=data.customer_id,
            hotel_id=data.hotel_id,
            check_in_date=data.check_in_date,
            check_out_date=data.check_out_date,
        )
        with transaction(self.db):
            self.repo.create(booking)
        self.db.refresh(booking)
        return booking

    def update(self, booking_id: int, data: schemas.BookingUpdate) -> models.Booking:
        booking = self.get(booking_id)
        if data.id is not None and data.id != booking_id:
            raise IdMismatchError("Booking")
        changes = _changes(data)
        logger.info(f"Updating booking {booking_id}: {sorted(changes)}")
        if "customer_id" in changes:
            self.check_customer_exists(changes["customer_id"])
        if "hotel_id" in changes:
            self.check_hotel_exists(changes["hotel_id"])
        with transaction(self.db):
            self.repo.update(booking, changes)
        self.db.refresh(booking)
        return booking

    def delete(self, booking_id: int) -> None:
        booking = self.get(booking_id)
        logger.info(f"Deleting booking {booking_id}")
        with transaction(self.db):
            self.repo.delete(booking)


class GuestBookingService:
    """Creates a new customer and their booking in a single transaction."""

    def __init__(self, db: Session):
        self.db = db
        self.customers = CustomerService(db)
        self.bookings = BookingService(db)

    def create(self, data: schemas.GuestBookingCreate) -> models.Booking:
        logger.info(f"Creating guest booking for {data.customer.name} at hotel {data.booking.hotel_id}")
        # Everything is checked up front so a failure never leaves a half-written guest.
        self.customers.validate_unique(data.customer.email, data.customer.phone_number)
        self.bookings.check_hotel_exists(data.booking.hotel_id)

        customer = models.Customer(
            name=data.customer.name,
            email=data.customer.email,
            phone_number=data.customer.phone_number,
        )
        with transaction(self.db):
            self.customers.repo.create(customer)
            booking = self.bookings.repo.create(
                models.Booking(
                    customer_id=customer.id,
                    hotel_id=data.booking.hotel_id,
                    check_in_date=data.booking.check_in_date,
                    check_out_date=data.booking.check_out_date,
                )
            )
        self.db.refresh(booking)
        return booking
