from datetime import date

import pytest

import models_pydantic as schemas
import models_sqlalchemy as models
from exceptions import (
    ConflictError,
    CustomerNotExistError,
    HotelNotExistError,
    NotFoundError,
    UniqueEmailError,
    UniquePhoneError,
)
from services import BookingService, CustomerService, GuestBookingService, HotelService, transaction


def make_customer(service, name="Alice", email="alice@example.com", phone_number="07123456789"):
    return service.create(schemas.CustomerCreate(name=name, email=email, phone_number=phone_number))

def make_hotel(service, name="Grand", phone_number="01912223333"):
    return service.create(
        schemas.HotelCreate(name=name, location="Newcastle", phone_number=phone_number, postal_code="NE17RU")
    )


def test_email_and_phone_uniqueness_ignores_self(db_session):
    service = CustomerService(db_session)
    customer = make_customer(service)
    assert service.email_already_exists("alice@example.com")
    assert not service.email_already_exists("alice@example.com", customer.id)
    assert service.phone_already_exists("07123456789")
    assert not service.phone_already_exists("07123456789", customer.id)
    assert not service.email_already_exists("bob@example.com")

def test_customer_create_conflicts(db_session):
    service = CustomerService(db_session)
    make_customer(service)
    with pytest.raises(UniqueEmailError):
        make_customer(service, phone_number="07000000000")
    with pytest.raises(UniquePhoneError):
        make_customer(service, email="other@example.com")
    assert len(service.find_all()) == 1

def test_customer_update_skips_unset_fields(db_session):
    service = CustomerService(db_session)
    customer = make_customer(service)
    updated = service.update(customer.id, schemas.CustomerUpdate(name="Alicia"))
    assert updated.name == "Alicia"
    assert updated.email == "alice@example.com"

def test_hotel_update_unknown_raises_not_found(db_session):
    with pytest.raises(NotFoundError) as exc:
        HotelService(db_session).update(42, schemas.HotelUpdate(name="X"))
    assert exc.value.status_code == 404

def test_hotel_phone_unique(db_session):
    service = HotelService(db_session)
    make_hotel(service)
    with pytest.raises(UniquePhoneError):
        make_hotel(service, name="Other")

def test_booking_requires_existing_customer_and_hotel(db_session):
    customer = make_customer(CustomerService(db_session))
    hotel = make_hotel(HotelService(db_session))
    service = BookingService(db_session)
    with pytest.raises(CustomerNotExistError):
        service.create(schemas.BookingCreate(customer_id=999, hotel_id=hotel.id,
                                             check_in_date=date(2025, 1, 1), check_out_date=date(2025, 1, 2)))
    with pytest.raises(HotelNotExistError):
        service.create(schemas.BookingCreate(customer_id=customer.id, hotel_id=999,
                                             check_in_date=date(2025, 1, 1), check_out_date=date(2025, 1, 2)))
    assert service.find_all() == []

def test_availability_reports_overlaps_only(db_session):
    customer = make_customer(CustomerService(db_session))
    hotels = HotelService(db_session)
    hotel = make_hotel(hotels)
    other = make_hotel(hotels, name="Other", phone_number="01000000000")
    bookings = BookingService(db_session)
    first = bookings.create(schemas.BookingCreate(customer_id=customer.id, hotel_id=hotel.id,
                                                  check_in_date=date(2025, 1, 1), check_out_date=date(2025, 1, 5)))
    bookings.create(schemas.BookingCreate(customer_id=customer.id, hotel_id=other.id,
                                          check_in_date=date(2025, 1, 1), check_out_date=date(2025, 1, 5)))

    result = hotels.availability(hotel.id, date(2024, 12, 30), date(2025, 1, 2))
    assert not result.available
    assert result.conflicting_booking_ids == [first.id]

    assert hotels.availability(hotel.id, date(2024, 12, 28), date(2025, 1, 1)).available

def test_guest_booking_creates_customer_and_booking(db_session):
    hotel = make_hotel(HotelService(db_session))
    booking = GuestBookingService(db_session).create(
        schemas.GuestBookingCreate(
            customer=schemas.CustomerCreate(name="Guest", email="guest@example.com", phone_number="07000000001"),
            booking=schemas.GuestBookingDetails(hotel_id=hotel.id, check_in_date=date(2025, 5, 1),
                                                check_out_date=date(2025, 5, 3)),
        )
    )
    assert booking.customer.email == "guest@example.com"
    assert booking.hotel_id == hotel.id

def test_transaction_rolls_back_integrity_errors(db_session):
    make_customer(CustomerService(db_session))
    duplicate = models.Customer(name="Bob", email="alice@example.com", phone_number="07000000002")
    with pytest.raises(ConflictError) as exc:
        with transaction(db_session):
            db_session.add(duplicate)
            db_session.flush()
    assert exc.value.status_code == 409
    # Session is usable again and the duplicate was discarded
    assert db_session.query(models.Customer).count() == 1

def test_transaction_rolls_back_on_service_error(db_session):
    hotel = make_hotel(HotelService(db_session))
    with pytest.raises(NotFoundError):
        with transaction(db_session):
            db_session.add(models.Customer(name="Carl", email="carl@example.com", phone_number="07000000003"))
            db_session.flush()
            raise NotFoundError("Hotel", "id", hotel.id + 1)
    assert db_session.query(models.Customer).count() == 0

def test_get_by_email_normalizes_lookup(db_session):
    service = CustomerService(db_session)
    customer = make_customer(service, name="Bob", email="Bob@Example.COM")
    assert customer.email == "Bob@example.com"
    assert service.get_by_email("Bob@Example.COM").id == customer.id
    with pytest.raises(NotFoundError):
        service.get_by_email("bob@@example")
