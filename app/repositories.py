"""
repositories.py
---------------
Data access for customers, hotels and bookings. Repositories add, flush
and delete rows on the session they are given; committing is left to
the caller.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

import models_sqlalchemy as models


class _Repository:
    model = None

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, entity_id: int):
        return self.db.get(self.model, entity_id)

    def create(self, entity):
        self.db.add(entity)
        self.db.flush()
        return entity

    def update(self, entity, changes: dict):
        for field, value in changes.items():
            setattr(entity, field, value)
        self.db.flush()
        return entity

    def delete(self, entity):
        self.db.delete(entity)
        self.db.flush()


class CustomerRepository(_Repository):
    model = models.Customer

    def find_all_ordered_by_name(self) -> List[models.Customer]:
        return self.db.query(models.Customer).order_by(models.Customer.name.asc()).all()

    def find_all_by_name(self, name: str) -> List[models.Customer]:
        return self.db.query(models.Customer).filter(models.Customer.name == name).all()

    def find_by_email(self, email: str) -> Optional[models.Customer]:
        return self.db.query(models.Customer).filter(models.Customer.email == email).first()

    def find_by_phone(self, phone_number: str) -> Optional[models.Customer]:
        return self.db.query(models.Customer).filter(models.Customer.phone_number == phone_number).first()


class HotelRepository(_Repository):
    model = models.Hotel

    def find_all_ordered_by_name(self) -> List[models.Hotel]:
        return self.db.query(models.Hotel).order_by(models.Hotel.name.asc()).all()

    def find_all_by_name(self, name: str) -> List[models.Hotel]:
        return self.db.query(models.Hotel).filter(models.Hotel.name == name).all()

    def find_by_phone(self, phone_number: str) -> Optional[models.Hotel]:
        return self.db.query(models.Hotel).filter(models.Hotel.phone_number == phone_number).first()

    def find_all_by_postal_code(self, postal_code: str) -> List[models.Hotel]:
        return self.db.query(models.Hotel).filter(models.Hotel.postal_code == postal_code).all()

    def find_all_by_location(self, location: str) -> List[models.Hotel]:
        return self.db.query(models.Hotel).filter(models.Hotel.location == location).all()


class BookingRepository(_Repository):
    model = models.Booking

    def find_all(self) -> List[models.Booking]:
        return self.db.query(models.Booking).order_by(models.Booking.id).all()

    def find_by_customer_id(self, customer_id: int) -> List[models.Booking]:
        return (
            self.db.query(models.Booking)
            .filter(models.Booking.customer_id == customer_id)
            .order_by(models.Booking.check_in_date)
            .all()
        )

    def find_by_hotel_id(self, hotel_id: int) -> List[models.Booking]:
        return (
            self.db.query(models.Booking)
            .filter(models.Booking.hotel_id == hotel_id)
            .order_by(models.Booking.check_in_date)
            .all()
        )

    def find_overlapping(self, hotel_id: int, check_in_date, check_out_date) -> List[models.Booking]:
        # Half-open stays: a check-out on the day of another check-in does not overlap.
        return (
            self.db.query(models.Booking)
            .filter(
                models.Booking.hotel_id == hotel_id,
                models.Booking.check_in_date < check_out_date,
                models.Booking.check_out_date > check_in_date,
            )
            .order_by(models.Booking.id)
            .all()
        )
