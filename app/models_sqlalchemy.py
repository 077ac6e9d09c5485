from sqlalchemy import Column, Integer, String, Date, ForeignKey, Index
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

class Customer(Base):
    __tablename__ = "customers"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    phone_number = Column(String(11), nullable=False, unique=True)

    bookings = relationship("Booking", back_populates="customer", cascade="all, delete-orphan")

    def __repr__(self):
        return f"Customer(id={self.id!r}, name={self.name!r}, email={self.email!r})"

class Hotel(Base):
    __tablename__ = "hotels"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    location = Column(String(255), nullable=False)
    phone_number = Column(String(11), nullable=False, unique=True)
    postal_code = Column(String(6), nullable=False)

    bookings = relationship("Booking", back_populates="hotel", cascade="all, delete-orphan")

    def __repr__(self):
        return f"Hotel(id={self.id!r}, name={self.name!r}, location={self.location!r})"

class Booking(Base):
    __tablename__ = "bookings"
    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    hotel_id = Column(Integer, ForeignKey("hotels.id"), nullable=False)
    check_in_date = Column(Date, nullable=False)
    check_out_date = Column(Date, nullable=False)

    customer = relationship("Customer", back_populates="bookings")
    hotel = relationship("Hotel", back_populates="bookings")

    def __repr__(self):
        return (
            f"Booking(id={self.id!r}, customer_id={self.customer_id!r}, hotel_id={self.hotel_id!r}, "
            f"check_in_date={self.check_in_date!r}, check_out_date={self.check_out_date!r})"
        )

Index("ix_bookings_customer_id", Booking.customer_id)
Index("ix_bookings_hotel_id", Booking.hotel_id)
