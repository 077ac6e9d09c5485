from contextlib import asynccontextmanager
from datetime import date
from typing import List, Optional

from fastapi import FastAPI, Depends, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

import config
import models_pydantic as schemas
from database import get_db, init_db
from exceptions import ServiceError
from logger import get_logger
from services import BookingService, CustomerService, GuestBookingService, HotelService

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(title="Hotel Booking API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------- Error Handling ----------
def error_body(message, reasons=None):
    return {"detail": {"error": message, "reasons": reasons or {}}}

@app.exception_handler(ServiceError)
async def handle_service_error(request: Request, exc: ServiceError):
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.reasons))

@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    reasons = {}
    for err in exc.errors():
        # Drop the "body"/"query"/"path" prefix so reasons are keyed by field name.
        loc = [str(p) for p in err.get("loc", ())[1:]] or [str(p) for p in err.get("loc", ())]
        reasons[".".join(loc)] = err.get("msg", "Invalid value")
    logger.info(f"{request.method} {request.url.path} -> 400: {reasons}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body("Bad Request", reasons))

# ---------- Service Dependencies ----------
def get_customer_service(db: Session = Depends(get_db)):
    return CustomerService(db)

def get_hotel_service(db: Session = Depends(get_db)):
    return HotelService(db)

def get_booking_service(db: Session = Depends(get_db)):
    return BookingService(db)

def get_guest_booking_service(db: Session = Depends(get_db)):
    return GuestBookingService(db)

@app.get("/health")
def health():
    return {"status": "ok"}

# ---------- Customer Endpoints ----------
@app.get("/customers/", response_model=List[schemas.CustomerResponse])
def list_customers(name: Optional[str] = None, service: CustomerService = Depends(get_customer_service)):
    return [schemas.CustomerResponse.model_validate(c) for c in service.find_all(name)]

@app.get("/customers/email/{email}", response_model=schemas.CustomerResponse)
def get_customer_by_email(email: str, service: CustomerService = Depends(get_customer_service)):
    return schemas.CustomerResponse.model_validate(service.get_by_email(email))

@app.get("/customers/phone/{phone_number}", response_model=schemas.CustomerResponse)
def get_customer_by_phone(phone_number: str, service: CustomerService = Depends(get_customer_service)):
    return schemas.CustomerResponse.model_validate(service.get_by_phone(phone_number))

@app.get("/customers/{customer_id}", response_model=schemas.CustomerResponse)
def get_customer(customer_id: int, service: CustomerService = Depends(get_customer_service)):
    return schemas.CustomerResponse.model_validate(service.get(customer_id))

@app.get("/customers/{customer_id}/bookings", response_model=List[schemas.BookingResponse])
def list_customer_bookings(customer_id: int, service: CustomerService = Depends(get_customer_service)):
    return [schemas.BookingResponse.model_validate(b) for b in service.bookings(customer_id)]

@app.post("/customers/", response_model=schemas.CustomerResponse, status_code=status.HTTP_201_CREATED)
def create_customer(customer: schemas.CustomerCreate, service: CustomerService = Depends(get_customer_service)):
    db_customer = service.create(customer)
    logger.info(f"Created customer {db_customer!r}")
    return schemas.CustomerResponse.model_validate(db_customer)

@app.put("/customers/{customer_id}", response_model=schemas.CustomerResponse)
def update_customer(customer_id: int, customer_update: schemas.CustomerUpdate,
                    service: CustomerService = Depends(get_customer_service)):
    return schemas.CustomerResponse.model_validate(service.update(customer_id, customer_update))

@app.delete("/customers/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(customer_id: int, service: CustomerService = Depends(get_customer_service)):
    service.delete(customer_id)
    return

# ---------- Hotel Endpoints ----------
@app.get("/hotels/", response_model=List[schemas.HotelResponse])
def list_hotels(name: Optional[str] = None, service: HotelService = Depends(get_hotel_service)):
    return [schemas.HotelResponse.model_validate(h) for h in service.find_all(name)]

@app.get("/hotels/phone/{phone_number}", response_model=schemas.HotelResponse)
def get_hotel_by_phone(phone_number: str, service: HotelService = Depends(get_hotel_service)):
    return schemas.HotelResponse.model_validate(service.get_by_phone(phone_number))

@app.get("/hotels/postal-code/{postal_code}", response_model=List[schemas.HotelResponse])
def list_hotels_by_postal_code(postal_code: str, service: HotelService = Depends(get_hotel_service)):
    return [schemas.HotelResponse.model_validate(h) for h in service.find_by_postal_code(postal_code)]

@app.get("/hotels/location/{location}", response_model=List[schemas.HotelResponse])
def list_hotels_by_location(location: str, service: HotelService = Depends(get_hotel_service)):
    return [schemas.HotelResponse.model_validate(h) for h in service.find_by_location(location)]

@app.get("/hotels/{hotel_id}", response_model=schemas.HotelResponse)
def get_hotel(hotel_id: int, service: HotelService = Depends(get_hotel_service)):
    return schemas.HotelResponse.model_validate(service.get(hotel_id))

@app.get("/hotels/{hotel_id}/bookings", response_model=List[schemas.BookingResponse])
def list_hotel_bookings(hotel_id: int, service: HotelService = Depends(get_hotel_service)):
    return [schemas.BookingResponse.model_validate(b) for b in service.bookings(hotel_id)]

@app.get("/hotels/{hotel_id}/availability", response_model=schemas.HotelAvailability)
def get_hotel_availability(hotel_id: int,
                           check_in_date: date = Query(...),
                           check_out_date: date = Query(...),
                           service: HotelService = Depends(get_hotel_service)):
    return service.availability(hotel_id, check_in_date, check_out_date)

@app.post("/hotels/", response_model=schemas.HotelResponse, status_code=status.HTTP_201_CREATED)
def create_hotel(hotel: schemas.HotelCreate, service: HotelService = Depends(get_hotel_service)):
    db_hotel = service.create(hotel)
    logger.info(f"Created hotel {db_hotel!r}")
    return schemas.HotelResponse.model_validate(db_hotel)

@app.put("/hotels/{hotel_id}", response_model=schemas.HotelResponse)
def update_hotel(hotel_id: int, hotel_update: schemas.HotelUpdate, service: HotelService = Depends(get_hotel_service)):
    return schemas.HotelResponse.model_validate(service.update(hotel_id, hotel_update))

@app.delete("/hotels/{hotel_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_hotel(hotel_id: int, service: HotelService = Depends(get_hotel_service)):
    service.delete(hotel_id)
    return

# ---------- Booking Endpoints ----------
@app.get("/bookings/", response_model=List[schemas.BookingResponse])
def list_bookings(service: BookingService = Depends(get_booking_service)):
    return [schemas.BookingResponse.model_validate(b) for b in service.find_all()]

@app.get("/bookings/{booking_id}", response_model=schemas.BookingResponse)
def get_booking(booking_id: int, service: BookingService = Depends(get_booking_service)):
    return schemas.BookingResponse.model_validate(service.get(booking_id))

@app.post("/bookings/", response_model=schemas.BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(booking: schemas.BookingCreate, service: BookingService = Depends(get_booking_service)):
    db_booking = service.create(booking)
    logger.info(f"Created booking {db_booking!r}")
    return schemas.BookingResponse.model_validate(db_booking)

@app.put("/bookings/{booking_id}", response_model=schemas.BookingResponse)
def update_booking(booking_id: int, booking_update: schemas.BookingUpdate,
                   service: BookingService = Depends(get_booking_service)):
    return schemas.BookingResponse.model_validate(service.update(booking_id, booking_update))

@app.delete("/bookings/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_booking(booking_id: int, service: BookingService = Depends(get_booking_service)):
    service.delete(booking_id)
    return

# ---------- Guest Booking Endpoint ----------
@app.post("/guest-bookings/", response_model=schemas.BookingResponse, status_code=status.HTTP_201_CREATED)
def create_guest_booking(guest_booking: schemas.GuestBookingCreate,
                         service: GuestBookingService = Depends(get_guest_booking_service)):
    db_booking = service.create(guest_booking)
    logger.info(f"Created guest booking {db_booking!r}")
    return schemas.BookingResponse.model_validate(db_booking)
