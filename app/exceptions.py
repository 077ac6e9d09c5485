"""
exceptions.py
-------------
Errors raised by the service layer. Each one knows the HTTP status it
maps to and a ``reasons`` dict (field -> explanation) for the response body.
"""


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message, reasons=None):
        super().__init__(message)
        self.message = message
        self.reasons = reasons or {}


class NotFoundError(ServiceError):
    status_code = 404

    def __init__(self, resource, key, value):
        super().__init__(f"No {resource} with the {key} {value} was found!")
        self.resource = resource


class ConflictError(ServiceError):
    status_code = 409


class UniqueEmailError(ConflictError):
    def __init__(self):
        super().__init__(
            "Unique Email Violation",
            {"email": "That email is already used, please use a unique email"},
        )


class UniquePhoneError(ConflictError):
    def __init__(self):
        super().__init__(
            "Unique PhoneNumber Violation",
            {"phone_number": "That phone number is already used, please use a unique phone number"},
        )


class IdMismatchError(ConflictError):
    def __init__(self, resource):
        super().__init__(
            f"{resource} details supplied in request body conflict with another {resource}",
            {"id": f"The {resource} ID in the request body must match that of the {resource} being updated"},
        )


class CustomerNotExistError(ConflictError):
    def __init__(self, customer_id):
        super().__init__(
            "Customer does not exist",
            {"customer": f"Customer {customer_id} does not exist, cannot create booking"},
        )


class HotelNotExistError(ConflictError):
    def __init__(self, hotel_id):
        super().__init__(
            "Hotel does not exist",
            {"hotel": f"Hotel {hotel_id} does not exist, cannot create booking"},
        )
