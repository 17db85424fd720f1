"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidDurationError(DomainException):
    """Rental duration is zero or negative"""

    pass


class MissingRateError(DomainException):
    """Vehicle rate card has no daily rate"""

    pass


class InvalidAmountError(DomainException):
    """Monetary input is negative or otherwise unusable"""

    pass


class MissingCustomerError(DomainException):
    """Booking record carries no customer reference"""

    pass


class BackendAPIError(DomainException):
    """Hosted backend returned an error or is unavailable"""

    pass


class BookingNotFoundError(DomainException):
    """Requested instant booking does not exist"""

    pass
