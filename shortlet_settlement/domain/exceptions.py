"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class NotFoundError(DomainException):
    """Referenced payment does not exist"""

    pass


class PreconditionFailedError(DomainException):
    """Operation attempted on a payment in the wrong state"""

    pass


class ConflictError(DomainException):
    """Operation already applied (e.g. payout already processed)"""

    pass


class InvalidArgumentError(DomainException, ValueError):
    """Malformed input such as an unknown dispute tier or a negative amount"""

    pass


class CurrencyMismatchError(InvalidArgumentError):
    """Money values in different currencies were combined"""

    pass


class NotificationError(DomainException):
    """Email service rejected the notification or is unavailable"""

    pass
