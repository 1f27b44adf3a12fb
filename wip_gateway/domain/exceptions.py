"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class RateNotFoundError(DomainException):
    """No hourly rate is effective for the role on the requested date"""

    pass


class ClockAlreadyRunningError(DomainException):
    """User already has an open clock-in entry"""

    pass


class NoActiveClockError(DomainException):
    """Clock-out requested but no clock is running for the matter"""

    pass


class AlertDeliveryError(DomainException):
    """Status alert webhook could not be delivered after all retries"""

    pass
