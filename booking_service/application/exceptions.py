class BookingError(RuntimeError):
    """Base class for failures surfaced by the booking core."""
    pass


class InvalidInput(BookingError):
    """Raised when booking or availability input is malformed or incomplete."""
    pass


class UnknownService(InvalidInput):
    """Raised when a requested service name is not in the catalog."""
    pass


class PastDate(InvalidInput):
    """Raised when the requested calendar day is before today."""
    pass


class SlotConflict(BookingError):
    """Raised when the requested interval overlaps an existing calendar event."""
    pass


class IntegrationError(BookingError):
    """Raised by remote adapters on transport, auth or contract failures."""
    pass


class CalendarError(IntegrationError):
    pass


class NotificationError(IntegrationError):
    pass


class EmailError(IntegrationError):
    pass


class UnexpectedError(BookingError):
    """Raised when orchestration fails before a success response is built."""
    pass
