class MissingServiceContext(RuntimeError):
    """Raised when no service identity can be resolved; the flow must redirect to service selection."""
    pass


class AvailabilityFetchError(RuntimeError):
    """Raised when the availability backend fails (network errors, bad status, bad payload)."""
    pass


class CartAddError(RuntimeError):
    """Raised when the cart collaborator rejects an item or is unreachable."""
    pass


class PersistedRecordParseError(ValueError):
    """Raised when a persisted handoff record is absent or malformed."""
    pass


class BookingSubmissionError(RuntimeError):
    """Raised when the booking-submission collaborator fails."""
    pass


class InvalidPaymentType(ValueError):
    pass


class InvalidDestination(ValueError):
    pass
