class StoreUnavailableError(RuntimeError):
    """Raised when the tabular store cannot be read or written (network, quota, credentials)."""
    pass


class BookingNotFoundError(LookupError):
    """Raised when a record id or row number does not address an existing booking."""
    pass


class InvariantViolationError(ValueError):
    """Raised when a write would break a stored-data invariant."""
    pass
