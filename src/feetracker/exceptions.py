"""Domain exceptions shared across the scanner, detector and store."""


class FeeTrackerError(Exception):
    """Base class for all fee tracker errors."""


class NotFoundError(FeeTrackerError):
    """A required input (block index, date entry) is missing."""


class ValidationError(FeeTrackerError):
    """A document failed schema or cross-field validation on write."""

    def __init__(self, message: str, field: str, value: object, expected: str) -> None:
        super().__init__(message)
        self.field = field
        self.value = value
        self.expected = expected


class StoreError(FeeTrackerError):
    """A store file could not be read or written."""

    def __init__(self, message: str, operation: str, path: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation
        self.path = path


class ExternalServiceError(FeeTrackerError):
    """An upstream service (RPC node) failed."""


class RpcError(ExternalServiceError):
    def __init__(self, message: str, method: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.method = method
        self.status_code = status_code


class EventDecodeError(FeeTrackerError):
    """An event log could not be decoded into a distributor record."""


class BlockFinderError(FeeTrackerError):
    def __init__(self, message: str, operation: str, date: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation
        self.date = date
