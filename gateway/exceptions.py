"""Custom exception classes for the file gateway."""


class GatewayException(Exception):
    """
    Base exception class for all gateway errors.
    """
    pass


class NotFoundError(GatewayException):
    """
    Raised when a file id does not resolve to an existing regular file.
    """
    pass


class StoreFailureError(GatewayException):
    """
    Raised when writing an uploaded payload to the storage root fails.
    """
    pass


class InvalidTicketError(GatewayException):
    """
    Raised when an upload ticket is missing, unknown, expired or issued for another file.
    """
    pass


class PayloadTooLargeError(GatewayException):
    """
    Raised when an upload payload exceeds the configured size ceiling.
    """
    pass


class FileReadError(GatewayException):
    """
    Raised when an existing file cannot be read back from the storage root.
    """
    pass
