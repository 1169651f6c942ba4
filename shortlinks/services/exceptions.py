"""Exceptions for the short links service layer.

This module contains the exception hierarchy for the service layer,
providing domain-specific exceptions that abstract underlying implementation details.
"""


class ServiceError(Exception):
    """Base exception for all service-level errors."""
    pass


class LinkError(ServiceError):
    """Base exception for link-related errors."""
    pass


class LinkValidationError(LinkError):
    """Link input failed validation checks."""
    pass


class InvalidUrlError(LinkValidationError):
    """The target URL is missing or not an absolute http(s) URL."""
    pass


class InvalidCodeError(LinkValidationError):
    """The requested code is not 6-8 alphanumeric characters."""
    pass


class LinkCreationError(LinkError):
    """Error occurred during link creation."""
    pass


class CodeConflictError(LinkCreationError):
    """The code is already in use."""
    pass


class CodeGenerationExhaustedError(LinkCreationError):
    """No free code was found within the allowed number of attempts."""
    pass


class LinkNotFoundError(LinkError):
    """No link with the specified code exists."""
    pass


class StoreError(LinkError):
    """The underlying database operation failed."""
    pass
