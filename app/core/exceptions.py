"""Custom exceptions for the ClientHub pipeline service."""


class PortalException(Exception):
    """Base exception for the portal back end."""

    error_code = "portal_error"


class ValidationError(PortalException):
    """Raised when request input fails a business rule."""

    error_code = "validation_error"


class NotFoundError(PortalException):
    """Raised when a client, return, product or stage does not exist."""

    error_code = "not_found"


class InvalidStageError(PortalException):
    """Raised when a target stage is not valid for the record's pipeline."""

    error_code = "invalid_stage"


class ConflictError(PortalException):
    """Raised when an operation would orphan dependent records."""

    error_code = "conflict"


class PersistenceError(PortalException):
    """Raised when the underlying storage write fails."""

    error_code = "persistence_error"


class ConfigurationError(PortalException):
    """Raised when configuration is invalid."""

    error_code = "configuration_error"


class AuthenticationError(PortalException):
    """Raised when authentication fails."""

    error_code = "authentication_error"


class AuthorizationError(PortalException):
    """Raised when an authenticated caller lacks a required scope."""

    error_code = "authorization_error"
