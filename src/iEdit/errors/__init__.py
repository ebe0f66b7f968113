"""Custom exception hierarchy for iEdit."""

from __future__ import annotations


class IEditError(Exception):
    """Base class for all custom errors raised by iEdit."""


# --- 3-layer hierarchy ---

class DomainError(IEditError):
    """Base class for domain-level errors."""


class InfrastructureError(IEditError):
    """Base class for infrastructure-level errors."""


class ApplicationError(IEditError):
    """Base class for application-level errors."""


# --- Domain errors ---

class MetadataInvalidError(DomainError):
    """Raised when persisted placement metadata fails schema validation."""


# --- Application errors ---

class ConfigurationError(ApplicationError):
    """Raised when an operation needs configuration or an active image that is missing."""


# --- Infrastructure errors ---

class ImageServiceError(InfrastructureError):
    """Raised by image service clients when a request cannot be served."""


class SettingsError(IEditError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file cannot be parsed or loaded."""


class SettingsValidationError(SettingsError):
    """Raised when settings data fails schema validation."""
