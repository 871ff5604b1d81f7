"""
Service Bus Initializer Exception Hierarchy

Configuration errors raised by the bootstrap layer and the entity errors raised
by the in-memory administration client.

Author: sbinit Contributors
Date: 2026-01-12
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """
    Base exception for all initializer errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code (e.g., 'EntityNotFound')
        details: Additional context (entity_type, entity_name, etc.)
    """

    error_code: str = "DomainError"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.error_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


# ========== Configuration Errors ==========

class ConfigurationError(DomainError):
    """Base class for bootstrap configuration errors."""
    error_code = "ConfigurationError"


class ServiceBusAdministrationClientNotRegisteredError(ConfigurationError):
    """Raised when reconciliation is requested without an administration client."""
    error_code = "AdministrationClientNotRegistered"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "ServiceBusAdministrationClient not registered in the initializer.")


class ServiceBusContextNotRegisteredError(ConfigurationError):
    """Raised when reconciliation is requested without a service bus context."""
    error_code = "ServiceBusContextNotRegistered"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "ServiceBusContext not registered in the initializer.")


class ContextLoadError(ConfigurationError):
    """Raised when a context import path cannot be resolved."""
    error_code = "ContextLoadError"

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Cannot load service bus context '{path}': {reason}",
            details={"path": path, "reason": reason}
        )


# ========== Entity Errors ==========

class EntityError(DomainError):
    """Base class for entity-related errors."""
    error_code = "EntityError"


class EntityNotFoundError(EntityError):
    """Raised when an entity (queue, topic, subscription, rule) is not found."""
    error_code = "EntityNotFound"

    def __init__(
        self,
        entity_type: str,
        entity_name: str,
        message: Optional[str] = None
    ):
        message = message or f"{entity_type.capitalize()} '{entity_name}' not found"
        details = {"entity_type": entity_type, "entity_name": entity_name}
        super().__init__(message, details=details)


class EntityAlreadyExistsError(EntityError):
    """Raised when attempting to create an entity that already exists."""
    error_code = "EntityAlreadyExists"

    def __init__(
        self,
        entity_type: str,
        entity_name: str,
        message: Optional[str] = None
    ):
        message = message or f"{entity_type.capitalize()} '{entity_name}' already exists"
        details = {"entity_type": entity_type, "entity_name": entity_name}
        super().__init__(message, details=details)
