"""
Service Bus Namespace Exception Hierarchy

Exception types for namespace lifecycle operations with error codes and context.

Author: sbnamespace contributors
"""

from typing import Optional, Dict, Any, List, TYPE_CHECKING

from .constants import ERROR_NAMESPACE_NOT_FOUND, ERROR_NAMESPACE_STILL_EXISTS

if TYPE_CHECKING:
    from .validation import ValidationError


class NamespaceError(Exception):
    """
    Base exception for all namespace lifecycle errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code (e.g., 'NamespaceNotFound')
        details: Additional context (resource_group, name, status_code, etc.)
    """

    error_code: str = "NamespaceError"

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
        """Convert exception to dictionary format for reports."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


# ========== Identifier Errors ==========

class ResourceIdParseError(NamespaceError):
    """Raised when a resource identifier cannot be decomposed into path pairs."""
    error_code = "InvalidResourceId"

    def __init__(self, resource_id: str, reason: str):
        message = f"Cannot parse Azure resource ID {resource_id!r}: {reason}"
        super().__init__(message, details={"resource_id": resource_id, "reason": reason})
        self.resource_id = resource_id
        self.reason = reason


# ========== Remote Errors ==========

class NamespaceTransportError(NamespaceError):
    """
    Raised when the control plane fails for a reason other than not-found.

    Auth failures, throttling and network errors all land here. The raw SDK
    error is kept on ``raw_error`` and chained as ``__cause__``.
    """
    error_code = "TransportError"

    def __init__(
        self,
        operation: str,
        resource_group: Optional[str],
        name: Optional[str],
        raw_error: BaseException,
        status_code: Optional[int] = None,
    ):
        target = f"Service Bus Namespace {name!r} (resource group: {resource_group!r})" if name else "Service Bus Namespaces"
        message = f"Error during {operation} on {target}: {raw_error}"
        details = {
            "operation": operation,
            "resource_group": resource_group,
            "name": name,
            "status_code": status_code,
        }
        super().__init__(message, details=details)
        self.raw_error = raw_error
        self.status_code = status_code


class NamespaceNotFoundError(NamespaceError):
    """Raised when a namespace is expected to exist but the control plane reports it absent."""
    error_code = "NamespaceNotFound"

    def __init__(self, resource_group: str, name: str):
        message = "Bad: " + ERROR_NAMESPACE_NOT_FOUND.format(name=name, resource_group=resource_group)
        super().__init__(message, details={"resource_group": resource_group, "name": name})


class NamespaceStillExistsError(NamespaceError):
    """Raised when a namespace declared destroyed is still present remotely."""
    error_code = "NamespaceStillExists"

    def __init__(self, resource_group: str, name: str, response: Any = None):
        message = ERROR_NAMESPACE_STILL_EXISTS.format(name=name, resource_group=resource_group) + f":\n{response!r}"
        super().__init__(message, details={"resource_group": resource_group, "name": name})
        self.response = response


class DestroyVerificationError(NamespaceError):
    """Raised when absence of a namespace cannot be proven."""
    error_code = "DestroyVerificationFailed"

    def __init__(self, resource_group: str, name: str, raw_error: BaseException):
        message = (
            f"Could not verify Service Bus Namespace {name!r} (resource group: {resource_group!r}) "
            f"was destroyed: {raw_error}"
        )
        super().__init__(message, details={"resource_group": resource_group, "name": name})
        self.raw_error = raw_error


# ========== Declared State Errors ==========

class MissingAttributeError(NamespaceError):
    """Raised when declared state lacks an attribute needed to address the namespace."""
    error_code = "MissingAttribute"

    def __init__(self, address: str, attribute: str, name: Optional[str] = None):
        message = f"Bad: no {attribute} found in state for Service Bus Namespace: {name or address}"
        super().__init__(message, details={"address": address, "attribute": attribute})


class ResourceNotDeclaredError(NamespaceError):
    """Raised when an address is not present in the declared state."""
    error_code = "ResourceNotDeclared"

    def __init__(self, address: str):
        super().__init__(f"Not found: {address}", details={"address": address})


class AttributeMismatchError(NamespaceError):
    """Raised when declared attributes do not match their expected shape."""
    error_code = "AttributeMismatch"

    def __init__(self, address: str, attributes: List[str]):
        message = f"{address}: attributes do not match expected values: {', '.join(attributes)}"
        super().__init__(message, details={"address": address, "attributes": attributes})
        self.attributes = attributes


# ========== Validation Errors ==========

class ConfigurationValidationError(NamespaceError):
    """Raised when a create request is refused because configuration is invalid."""
    error_code = "InvalidConfiguration"

    def __init__(self, errors: List["ValidationError"]):
        lines = "\n".join(f"  - {e.field}: {e.message}" for e in errors)
        message = f"Service Bus Namespace configuration is invalid:\n{lines}"
        details = {"errors": [{"field": e.field, "message": e.message} for e in errors]}
        super().__init__(message, details=details)
        self.errors = list(errors)


# ========== Sweep Errors ==========

class SweepError(NamespaceError):
    """Base class for sweep failures."""
    error_code = "SweepError"


class SweepListError(SweepError):
    """Raised when namespaces cannot be listed; nothing was deleted."""
    error_code = "SweepListFailed"

    def __init__(self, raw_error: BaseException):
        super().__init__(f"Error listing Service Bus Namespaces: {raw_error}")
        self.raw_error = raw_error


class SweepDeleteError(SweepError):
    """Raised when a delete fails for a reason other than not-found."""
    error_code = "SweepDeleteFailed"

    def __init__(self, resource_group: str, name: str, raw_error: BaseException):
        message = (
            f"Error deleting Service Bus Namespace {name!r} "
            f"(resource group: {resource_group!r}): {raw_error}"
        )
        super().__init__(message, details={"resource_group": resource_group, "name": name})
        self.raw_error = raw_error


class UnknownSweeperError(SweepError):
    """Raised when a sweeper name is not registered."""
    error_code = "UnknownSweeper"

    def __init__(self, name: str, available: List[str]):
        message = f"No sweeper registered as {name!r} (available: {', '.join(available) or 'none'})"
        super().__init__(message, details={"name": name, "available": available})
