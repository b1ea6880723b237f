"""
Service Bus Namespace Configuration Validation

Validators for user-supplied namespace configuration. Every validator returns
a (possibly empty) list of ValidationError and never raises, so all problems
can be reported together before any request reaches the control plane.

Author: sbnamespace contributors
"""

from dataclasses import dataclass
from typing import Any, List, Optional, TYPE_CHECKING

from .constants import (
    ALLOWED_CAPACITIES,
    ALLOWED_SKUS,
    ERROR_CAPACITY_NOT_ALLOWED,
    ERROR_CAPACITY_NOT_INTEGER,
    ERROR_SKU_NOT_ALLOWED,
)

if TYPE_CHECKING:
    from .models import NamespaceSpec


@dataclass(frozen=True)
class ValidationError:
    """A single field-level configuration problem."""
    field: str
    message: str
    value: Any = None

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


def validate_capacity(value: Any, field_name: str = "capacity") -> List[ValidationError]:
    """
    Validate a namespace capacity (messaging units).

    Args:
        value: Declared capacity
        field_name: Field the value came from, used for error attribution

    Returns:
        Empty list when valid, otherwise exactly one ValidationError
    """
    # bool is an int subclass but never a meaningful capacity
    if isinstance(value, bool) or not isinstance(value, int):
        return [ValidationError(
            field=field_name,
            message=ERROR_CAPACITY_NOT_INTEGER.format(type=type(value).__name__),
            value=value,
        )]

    if value not in ALLOWED_CAPACITIES:
        return [ValidationError(
            field=field_name,
            message=f"{ERROR_CAPACITY_NOT_ALLOWED} (got {value})",
            value=value,
        )]

    return []


def normalize_sku(value: str) -> Optional[str]:
    """Return the canonical casing of a SKU name, or None if it is unknown."""
    if not isinstance(value, str):
        return None
    for sku in ALLOWED_SKUS:
        if sku.lower() == value.strip().lower():
            return sku
    return None


def validate_sku(value: Any, field_name: str = "sku") -> List[ValidationError]:
    """Validate a SKU name; casing is not significant ("basic" == "Basic")."""
    if normalize_sku(value) is None:
        return [ValidationError(
            field=field_name,
            message=ERROR_SKU_NOT_ALLOWED.format(value=value),
            value=value,
        )]
    return []


def validate_namespace_spec(spec: "NamespaceSpec") -> List[ValidationError]:
    """
    Run every field validator against a declared namespace.

    Errors from all fields are collected; validation never stops at the
    first failure.
    """
    errors: List[ValidationError] = []
    errors.extend(validate_sku(spec.sku, "sku"))
    if spec.capacity is not None:
        errors.extend(validate_capacity(spec.capacity, "capacity"))
    return errors
