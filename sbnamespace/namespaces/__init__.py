"""Service Bus namespace lifecycle: identifiers, validation, checks and sweeps."""

from .client import AzureNamespaceClient, NamespaceClient, build_client, classify_error, classify_response
from .destroy import DestroyVerifier
from .existence import ExistenceChecker, check_default_key_attributes
from .models import (
    DeclaredResource,
    ExistenceResult,
    ExistenceState,
    NamespaceDescriptor,
    NamespaceKeys,
    NamespaceSpec,
    ReconciliationState,
    SweepReport,
)
from .provisioner import NamespaceProvisioner
from .resource_id import ResourceIdentifier, parse_resource_id
from .state import load_state, parse_state
from .sweeper import SweepEngine, SweepPolicy, SweeperRegistry, default_registry
from .validation import ValidationError, validate_capacity, validate_namespace_spec, validate_sku

__all__ = [
    "AzureNamespaceClient",
    "NamespaceClient",
    "build_client",
    "classify_error",
    "classify_response",
    "DestroyVerifier",
    "ExistenceChecker",
    "check_default_key_attributes",
    "DeclaredResource",
    "ExistenceResult",
    "ExistenceState",
    "NamespaceDescriptor",
    "NamespaceKeys",
    "NamespaceSpec",
    "ReconciliationState",
    "SweepReport",
    "NamespaceProvisioner",
    "ResourceIdentifier",
    "parse_resource_id",
    "load_state",
    "parse_state",
    "SweepEngine",
    "SweepPolicy",
    "SweeperRegistry",
    "default_registry",
    "ValidationError",
    "validate_capacity",
    "validate_namespace_spec",
    "validate_sku",
]
