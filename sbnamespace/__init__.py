"""
sbnamespace: Azure Service Bus namespace lifecycle tooling

Existence and destroy checks, configuration validation and test-leftover
sweeps for Service Bus namespaces.
"""

__version__ = "0.1.0"

from .namespaces import SweepEngine, ExistenceChecker, DestroyVerifier, parse_resource_id, validate_capacity

__all__ = [
    "SweepEngine",
    "ExistenceChecker",
    "DestroyVerifier",
    "parse_resource_id",
    "validate_capacity",
    "__version__",
]
