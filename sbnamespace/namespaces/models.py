"""
Service Bus Namespace Models

Pydantic models for namespace descriptors, declared configuration and the
declared state handed over by the provisioning tool.

Author: sbnamespace contributors
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import ATTR_NAME, ATTR_RESOURCE_GROUP, NAMESPACE_RESOURCE_TYPE


class NamespaceDescriptor(BaseModel):
    """
    Remote-side summary of a Service Bus namespace.

    Read from a single list or get call; never cached past one sweep pass.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    location: str
    id: str
    tags: Dict[str, str] = Field(default_factory=dict)
    sku_name: Optional[str] = None
    sku_tier: Optional[str] = None
    capacity: Optional[int] = None
    service_bus_endpoint: Optional[str] = None
    provisioning_state: Optional[str] = None

    @classmethod
    def from_sdk(cls, namespace: Any) -> "NamespaceDescriptor":
        """Build a descriptor from an ``azure.mgmt.servicebus`` SBNamespace."""
        sku = getattr(namespace, "sku", None)
        return cls(
            name=namespace.name,
            location=namespace.location,
            id=namespace.id,
            tags=dict(namespace.tags or {}),
            sku_name=_enum_value(getattr(sku, "name", None)),
            sku_tier=_enum_value(getattr(sku, "tier", None)),
            capacity=getattr(sku, "capacity", None),
            service_bus_endpoint=getattr(namespace, "service_bus_endpoint", None),
            provisioning_state=getattr(namespace, "provisioning_state", None),
        )


def _enum_value(value: Any) -> Optional[str]:
    if value is None:
        return None
    return getattr(value, "value", value)


class NamespaceKeys(BaseModel):
    """Keys and connection strings of a namespace authorization rule."""
    model_config = ConfigDict(frozen=True)

    key_name: Optional[str] = None
    primary_connection_string: Optional[str] = None
    secondary_connection_string: Optional[str] = None
    primary_key: Optional[str] = None
    secondary_key: Optional[str] = None

    @classmethod
    def from_sdk(cls, keys: Any) -> "NamespaceKeys":
        """Build from an ``azure.mgmt.servicebus`` AccessKeys model."""
        return cls(
            key_name=getattr(keys, "key_name", None),
            primary_connection_string=keys.primary_connection_string,
            secondary_connection_string=keys.secondary_connection_string,
            primary_key=keys.primary_key,
            secondary_key=keys.secondary_key,
        )

    def to_attributes(self) -> Dict[str, str]:
        """Render as the ``default_*`` attributes recorded in declared state."""
        return {
            "default_primary_connection_string": self.primary_connection_string or "",
            "default_secondary_connection_string": self.secondary_connection_string or "",
            "default_primary_key": self.primary_key or "",
            "default_secondary_key": self.secondary_key or "",
        }


class NamespaceSpec(BaseModel):
    """
    User-declared namespace configuration.

    ``sku`` and ``capacity`` are checked by
    :func:`sbnamespace.namespaces.validation.validate_namespace_spec`
    rather than by the model, so every problem is reported at once.
    """
    model_config = ConfigDict(extra='forbid')

    name: str = Field(min_length=1)
    resource_group_name: str = Field(min_length=1)
    location: str = Field(min_length=1)
    sku: str = "Standard"
    # Kept uncoerced; validate_capacity rejects bools and floats
    capacity: Optional[Any] = None
    tags: Dict[str, str] = Field(default_factory=dict)


class ExistenceState(str, Enum):
    """Classification of a control-plane lookup."""
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class ExistenceResult:
    """
    Tagged outcome of a lookup.

    ``error`` holds the raw SDK exception for NOT_FOUND and ERROR;
    ``descriptor`` is set only for FOUND.
    """
    state: ExistenceState
    status_code: Optional[int] = None
    error: Optional[BaseException] = None
    descriptor: Optional[NamespaceDescriptor] = None

    @property
    def exists(self) -> bool:
        return self.state is ExistenceState.FOUND

    @property
    def not_found(self) -> bool:
        return self.state is ExistenceState.NOT_FOUND


@dataclass(frozen=True)
class DeclaredResource:
    """A resource as recorded by the declarative tool: flat string attributes."""
    address: str
    type: str
    attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def name(self) -> Optional[str]:
        return self.attributes.get(ATTR_NAME)

    @property
    def resource_group_name(self) -> Optional[str]:
        return self.attributes.get(ATTR_RESOURCE_GROUP)


@dataclass
class ReconciliationState:
    """Declared resources keyed by address, in declaration order."""
    resources: Dict[str, DeclaredResource] = field(default_factory=dict)

    def add(self, resource: DeclaredResource) -> None:
        self.resources[resource.address] = resource

    def get(self, address: str) -> Optional[DeclaredResource]:
        return self.resources.get(address)

    def of_type(self, resource_type: str = NAMESPACE_RESOURCE_TYPE) -> Iterator[DeclaredResource]:
        return (r for r in self.resources.values() if r.type == resource_type)

    def __len__(self) -> int:
        return len(self.resources)


@dataclass
class SweepReport:
    """Outcome of one sweep pass."""
    region: str
    listed: int = 0
    matched: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    already_absent: List[str] = field(default_factory=list)

    @property
    def delete_calls(self) -> int:
        return len(self.deleted) + len(self.already_absent)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "region": self.region,
            "listed": self.listed,
            "matched": list(self.matched),
            "deleted": list(self.deleted),
            "already_absent": list(self.already_absent),
        }
