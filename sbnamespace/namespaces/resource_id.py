"""
Azure Resource Identifier Parsing

Decomposes ARM identifiers such as
``/subscriptions/{id}/resourceGroups/{rg}/providers/Microsoft.ServiceBus/namespaces/{name}``
into subscription, resource group, provider and typed path segments.

Author: sbnamespace contributors
"""

from types import MappingProxyType
from typing import Dict, Mapping, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import NAMESPACES_SEGMENT
from .exceptions import ResourceIdParseError


class ResourceIdentifier(BaseModel):
    """
    Parsed ARM resource identifier.

    ``path`` maps resource-type segment names to instance names, in the order
    they appear in the identifier, with the subscription, resource group and
    provider segments removed. It is a read-only view.
    """
    model_config = ConfigDict(frozen=True)

    subscription_id: str
    resource_group: str
    provider: Optional[str] = None
    path: Mapping[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("path")
    @classmethod
    def freeze_path(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(v))

    @property
    def namespace_name(self) -> Optional[str]:
        """Name of the Service Bus namespace this identifier points at, if any."""
        return self.path.get(NAMESPACES_SEGMENT)


def parse_resource_id(raw_id: str) -> ResourceIdentifier:
    """
    Parse an ARM resource identifier.

    Args:
        raw_id: Identifier as returned by the control plane. A full
            management URL is accepted; only its path is used.

    Returns:
        ResourceIdentifier

    Raises:
        ResourceIdParseError: If the identifier does not decompose into
            well-formed key/value pairs, or lacks a subscription or
            resource group.
    """
    if not isinstance(raw_id, str) or not raw_id.strip():
        raise ResourceIdParseError(str(raw_id), "identifier is empty")

    parsed = urlparse(raw_id.strip())
    if parsed.scheme:
        path = parsed.path
    elif raw_id.strip().startswith("/"):
        path = raw_id.strip()
    else:
        raise ResourceIdParseError(raw_id, "identifier must be an absolute path")

    path = path.strip().strip("/")
    components = path.split("/")

    if len(components) % 2 != 0:
        raise ResourceIdParseError(
            raw_id, f"the number of path segments is not divisible by 2 in {path!r}"
        )

    subscription_id: Optional[str] = None
    segments: Dict[str, str] = {}

    for index in range(0, len(components), 2):
        key = components[index]
        value = components[index + 1]

        if not key or not value:
            raise ResourceIdParseError(
                raw_id, f"key/value cannot be empty strings (key: {key!r}, value: {value!r})"
            )

        # Only the first "subscriptions" pair is the subscription; Service Bus
        # topic subscriptions reuse the same key further down the path.
        if key == "subscriptions" and subscription_id is None:
            subscription_id = value
        else:
            segments[key] = value

    if subscription_id is None:
        raise ResourceIdParseError(raw_id, f"no subscription ID found in {path!r}")

    # Some APIs return the lower-cased form
    if "resourceGroups" in segments:
        resource_group = segments.pop("resourceGroups")
    elif "resourcegroups" in segments:
        resource_group = segments.pop("resourcegroups")
    else:
        raise ResourceIdParseError(raw_id, f"no resource group name found in {path!r}")

    provider = segments.pop("providers", None)

    return ResourceIdentifier(
        subscription_id=subscription_id,
        resource_group=resource_group,
        provider=provider,
        path=segments,
    )
