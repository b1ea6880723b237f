"""
Validated Namespace Creation

Configuration is validated before a create request is built; an invalid
namespace is never submitted to the control plane.

Author: sbnamespace contributors
"""

from azure.core.exceptions import AzureError

from .client import NamespaceClient, status_code_of
from .exceptions import ConfigurationValidationError, NamespaceTransportError
from .logging_utils import StructuredLogger
from .models import NamespaceDescriptor, NamespaceSpec
from .validation import normalize_sku, validate_namespace_spec


class NamespaceProvisioner:
    """Creates (or updates) namespaces from a declared NamespaceSpec."""

    def __init__(self, client: NamespaceClient):
        self._client = client
        self._logger = StructuredLogger('sbnamespace.namespaces.provisioner')

    async def create(self, spec: NamespaceSpec) -> NamespaceDescriptor:
        """
        Validate and create a namespace.

        Raises:
            ConfigurationValidationError: Carrying every field error; the
                client is not called
            NamespaceTransportError: If the control plane rejects the request
        """
        errors = validate_namespace_spec(spec)
        if errors:
            self._logger.warning(
                f"Refusing to create Service Bus Namespace {spec.name!r}: {len(errors)} validation error(s)",
                operation="create",
                resource_group=spec.resource_group_name,
                name=spec.name,
            )
            raise ConfigurationValidationError(errors)

        self._logger.log_operation("create", spec.resource_group_name, spec.name, location=spec.location)
        try:
            return await self._client.create_or_update(
                spec.resource_group_name,
                spec.name,
                location=spec.location,
                sku=normalize_sku(spec.sku),
                capacity=spec.capacity,
                tags=dict(spec.tags),
            )
        except AzureError as e:
            raise NamespaceTransportError(
                "create", spec.resource_group_name, spec.name, e, status_code=status_code_of(e)
            ) from e
