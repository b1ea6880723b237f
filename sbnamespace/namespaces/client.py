"""
Service Bus Namespace Control-Plane Client

Thin async adapter over ``azure.mgmt.servicebus.aio`` exposing only the calls
the lifecycle components consume, plus the single classifier that turns a
lookup outcome into Found / NotFound / Error.

Author: sbnamespace contributors
"""

from typing import AsyncIterator, Dict, Optional, Protocol

from azure.core.exceptions import ResourceNotFoundError
from azure.identity.aio import DefaultAzureCredential
from azure.mgmt.servicebus.aio import ServiceBusManagementClient
from azure.mgmt.servicebus.models import SBNamespace, SBSku

from .constants import DEFAULT_AUTHORIZATION_RULE, HTTP_NOT_FOUND
from .logging_utils import StructuredLogger, track_operation_time
from .models import ExistenceResult, ExistenceState, NamespaceDescriptor, NamespaceKeys

_logger = StructuredLogger('sbnamespace.namespaces.client')


class NamespaceClient(Protocol):
    """Calls the lifecycle components make against the control plane."""

    async def get(self, resource_group: str, name: str) -> NamespaceDescriptor:
        ...

    def list_by_subscription(self) -> AsyncIterator[NamespaceDescriptor]:
        ...

    async def delete(self, resource_group: str, name: str) -> None:
        ...

    async def create_or_update(
        self,
        resource_group: str,
        name: str,
        location: str,
        sku: str,
        capacity: Optional[int] = None,
        tags: Optional[Dict[str, str]] = None,
    ) -> NamespaceDescriptor:
        ...

    async def list_keys(
        self, resource_group: str, name: str, rule: str = DEFAULT_AUTHORIZATION_RULE
    ) -> NamespaceKeys:
        ...


# ========== Classification ==========

def status_code_of(error: BaseException) -> Optional[int]:
    """HTTP status code carried by an SDK error, if any."""
    status = getattr(error, "status_code", None)
    if status is None:
        response = getattr(error, "response", None)
        status = getattr(response, "status_code", None)
    return status


def is_not_found(error: BaseException) -> bool:
    """True when an SDK error means the resource is absent."""
    return isinstance(error, ResourceNotFoundError) or status_code_of(error) == HTTP_NOT_FOUND


def classify_error(error: BaseException) -> ExistenceResult:
    """Classify a failed lookup as NOT_FOUND or ERROR."""
    state = ExistenceState.NOT_FOUND if is_not_found(error) else ExistenceState.ERROR
    return ExistenceResult(state=state, status_code=status_code_of(error), error=error)


def classify_response(descriptor: NamespaceDescriptor) -> ExistenceResult:
    """Classify a successful lookup."""
    return ExistenceResult(state=ExistenceState.FOUND, status_code=200, descriptor=descriptor)


# ========== Azure implementation ==========

class AzureNamespaceClient:
    """
    NamespaceClient backed by the Azure management SDK.

    Long-running operations (delete, create) are issued and then awaited to
    completion inside a single call. Retries and transport policies belong to
    azure-core.

    Use as an async context manager, or call :meth:`close`.
    """

    def __init__(self, subscription_id: str, credential=None):
        if not subscription_id:
            raise ValueError("subscription_id is required to reach the control plane")
        self._owns_credential = credential is None
        self._credential = credential or DefaultAzureCredential()
        self._client = ServiceBusManagementClient(self._credential, subscription_id)
        self.subscription_id = subscription_id

    async def __aenter__(self) -> "AzureNamespaceClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.close()
        if self._owns_credential:
            await self._credential.close()

    @track_operation_time(_logger, "namespaces.get")
    async def get(self, resource_group: str, name: str) -> NamespaceDescriptor:
        namespace = await self._client.namespaces.get(resource_group, name)
        return NamespaceDescriptor.from_sdk(namespace)

    async def list_by_subscription(self) -> AsyncIterator[NamespaceDescriptor]:
        # AsyncItemPaged follows next links, so iterating drains every page
        async for namespace in self._client.namespaces.list():
            yield NamespaceDescriptor.from_sdk(namespace)

    @track_operation_time(_logger, "namespaces.delete")
    async def delete(self, resource_group: str, name: str) -> None:
        poller = await self._client.namespaces.begin_delete(resource_group, name)
        await poller.result()

    @track_operation_time(_logger, "namespaces.create_or_update")
    async def create_or_update(
        self,
        resource_group: str,
        name: str,
        location: str,
        sku: str,
        capacity: Optional[int] = None,
        tags: Optional[Dict[str, str]] = None,
    ) -> NamespaceDescriptor:
        parameters = SBNamespace(
            location=location,
            sku=SBSku(name=sku, tier=sku, capacity=capacity),
            tags=tags or None,
        )
        poller = await self._client.namespaces.begin_create_or_update(resource_group, name, parameters)
        namespace = await poller.result()
        return NamespaceDescriptor.from_sdk(namespace)

    @track_operation_time(_logger, "namespaces.list_keys")
    async def list_keys(
        self, resource_group: str, name: str, rule: str = DEFAULT_AUTHORIZATION_RULE
    ) -> NamespaceKeys:
        keys = await self._client.namespaces.list_keys(resource_group, name, rule)
        return NamespaceKeys.from_sdk(keys)


def build_client(subscription_id: Optional[str], credential=None) -> AzureNamespaceClient:
    """
    Create a client for one run.

    Each sweep or verification gets its own client; nothing is shared
    process-wide.
    """
    if not subscription_id:
        raise ValueError(
            "No subscription configured: set SBNAMESPACE_SUBSCRIPTION_ID or ARM_SUBSCRIPTION_ID"
        )
    return AzureNamespaceClient(subscription_id, credential=credential)


__all__ = [
    "AzureNamespaceClient",
    "NamespaceClient",
    "build_client",
    "classify_error",
    "classify_response",
    "is_not_found",
    "status_code_of",
]
