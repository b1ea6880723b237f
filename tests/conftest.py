"""
Shared fixtures: an in-memory control plane standing in for the Azure
management API. It raises the same azure-core exceptions the SDK raises.
"""

from typing import Dict, List, Optional, Tuple

import pytest
from azure.core.exceptions import HttpResponseError, ResourceNotFoundError

from sbnamespace.namespaces.models import NamespaceDescriptor, NamespaceKeys

SUBSCRIPTION_ID = "00000000-0000-0000-0000-000000000000"


def namespace_id(resource_group: str, name: str, subscription_id: str = SUBSCRIPTION_ID) -> str:
    return (
        f"/subscriptions/{subscription_id}/resourceGroups/{resource_group}"
        f"/providers/Microsoft.ServiceBus/namespaces/{name}"
    )


def http_error(status_code: int, message: str = "request failed") -> HttpResponseError:
    error = HttpResponseError(message=message)
    error.status_code = status_code
    return error


class FakeNamespaceClient:
    """In-memory NamespaceClient recording every call."""

    def __init__(self):
        self.namespaces: Dict[Tuple[str, str], NamespaceDescriptor] = {}
        self.get_errors: Dict[Tuple[str, str], Exception] = {}
        self.delete_errors: Dict[Tuple[str, str], Exception] = {}
        self.list_error: Optional[Exception] = None
        self.calls: List[Tuple[str, ...]] = []

    def add(
        self,
        name: str,
        location: str = "westeurope",
        resource_group: str = "acctestRG-1",
        tags: Optional[Dict[str, str]] = None,
        resource_id: Optional[str] = None,
    ) -> NamespaceDescriptor:
        descriptor = NamespaceDescriptor(
            name=name,
            location=location,
            id=resource_id or namespace_id(resource_group, name),
            tags=tags or {},
            sku_name="Standard",
            sku_tier="Standard",
            service_bus_endpoint=f"https://{name}.servicebus.windows.net:443/",
            provisioning_state="Succeeded",
        )
        self.namespaces[(resource_group, name)] = descriptor
        return descriptor

    async def get(self, resource_group: str, name: str) -> NamespaceDescriptor:
        self.calls.append(("get", resource_group, name))
        if (resource_group, name) in self.get_errors:
            raise self.get_errors[(resource_group, name)]
        try:
            return self.namespaces[(resource_group, name)]
        except KeyError:
            raise ResourceNotFoundError(f"Namespace {name} not found") from None

    async def list_by_subscription(self):
        self.calls.append(("list",))
        if self.list_error is not None:
            raise self.list_error
        for descriptor in list(self.namespaces.values()):
            yield descriptor

    async def delete(self, resource_group: str, name: str) -> None:
        self.calls.append(("delete", resource_group, name))
        if (resource_group, name) in self.delete_errors:
            raise self.delete_errors[(resource_group, name)]
        if self.namespaces.pop((resource_group, name), None) is None:
            raise ResourceNotFoundError(f"Namespace {name} not found")

    async def create_or_update(self, resource_group, name, location, sku, capacity=None, tags=None):
        self.calls.append(("create", resource_group, name))
        descriptor = self.add(name, location=location, resource_group=resource_group, tags=tags)
        descriptor = descriptor.model_copy(update={"sku_name": sku, "sku_tier": sku, "capacity": capacity})
        self.namespaces[(resource_group, name)] = descriptor
        return descriptor

    async def list_keys(self, resource_group, name, rule="RootManageSharedAccessKey"):
        self.calls.append(("list_keys", resource_group, name))
        await self.get(resource_group, name)
        endpoint = f"Endpoint=sb://{name}.servicebus.windows.net/;SharedAccessKeyName={rule}"
        return NamespaceKeys(
            key_name=rule,
            primary_connection_string=f"{endpoint};SharedAccessKey=primary",
            secondary_connection_string=f"{endpoint};SharedAccessKey=secondary",
            primary_key="primary",
            secondary_key="secondary",
        )

    def delete_calls(self) -> List[str]:
        return [call[2] for call in self.calls if call[0] == "delete"]


@pytest.fixture
def fake_client():
    """Create a fresh in-memory control plane for each test."""
    return FakeNamespaceClient()


@pytest.fixture
def make_http_error():
    """Factory for HttpResponseError with a given status code."""
    return http_error


@pytest.fixture
def make_namespace_id():
    """Factory for ARM namespace identifiers."""
    return namespace_id
