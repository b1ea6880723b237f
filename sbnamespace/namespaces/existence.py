"""
Service Bus Namespace Existence Checks

Looks a namespace up on the control plane and classifies the outcome. The
checker reports Found / NotFound and leaves their meaning to the caller:
NotFound is success when verifying a destroy and failure when asserting
existence.

Author: sbnamespace contributors
"""

import re
from typing import Dict, List, Mapping

from azure.core.exceptions import AzureError

from .client import NamespaceClient, classify_error, classify_response, status_code_of
from .constants import ATTR_RESOURCE_GROUP, DEFAULT_AUTHORIZATION_RULE, DEFAULT_KEY_ATTRIBUTE_PATTERNS
from .exceptions import (
    AttributeMismatchError,
    MissingAttributeError,
    NamespaceNotFoundError,
    NamespaceTransportError,
    ResourceNotDeclaredError,
)
from .logging_utils import StructuredLogger
from .models import DeclaredResource, ExistenceResult, ExistenceState, ReconciliationState


class ExistenceChecker:
    """
    Issues one ``get`` per check. No retries at this layer.

    Args:
        client: Control-plane client for this run
    """

    def __init__(self, client: NamespaceClient):
        self._client = client
        self._logger = StructuredLogger('sbnamespace.namespaces.existence')

    async def check(self, resource_group: str, name: str) -> ExistenceResult:
        """
        Look a namespace up.

        Returns:
            ExistenceResult in state FOUND or NOT_FOUND. A NOT_FOUND result
            keeps the raw SDK error on ``error``.

        Raises:
            NamespaceTransportError: For any failure other than not-found
        """
        try:
            descriptor = await self._client.get(resource_group, name)
        except AzureError as e:
            result = classify_error(e)
        else:
            result = classify_response(descriptor)

        self._logger.debug(
            f"Lookup of {resource_group}/{name}: {result.state.value}",
            operation="namespaces.get",
            resource_group=resource_group,
            name=name,
            status_code=result.status_code,
        )

        if result.state is ExistenceState.ERROR:
            raise NamespaceTransportError(
                "get", resource_group, name, result.error, status_code=result.status_code
            ) from result.error

        return result

    async def assert_exists(self, resource: DeclaredResource) -> ExistenceResult:
        """
        Assert a declared namespace exists remotely.

        Raises:
            MissingAttributeError: If the resource group is not recorded
            NamespaceNotFoundError: If the control plane reports it absent
            NamespaceTransportError: For any other remote failure
        """
        name = resource.name or ""
        resource_group = resource.resource_group_name
        if resource_group is None:
            raise MissingAttributeError(resource.address, ATTR_RESOURCE_GROUP, name=name)

        result = await self.check(resource_group, name)
        if result.not_found:
            raise NamespaceNotFoundError(resource_group, name)

        self._logger.log_operation("exists", resource_group, name)
        return result

    async def assert_declared_exists(
        self,
        state: ReconciliationState,
        address: str,
        default_keys: bool = False,
    ) -> ExistenceResult:
        """
        Assert the namespace recorded at ``address`` exists remotely.

        With ``default_keys`` the recorded ``default_*`` attributes must also
        hold connection strings and keys.

        Raises:
            ResourceNotDeclaredError: If ``address`` is not in the state
            AttributeMismatchError: If a default key attribute is wrong
        """
        resource = state.get(address)
        if resource is None:
            raise ResourceNotDeclaredError(address)

        result = await self.assert_exists(resource)
        if default_keys:
            check_default_key_attributes(address, resource.attributes)
        return result

    async def read_default_keys(
        self, resource_group: str, name: str, rule: str = DEFAULT_AUTHORIZATION_RULE
    ) -> Dict[str, str]:
        """
        Fetch the keys of an authorization rule as ``default_*`` attributes.

        Raises:
            NamespaceTransportError: If the keys cannot be read
        """
        try:
            keys = await self._client.list_keys(resource_group, name, rule)
        except AzureError as e:
            raise NamespaceTransportError(
                "list_keys", resource_group, name, e, status_code=status_code_of(e)
            ) from e
        return keys.to_attributes()


def check_default_key_attributes(
    address: str,
    attributes: Mapping[str, str],
    patterns: Dict[str, str] = DEFAULT_KEY_ATTRIBUTE_PATTERNS,
) -> None:
    """
    Confirm the default authorization-rule keys were read into state.

    Raises:
        AttributeMismatchError: Listing every attribute that is missing or
            does not match its pattern
    """
    mismatched: List[str] = []
    for attribute, pattern in patterns.items():
        value = attributes.get(attribute)
        if value is None or not re.search(pattern, value):
            mismatched.append(attribute)

    if mismatched:
        raise AttributeMismatchError(address, mismatched)
