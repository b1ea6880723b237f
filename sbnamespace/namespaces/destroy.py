"""
Service Bus Namespace Destroy Verification

Confirms every namespace in the declared state is gone from the control plane.

Author: sbnamespace contributors
"""

from typing import List

from .constants import ATTR_NAME, ATTR_RESOURCE_GROUP, NAMESPACE_RESOURCE_TYPE
from .exceptions import (
    DestroyVerificationError,
    MissingAttributeError,
    NamespaceStillExistsError,
    NamespaceTransportError,
)
from .existence import ExistenceChecker
from .logging_utils import CorrelationContext, StructuredLogger
from .models import ReconciliationState


class DestroyVerifier:
    """
    Verifies declared namespaces were destroyed.

    A namespace counts as destroyed only when the control plane answers
    not-found. Any other failure leaves its absence unproven and fails the
    verification.
    """

    def __init__(self, checker: ExistenceChecker, resource_type: str = NAMESPACE_RESOURCE_TYPE):
        self._checker = checker
        self._resource_type = resource_type
        self._logger = StructuredLogger('sbnamespace.namespaces.destroy')

    async def verify(self, state: ReconciliationState) -> List[str]:
        """
        Check each declared namespace of this type.

        Returns:
            Addresses verified absent, in declaration order

        Raises:
            NamespaceStillExistsError: A namespace is still present
            DestroyVerificationError: A lookup failed for another reason
            MissingAttributeError: Declared state cannot address a namespace
        """
        CorrelationContext.new_correlation_id()
        verified: List[str] = []

        for resource in state.of_type(self._resource_type):
            name = resource.name
            resource_group = resource.resource_group_name
            if not name:
                raise MissingAttributeError(resource.address, ATTR_NAME)
            if not resource_group:
                raise MissingAttributeError(resource.address, ATTR_RESOURCE_GROUP, name=name)

            try:
                result = await self._checker.check(resource_group, name)
            except NamespaceTransportError as e:
                self._logger.log_error(
                    "verify_destroyed",
                    type(e.raw_error).__name__,
                    str(e.raw_error),
                    resource_group=resource_group,
                    name=name,
                    status_code=e.status_code,
                )
                raise DestroyVerificationError(resource_group, name, e.raw_error) from e

            if result.exists:
                raise NamespaceStillExistsError(resource_group, name, response=result.descriptor)

            self._logger.log_operation("destroyed", resource_group, name, address=resource.address)
            verified.append(resource.address)

        return verified
