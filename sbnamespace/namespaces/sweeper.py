"""
Service Bus Namespace Sweeper

Deletes namespaces left behind by acceptance-test runs. Every namespace in
the subscription is listed, filtered by region and by the test naming
convention, and deleted one at a time. Already-deleted namespaces are
tolerated, so sweeps can be re-run or run concurrently.

Author: sbnamespace contributors
"""

from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Mapping, Optional, Sequence

from azure.core.exceptions import AzureError

from .client import NamespaceClient, is_not_found
from .constants import DEFAULT_TEST_NAME_PREFIXES, NAMESPACE_SWEEPER_NAME, NAMESPACES_SEGMENT
from .exceptions import ResourceIdParseError, SweepDeleteError, SweepListError, UnknownSweeperError
from .logging_utils import CorrelationContext, StructuredLogger
from .models import NamespaceDescriptor, SweepReport
from .resource_id import parse_resource_id


def normalize_location(location: str) -> str:
    """'West Europe' and 'westeurope' name the same region."""
    return location.replace(" ", "").lower()


@dataclass(frozen=True)
class SweepPolicy:
    """Decides whether a live namespace is a test leftover that may be deleted."""
    name_prefixes: Sequence[str] = DEFAULT_TEST_NAME_PREFIXES
    required_tags: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config) -> "SweepPolicy":
        """Build from a :class:`sbnamespace.core.config_manager.SweeperConfig`."""
        return cls(
            name_prefixes=tuple(config.name_prefixes),
            required_tags=dict(config.required_tags),
        )

    def should_sweep(self, descriptor: NamespaceDescriptor, region: str) -> bool:
        lowered = descriptor.name.lower()
        if not any(lowered.startswith(prefix.lower()) for prefix in self.name_prefixes):
            return False

        if normalize_location(descriptor.location) != normalize_location(region):
            return False

        for key, value in self.required_tags.items():
            if descriptor.tags.get(key) != value:
                return False

        return True


class SweepEngine:
    """
    Sweeps Service Bus namespaces for one region.

    Deletes run sequentially in list order; each delete completes before the
    next namespace is touched. The first failure other than not-found stops
    the sweep.
    """

    def __init__(self, client: NamespaceClient, policy: Optional[SweepPolicy] = None):
        self._client = client
        self._policy = policy or SweepPolicy()
        self._logger = StructuredLogger('sbnamespace.namespaces.sweeper')

    async def sweep(self, region: str) -> SweepReport:
        """
        Run one sweep pass.

        Raises:
            SweepListError: Listing failed; nothing was deleted
            ResourceIdParseError: A matching namespace had a malformed ID
            SweepDeleteError: A delete failed for a reason other than not-found
        """
        CorrelationContext.new_correlation_id()
        report = SweepReport(region=region)

        self._logger.info("Retrieving the Service Bus Namespaces..", operation="sweep", region=region)
        namespaces = await self._list_all()
        report.listed = len(namespaces)

        for descriptor in namespaces:
            if not self._policy.should_sweep(descriptor, region):
                self._logger.debug(
                    f"Skipping Service Bus Namespace {descriptor.name!r} in {descriptor.location!r}",
                    operation="sweep_skip",
                    name=descriptor.name,
                )
                continue

            resource_group, name = self._address(descriptor)
            report.matched.append(name)

            self._logger.log_operation("delete", resource_group, name, region=region)
            try:
                await self._client.delete(resource_group, name)
            except AzureError as e:
                if is_not_found(e):
                    self._logger.info(
                        f"Service Bus Namespace {name!r} in resource group {resource_group!r} was already deleted",
                        operation="delete",
                        resource_group=resource_group,
                        name=name,
                    )
                    report.already_absent.append(name)
                    continue
                self._logger.log_error(
                    "delete",
                    type(e).__name__,
                    str(e),
                    resource_group=resource_group,
                    name=name,
                )
                raise SweepDeleteError(resource_group, name, e) from e

            report.deleted.append(name)

        self._logger.info(
            f"Sweep of {region} finished: {len(report.deleted)} deleted, "
            f"{len(report.already_absent)} already absent",
            operation="sweep",
            region=region,
            listed=report.listed,
        )
        return report

    async def _list_all(self) -> List[NamespaceDescriptor]:
        # Drain every page before deleting anything
        try:
            return [descriptor async for descriptor in self._client.list_by_subscription()]
        except AzureError as e:
            self._logger.log_error("list", type(e).__name__, str(e))
            raise SweepListError(e) from e

    @staticmethod
    def _address(descriptor: NamespaceDescriptor):
        resource_id = parse_resource_id(descriptor.id)
        name = resource_id.path.get(NAMESPACES_SEGMENT)
        if not name:
            raise ResourceIdParseError(descriptor.id, f"no {NAMESPACES_SEGMENT!r} segment")
        return resource_id.resource_group, name


# ========== Sweeper registry ==========

SweeperFunc = Callable[[NamespaceClient, str, SweepPolicy], Awaitable[SweepReport]]


class SweeperRegistry:
    """Named sweepers run on demand by a test harness or the CLI."""

    def __init__(self):
        self._sweepers: Dict[str, SweeperFunc] = {}

    def register(self, name: str, func: SweeperFunc) -> None:
        if name in self._sweepers:
            raise ValueError(f"Sweeper {name!r} is already registered")
        self._sweepers[name] = func

    def get(self, name: str) -> SweeperFunc:
        try:
            return self._sweepers[name]
        except KeyError:
            raise UnknownSweeperError(name, self.names()) from None

    def names(self) -> List[str]:
        return sorted(self._sweepers)

    async def run(
        self,
        name: str,
        client: NamespaceClient,
        region: str,
        policy: Optional[SweepPolicy] = None,
    ) -> SweepReport:
        return await self.get(name)(client, region, policy or SweepPolicy())


async def sweep_servicebus_namespaces(
    client: NamespaceClient, region: str, policy: SweepPolicy
) -> SweepReport:
    return await SweepEngine(client, policy).sweep(region)


def default_registry() -> SweeperRegistry:
    """Registry with the namespace sweeper registered."""
    registry = SweeperRegistry()
    registry.register(NAMESPACE_SWEEPER_NAME, sweep_servicebus_namespaces)
    return registry
