"""
Unit tests for Azure resource identifier parsing.

Author: sbnamespace contributors
"""

import pytest
from pydantic import ValidationError

from sbnamespace.namespaces.exceptions import ResourceIdParseError
from sbnamespace.namespaces.resource_id import ResourceIdentifier, parse_resource_id

SUBSCRIPTION = "11111111-2222-3333-4444-555555555555"
NAMESPACE_ID = (
    f"/subscriptions/{SUBSCRIPTION}/resourceGroups/rg1"
    "/providers/Microsoft.ServiceBus/namespaces/ns1"
)


class TestParseResourceId:
    """Test well-formed identifiers."""

    def test_namespace_identifier(self):
        """Test a namespace identifier yields resource group and path."""
        resource_id = parse_resource_id(NAMESPACE_ID)

        assert resource_id.subscription_id == SUBSCRIPTION
        assert resource_id.resource_group == "rg1"
        assert resource_id.provider == "Microsoft.ServiceBus"
        assert resource_id.path == {"namespaces": "ns1"}
        assert resource_id.namespace_name == "ns1"

    def test_resource_group_only(self):
        """Test a resource group identifier has no provider or path."""
        resource_id = parse_resource_id(f"/subscriptions/{SUBSCRIPTION}/resourceGroups/rg1")

        assert resource_id.resource_group == "rg1"
        assert resource_id.provider is None
        assert resource_id.path == {}
        assert resource_id.namespace_name is None

    def test_lowercase_resource_groups_key(self):
        """Test the lower-cased resourcegroups key some APIs return."""
        resource_id = parse_resource_id(
            f"/subscriptions/{SUBSCRIPTION}/resourcegroups/rg1/providers/Microsoft.ServiceBus/namespaces/ns1"
        )

        assert resource_id.resource_group == "rg1"
        assert "resourcegroups" not in resource_id.path

    def test_trailing_slash_and_whitespace(self):
        """Test surrounding whitespace and trailing slash are ignored."""
        resource_id = parse_resource_id(f"  {NAMESPACE_ID}/  ")

        assert resource_id.path == {"namespaces": "ns1"}

    def test_full_management_url(self):
        """Test only the path of a management URL is used."""
        resource_id = parse_resource_id(f"https://management.azure.com{NAMESPACE_ID}?api-version=2021-11-01")

        assert resource_id.resource_group == "rg1"
        assert resource_id.path == {"namespaces": "ns1"}

    def test_nested_subscriptions_segment(self):
        """Test a topic subscription does not overwrite the subscription ID."""
        resource_id = parse_resource_id(
            f"{NAMESPACE_ID}/topics/orders/subscriptions/billing"
        )

        assert resource_id.subscription_id == SUBSCRIPTION
        assert resource_id.path == {
            "namespaces": "ns1",
            "topics": "orders",
            "subscriptions": "billing",
        }

    def test_path_preserves_order(self):
        """Test path segments keep identifier order."""
        resource_id = parse_resource_id(f"{NAMESPACE_ID}/queues/q1/authorizationRules/rule1")

        assert list(resource_id.path) == ["namespaces", "queues", "authorizationRules"]

    def test_duplicate_key_last_write_wins(self):
        """Test a repeated type segment keeps the later value."""
        resource_id = parse_resource_id(f"{NAMESPACE_ID}/namespaces/ns2")

        assert resource_id.path == {"namespaces": "ns2"}

    def test_deterministic(self):
        """Test parsing the same string twice gives equal results."""
        assert parse_resource_id(NAMESPACE_ID) == parse_resource_id(NAMESPACE_ID)

    def test_identifier_is_immutable(self):
        """Test parsed identifiers cannot be reassigned."""
        resource_id = parse_resource_id(NAMESPACE_ID)

        with pytest.raises(ValidationError):
            resource_id.resource_group = "other"

    def test_path_is_read_only(self):
        """Test path segments cannot be changed after parsing."""
        resource_id = parse_resource_id(NAMESPACE_ID)

        with pytest.raises(TypeError):
            resource_id.path["namespaces"] = "other"

        assert resource_id.namespace_name == "ns1"


class TestParseResourceIdErrors:
    """Test malformed identifiers fail without partial results."""

    def test_missing_resource_group(self):
        """Test identifier without a resource group segment."""
        with pytest.raises(ResourceIdParseError) as exc_info:
            parse_resource_id(
                f"/subscriptions/{SUBSCRIPTION}/providers/Microsoft.ServiceBus/namespaces/ns1"
            )

        assert "no resource group" in str(exc_info.value)
        assert exc_info.value.error_code == "InvalidResourceId"

    def test_missing_subscription(self):
        """Test identifier without a subscription segment."""
        with pytest.raises(ResourceIdParseError) as exc_info:
            parse_resource_id("/resourceGroups/rg1/providers/Microsoft.ServiceBus/namespaces/ns1")

        assert "no subscription ID" in str(exc_info.value)

    def test_odd_number_of_segments(self):
        """Test identifier with a dangling type segment."""
        with pytest.raises(ResourceIdParseError) as exc_info:
            parse_resource_id(f"{NAMESPACE_ID}/queues")

        assert "not divisible by 2" in str(exc_info.value)

    def test_empty_segment(self):
        """Test identifier with an empty value."""
        with pytest.raises(ResourceIdParseError):
            parse_resource_id(f"/subscriptions//resourceGroups/rg1")

    @pytest.mark.parametrize("raw", ["", "   ", "subscriptions/abc/resourceGroups/rg1", "not an id"])
    def test_not_an_absolute_path(self, raw):
        """Test empty and relative identifiers."""
        with pytest.raises(ResourceIdParseError):
            parse_resource_id(raw)

    def test_error_details(self):
        """Test the offending identifier is attached to the error."""
        with pytest.raises(ResourceIdParseError) as exc_info:
            parse_resource_id("/subscriptions/abc")

        assert exc_info.value.resource_id == "/subscriptions/abc"
        assert exc_info.value.details["resource_id"] == "/subscriptions/abc"


class TestResourceIdentifier:
    """Test the identifier model."""

    def test_construct_directly(self):
        """Test building an identifier without parsing."""
        resource_id = ResourceIdentifier(
            subscription_id=SUBSCRIPTION,
            resource_group="rg1",
            path={"namespaces": "ns1"},
        )

        assert resource_id.namespace_name == "ns1"
        assert resource_id.provider is None

    def test_constructed_path_is_copied(self):
        """Test the caller's dict is not shared with the identifier."""
        segments = {"namespaces": "ns1"}
        resource_id = ResourceIdentifier(subscription_id=SUBSCRIPTION, resource_group="rg1", path=segments)

        segments["namespaces"] = "other"

        assert resource_id.namespace_name == "ns1"
