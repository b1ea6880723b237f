"""
Unit tests for declared state loading.

Author: sbnamespace contributors
"""

import json

import pytest
import yaml

from sbnamespace.namespaces.state import load_state, parse_state

TERRAFORM_STATE = {
    "version": 4,
    "resources": [
        {
            "mode": "managed",
            "type": "azurerm_resource_group",
            "name": "test",
            "instances": [{"attributes": {"name": "acctestRG-1", "location": "westeurope"}}],
        },
        {
            "mode": "managed",
            "type": "azurerm_servicebus_namespace",
            "name": "test",
            "instances": [{
                "attributes": {
                    "name": "acctestservicebusnamespace-1",
                    "resource_group_name": "acctestRG-1",
                    "capacity": 1,
                    "zone_redundant": False,
                    "tags": {},
                }
            }],
        },
        {
            "mode": "data",
            "type": "azurerm_client_config",
            "name": "current",
            "instances": [{"attributes": {"tenant_id": "t"}}],
        },
    ],
}


class TestParseState:
    """Test decoding declared state."""

    def test_terraform_state(self):
        """Test managed resources are read from a v4 state document."""
        state = parse_state(TERRAFORM_STATE)

        assert len(state) == 2
        namespace = state.get("azurerm_servicebus_namespace.test")
        assert namespace.name == "acctestservicebusnamespace-1"
        assert namespace.resource_group_name == "acctestRG-1"

    def test_attributes_are_strings(self):
        """Test attribute values are flattened to strings."""
        attributes = parse_state(TERRAFORM_STATE).get("azurerm_servicebus_namespace.test").attributes

        assert attributes["capacity"] == "1"
        assert attributes["zone_redundant"] == "false"
        assert "tags" not in attributes

    def test_indexed_instances(self):
        """Test count/for_each instances get distinct addresses."""
        state = parse_state({"resources": [{
            "mode": "managed",
            "type": "azurerm_servicebus_namespace",
            "name": "test",
            "instances": [
                {"index_key": 0, "attributes": {"name": "a"}},
                {"index_key": 1, "attributes": {"name": "b"}},
            ],
        }]})

        assert list(state.resources) == [
            "azurerm_servicebus_namespace.test[0]",
            "azurerm_servicebus_namespace.test[1]",
        ]

    def test_flat_mapping(self):
        """Test the flat address mapping layout."""
        state = parse_state({
            "azurerm_servicebus_namespace.test": {
                "type": "azurerm_servicebus_namespace",
                "attributes": {"name": "ns", "resource_group_name": "rg"},
            }
        })

        assert [r.address for r in state.of_type()] == ["azurerm_servicebus_namespace.test"]

    def test_terraform_resource_requires_type_and_name(self):
        """Test malformed state resources raise ValueError."""
        with pytest.raises(ValueError):
            parse_state({"resources": [{"mode": "managed", "instances": []}]})

    def test_flat_mapping_requires_type(self):
        """Test entries without a type are rejected."""
        with pytest.raises(ValueError):
            parse_state({"azurerm_servicebus_namespace.test": {"attributes": {}}})


class TestLoadState:
    """Test reading state files."""

    def test_load_json(self, tmp_path):
        """Test loading a JSON state file."""
        path = tmp_path / "terraform.tfstate"
        path.write_text(json.dumps(TERRAFORM_STATE))

        assert len(load_state(path)) == 2

    def test_load_yaml(self, tmp_path):
        """Test loading a YAML state file."""
        path = tmp_path / "state.yaml"
        path.write_text(yaml.dump({
            "azurerm_servicebus_namespace.test": {
                "type": "azurerm_servicebus_namespace",
                "attributes": {"name": "ns", "resource_group_name": "rg"},
            }
        }))

        assert load_state(path).get("azurerm_servicebus_namespace.test").name == "ns"

    def test_missing_file(self, tmp_path):
        """Test a missing state file."""
        with pytest.raises(FileNotFoundError):
            load_state(tmp_path / "missing.tfstate")

    def test_invalid_json(self, tmp_path):
        """Test undecodable state surfaces as ValueError."""
        path = tmp_path / "terraform.tfstate"
        path.write_text("{not json")

        with pytest.raises(ValueError):
            load_state(path)
