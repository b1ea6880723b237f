"""
Service Bus Namespace Constants

Centralized constants for error messages, naming conventions and allowed
configuration values.

Author: sbnamespace contributors
"""

# Resource type as known to the declarative tool
NAMESPACE_RESOURCE_TYPE = "azurerm_servicebus_namespace"

# Sweeper registered for namespaces
NAMESPACE_SWEEPER_NAME = "azurerm_servicebus_namespace"

# Identifier segments
NAMESPACES_SEGMENT = "namespaces"

# Test-created resources are prefixed with this (case-insensitive)
DEFAULT_TEST_NAME_PREFIXES = ("acctest",)

# Allowed configuration values
ALLOWED_CAPACITIES = (1, 2, 4)
ALLOWED_SKUS = ("Basic", "Standard", "Premium")

# Authorization rule created with every namespace
DEFAULT_AUTHORIZATION_RULE = "RootManageSharedAccessKey"

# Declared-state attributes
ATTR_NAME = "name"
ATTR_RESOURCE_GROUP = "resource_group_name"
DEFAULT_KEY_ATTRIBUTE_PATTERNS = {
    "default_primary_connection_string": r"Endpoint=.+",
    "default_secondary_connection_string": r"Endpoint=.+",
    "default_primary_key": r".+",
    "default_secondary_key": r".+",
}

# HTTP status codes consumed from the control plane
HTTP_NOT_FOUND = 404

# Error message templates
ERROR_CAPACITY_NOT_ALLOWED = "Service Bus Namespace Capacity can only be 1, 2 or 4"
ERROR_CAPACITY_NOT_INTEGER = "Service Bus Namespace Capacity must be an integer, got {type}"
ERROR_SKU_NOT_ALLOWED = "Service Bus Namespace SKU must be one of Basic, Standard or Premium, got '{value}'"
ERROR_NAMESPACE_NOT_FOUND = "Service Bus Namespace '{name}' (resource group: '{resource_group}') does not exist"
ERROR_NAMESPACE_STILL_EXISTS = "Service Bus Namespace '{name}' (resource group: '{resource_group}') still exists"
