"""
Declared State Loading

Reads the declarative tool's record of managed resources. Two layouts are
accepted:

* a Terraform v4 state document (``resources[].instances[].attributes``)
* a flat mapping ``{address: {"type": ..., "attributes": {...}}}`` in YAML or JSON

Author: sbnamespace contributors
"""

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Union

import yaml

from .models import DeclaredResource, ReconciliationState


def _stringify(attributes: Mapping[str, Any]) -> Dict[str, str]:
    # Declared attributes are flat strings; nested values are dropped
    flat: Dict[str, str] = {}
    for key, value in attributes.items():
        if value is None or isinstance(value, (dict, list)):
            continue
        if isinstance(value, bool):
            flat[key] = "true" if value else "false"
        else:
            flat[key] = str(value)
    return flat


def _from_terraform(document: Mapping[str, Any]) -> ReconciliationState:
    state = ReconciliationState()
    for resource in document.get("resources", []):
        if not isinstance(resource, Mapping) or "type" not in resource or "name" not in resource:
            raise ValueError(f"State resource must be a mapping with a 'type' and 'name': {resource!r}")
        if resource.get("mode", "managed") != "managed":
            continue
        base = f"{resource['type']}.{resource['name']}"
        if resource.get("module"):
            base = f"{resource['module']}.{base}"
        for instance in resource.get("instances", []):
            address = base
            if "index_key" in instance:
                address = f"{base}[{json.dumps(instance['index_key'])}]"
            state.add(DeclaredResource(
                address=address,
                type=resource["type"],
                attributes=_stringify(instance.get("attributes", {})),
            ))
    return state


def _from_mapping(document: Mapping[str, Any]) -> ReconciliationState:
    state = ReconciliationState()
    for address, entry in document.items():
        if not isinstance(entry, Mapping) or "type" not in entry:
            raise ValueError(f"Declared resource {address!r} must be a mapping with a 'type'")
        state.add(DeclaredResource(
            address=address,
            type=entry["type"],
            attributes=_stringify(entry.get("attributes", {})),
        ))
    return state


def parse_state(document: Mapping[str, Any]) -> ReconciliationState:
    """Build a ReconciliationState from an already-decoded document."""
    if not isinstance(document, Mapping):
        raise ValueError("Declared state must be a mapping")
    if "resources" in document and isinstance(document["resources"], list):
        return _from_terraform(document)
    return _from_mapping(document)


def load_state(path: Union[str, Path]) -> ReconciliationState:
    """
    Load declared state from a file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the document has neither supported layout
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"State file not found: {path}")

    with open(path, 'r') as f:
        if path.suffix in ['.yaml', '.yml']:
            document = yaml.safe_load(f) or {}
        else:
            document = json.load(f)

    return parse_state(document)
