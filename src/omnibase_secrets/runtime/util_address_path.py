# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Dotted-address helpers for the secret tree.

Addresses are dotted paths (``"database.postgres"``); ``"."`` is the tree
root. These helpers mutate the dicts they are given and are only called by
SecretStore while it holds its lock.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

ROOT_ADDRESS: str = "."


def is_root_address(address: str | None) -> bool:
    """True for the root address (``"."``) and for no address at all."""
    return address is None or address == ROOT_ADDRESS


def split_address(address: str) -> list[str]:
    """Split a dotted address into its keys.

    Raises:
        ValueError: If the address is empty or has empty segments ("a..b")
    """
    if not address:
        raise ValueError("Secret address must be a non-empty string")
    keys = address.split(".")
    if any(not key for key in keys):
        raise ValueError(f"Invalid secret address '{address}'")
    return keys


def deep_merge(target: dict[str, Any], source: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge ``source`` into ``target`` in place.

    Nested mappings are merged key by key; any other value from ``source``
    replaces the value in ``target``. Keys only present in ``target`` are kept.
    """
    for key, value in source.items():
        existing = target.get(key)
        if isinstance(value, Mapping) and isinstance(existing, dict):
            deep_merge(existing, value)
        elif isinstance(value, Mapping):
            target[key] = deep_merge({}, value)
        else:
            target[key] = value
    return target


def merge_at(tree: dict[str, Any], address: str, data: Mapping[str, Any]) -> None:
    """Deep-merge ``data`` into the subtree at ``address``, creating it if needed.

    Non-mapping values found on the way are replaced by mappings.
    """
    node = tree
    for key in split_address(address):
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    deep_merge(node, data)


_MISSING = object()


def lookup(tree: Mapping[str, Any], address: str, default: Any = None) -> Any:
    """Return the value at ``address`` or ``default`` if any key is missing."""
    node: Any = tree
    for key in split_address(address):
        if not isinstance(node, Mapping):
            return default
        node = node.get(key, _MISSING)
        if node is _MISSING:
            return default
    return node


__all__: list[str] = [
    "ROOT_ADDRESS",
    "deep_merge",
    "is_root_address",
    "lookup",
    "merge_at",
    "split_address",
]
