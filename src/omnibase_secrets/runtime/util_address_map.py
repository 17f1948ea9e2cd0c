# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Flatten nested address-map documents into backend path -> address pairs."""

from __future__ import annotations

from collections.abc import Mapping

from omnibase_secrets.errors import ModelSecretErrorContext, SecretsConfigurationError


def flatten_address_map(
    config: Mapping[str, object], base_path: str = ""
) -> dict[str, str]:
    """Flatten a nested address map.

    Nested keys are concatenated without a separator to build the backend
    path, so prefixes carry their own slashes. Leaf strings are tree
    addresses.

    Example:
        >>> flatten_address_map({"secret/": {"db": "database", "app": "."}})
        {'secret/db': 'database', 'secret/app': '.'}

    Raises:
        SecretsConfigurationError: On a leaf that is neither a string nor a
            mapping, or on an empty address
    """
    result: dict[str, str] = {}
    for key, value in config.items():
        path = f"{base_path}{key}"
        if isinstance(value, str):
            if not value:
                raise SecretsConfigurationError(
                    f"Empty secret address for backend path '{path}'",
                    context=ModelSecretErrorContext(
                        operation="flatten_address_map", backend_path=path
                    ),
                )
            result[path] = value
        elif isinstance(value, Mapping):
            result.update(flatten_address_map(value, path))
        else:
            raise SecretsConfigurationError(
                f"Invalid address map entry for '{path}': expected a string "
                f"address or a nested mapping, got {type(value).__name__}",
                context=ModelSecretErrorContext(
                    operation="flatten_address_map", backend_path=path
                ),
            )
    return result


def addresses_for(address_map: Mapping[str, str], address: str) -> list[str]:
    """Backend paths whose target address is ``address``."""
    return [path for path, target in address_map.items() if target == address]


__all__: list[str] = ["addresses_for", "flatten_address_map"]
