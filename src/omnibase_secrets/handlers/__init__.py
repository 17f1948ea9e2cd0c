# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret backend handlers.

Exports:
    HandlerVault: HashiCorp Vault backend over the hvac client
    ModelVaultHandlerConfig: Connection settings for HandlerVault
"""

from omnibase_secrets.handlers.handler_vault import HandlerVault
from omnibase_secrets.handlers.model_vault_handler_config import (
    ModelVaultHandlerConfig,
)

__all__: list[str] = ["HandlerVault", "ModelVaultHandlerConfig"]
