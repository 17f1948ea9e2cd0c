# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secrets Engine Enumerations Module.

Exports:
    EnumRenewalState: Per-address renewal timer lifecycle (UNSCHEDULED, SCHEDULED, FIRED)
    EnumSecretErrorCode: Error classification codes for SecretsRuntimeError
    EnumServiceState: Readiness of the secrets service (PENDING, READY, FAILED, CLOSED)
"""

from omnibase_secrets.enums.enum_renewal_state import EnumRenewalState
from omnibase_secrets.enums.enum_secret_error_code import EnumSecretErrorCode
from omnibase_secrets.enums.enum_service_state import EnumServiceState

__all__: list[str] = [
    "EnumRenewalState",
    "EnumSecretErrorCode",
    "EnumServiceState",
]
