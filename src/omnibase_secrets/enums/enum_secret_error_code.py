# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Error code enumeration for secret acquisition errors."""

from enum import Enum


class EnumSecretErrorCode(str, Enum):
    """Classification codes carried by every SecretsRuntimeError."""

    OPERATION_FAILED = "OPERATION_FAILED"
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    BACKEND_COMMUNICATION = "BACKEND_COMMUNICATION"
    TIMEOUT = "TIMEOUT"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    RENEWAL_FAILED = "RENEWAL_FAILED"
    NOT_READY = "NOT_READY"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
