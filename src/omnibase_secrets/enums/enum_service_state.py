"""Readiness state enumeration for the secrets service."""

from enum import Enum


class EnumServiceState(str, Enum):
    """Externally visible readiness of ServiceSecrets."""

    PENDING = "PENDING"
    READY = "READY"
    FAILED = "FAILED"
    CLOSED = "CLOSED"
