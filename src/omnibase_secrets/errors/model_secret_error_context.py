# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret Error Context Configuration Model.

This module defines the configuration model for secret error context,
encapsulating the structured fields shared by every secrets error so that
error constructors stay small while remaining strongly typed.
"""

from __future__ import annotations

from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class ModelSecretErrorContext(BaseModel):
    """Configuration model for secret error context.

    Attributes:
        operation: Operation being performed (fetch_one, fetch_all, validate, ...)
        address: Tree address the operation targeted, if any
        backend_path: Backend path the operation targeted, if any
        correlation_id: Correlation ID for tracing a fetch cycle

    Example:
        >>> context = ModelSecretErrorContext(
        ...     operation="fetch_one",
        ...     address="db.primary",
        ...     backend_path="secret/db",
        ...     correlation_id=uuid4(),
        ... )
        >>> raise BackendCommunicationError("Backend read failed", context=context)
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    operation: str | None = Field(
        default=None,
        description="Operation being performed (fetch_one, fetch_all, validate, ...)",
    )
    address: str | None = Field(
        default=None,
        description="Secret tree address (dotted path, '.' for root)",
    )
    backend_path: str | None = Field(
        default=None,
        description="Opaque backend path the secret is read from",
    )
    correlation_id: UUID | None = Field(
        default=None,
        description="Correlation ID for tracing a fetch cycle",
    )

    @classmethod
    def with_correlation(
        cls,
        correlation_id: UUID | None = None,
        **kwargs: str | None,
    ) -> ModelSecretErrorContext:
        """Create a context, generating a correlation ID when none is given."""
        return cls(correlation_id=correlation_id or uuid4(), **kwargs)


__all__ = ["ModelSecretErrorContext"]
