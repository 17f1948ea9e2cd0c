# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for the secrets error hierarchy."""

from __future__ import annotations

from uuid import UUID, uuid4

import pytest

from omnibase_secrets.enums import EnumSecretErrorCode
from omnibase_secrets.errors import (
    BackendCommunicationError,
    InfraAuthenticationError,
    ModelSecretErrorContext,
    SecretFetchTimeoutError,
    SecretRenewalError,
    SecretsConfigurationError,
    SecretsNotReadyError,
    SecretsRuntimeError,
    SecretValidationError,
)


class TestSecretErrorContext:
    """Test ModelSecretErrorContext."""

    def test_with_correlation_generates_id(self) -> None:
        context = ModelSecretErrorContext.with_correlation(operation="fetch_one")

        assert isinstance(context.correlation_id, UUID)
        assert context.operation == "fetch_one"

    def test_with_correlation_keeps_given_id(self) -> None:
        correlation_id = uuid4()

        context = ModelSecretErrorContext.with_correlation(correlation_id, address="db")

        assert context.correlation_id == correlation_id

    def test_context_is_frozen(self) -> None:
        context = ModelSecretErrorContext(operation="fetch_one")

        with pytest.raises(Exception):
            context.operation = "other"  # type: ignore[misc]


class TestSecretsRuntimeError:
    """Test structured fields shared by every error."""

    def test_context_fields_are_exposed(self) -> None:
        correlation_id = uuid4()
        context = ModelSecretErrorContext(
            operation="fetch_one",
            address="db",
            backend_path="secret/db",
            correlation_id=correlation_id,
        )

        error = SecretsRuntimeError("failed", context=context, attempts=3)

        assert error.message == "failed"
        assert str(error) == "failed"
        assert error.correlation_id == correlation_id
        assert error.error_code is EnumSecretErrorCode.OPERATION_FAILED
        assert error.extra_context == {
            "attempts": 3,
            "operation": "fetch_one",
            "address": "db",
            "backend_path": "secret/db",
        }

    def test_without_context(self) -> None:
        error = SecretsRuntimeError("failed")

        assert error.context is None
        assert error.correlation_id is None
        assert error.extra_context == {}

    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (SecretsConfigurationError("x"), EnumSecretErrorCode.INVALID_CONFIGURATION),
            (BackendCommunicationError("x"), EnumSecretErrorCode.BACKEND_COMMUNICATION),
            (SecretFetchTimeoutError("x"), EnumSecretErrorCode.TIMEOUT),
            (SecretValidationError("x"), EnumSecretErrorCode.VALIDATION_FAILED),
            (SecretRenewalError("x"), EnumSecretErrorCode.RENEWAL_FAILED),
            (SecretsNotReadyError("x"), EnumSecretErrorCode.NOT_READY),
            (InfraAuthenticationError("x"), EnumSecretErrorCode.AUTHENTICATION_ERROR),
        ],
    )
    def test_error_codes(
        self, error: SecretsRuntimeError, code: EnumSecretErrorCode
    ) -> None:
        assert error.error_code is code
        assert isinstance(error, SecretsRuntimeError)

    def test_backend_error_status_code(self) -> None:
        error = BackendCommunicationError("unavailable", status_code=503)

        assert error.status_code == 503
        assert error.extra_context["status_code"] == 503

    def test_timeout_is_backend_error(self) -> None:
        error = SecretFetchTimeoutError("timed out", timeout_seconds=5.0)

        assert isinstance(error, BackendCommunicationError)
        assert error.status_code is None
        assert error.timeout_seconds == 5.0

    def test_repr_includes_code(self) -> None:
        assert "NOT_READY" in repr(SecretsNotReadyError("not ready"))
