# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for ValidationGate."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import BaseModel, ConfigDict

from omnibase_secrets.errors import SecretValidationError
from omnibase_secrets.runtime.secret_store import SecretStore
from omnibase_secrets.runtime.validation_gate import ValidationGate


class ModelDatabaseSecrets(BaseModel):
    model_config = ConfigDict(extra="allow")

    password: str
    port: int = 5432


class ModelAppSecrets(BaseModel):
    model_config = ConfigDict(extra="allow")

    db: ModelDatabaseSecrets


@pytest.fixture
def store() -> SecretStore:
    store = SecretStore()
    store.merge("db", {"password": "pw", "user": "svc"})
    return store


class TestValidationGate:
    """Test validator kinds and merge-back."""

    @pytest.mark.asyncio
    async def test_disabled_gate_is_noop(self, store: SecretStore) -> None:
        """Without a validator the tree is left alone."""
        gate = ValidationGate()

        await gate.apply(store)

        assert gate.enabled is False
        assert store.get() == {"db": {"password": "pw", "user": "svc"}}

    @pytest.mark.asyncio
    async def test_sync_validator_output_is_merged(self, store: SecretStore) -> None:
        """Returned keys are deep-merged; omitted keys survive."""

        def add_defaults(tree: dict[str, Any]) -> dict[str, Any]:
            return {"db": {"port": 5432}}

        gate = ValidationGate(add_defaults)
        assert gate.enabled is True

        await gate.apply(store)

        assert store.get("db") == {"password": "pw", "user": "svc", "port": 5432}

    @pytest.mark.asyncio
    async def test_async_validator(self, store: SecretStore) -> None:
        """Async validators are awaited."""

        async def validate(tree: dict[str, Any]) -> dict[str, Any]:
            return {"validated": True}

        await ValidationGate(validate).apply(store)

        assert store.get("validated") is True

    @pytest.mark.asyncio
    async def test_none_means_unchanged(self, store: SecretStore) -> None:
        """A validator returning None leaves the tree as it was."""
        before = store.get()

        await ValidationGate(lambda tree: None).apply(store)

        assert store.get() == before

    @pytest.mark.asyncio
    async def test_validator_sees_a_copy(self, store: SecretStore) -> None:
        """In-place edits by the validator do not reach the store."""

        def mutate(tree: dict[str, Any]) -> None:
            tree["db"]["password"] = "tampered"

        await ValidationGate(mutate).apply(store)

        assert store.get("db.password") == "pw"

    @pytest.mark.asyncio
    async def test_validator_error_is_wrapped(self, store: SecretStore) -> None:
        """Any validator exception becomes SecretValidationError."""

        def reject(tree: dict[str, Any]) -> None:
            raise ValueError("missing api_key")

        with pytest.raises(SecretValidationError) as exc_info:
            await ValidationGate(reject).apply(store)

        assert isinstance(exc_info.value.__cause__, ValueError)
        assert "ValueError" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_non_mapping_result_rejected(self, store: SecretStore) -> None:
        """Validators must return a mapping or None."""
        with pytest.raises(SecretValidationError, match="must return a mapping"):
            await ValidationGate(lambda tree: ["not", "a", "mapping"]).apply(store)

    @pytest.mark.asyncio
    async def test_pydantic_model_applies_defaults(self, store: SecretStore) -> None:
        """A model class validates the tree and contributes its defaults."""
        await ValidationGate(ModelAppSecrets).apply(store)

        assert store.get("db") == {"password": "pw", "user": "svc", "port": 5432}

    @pytest.mark.asyncio
    async def test_pydantic_model_rejection(self) -> None:
        """Model validation errors fail the gate."""
        store = SecretStore()
        store.merge("db", {"user": "svc"})

        with pytest.raises(SecretValidationError):
            await ValidationGate(ModelAppSecrets).apply(store)
