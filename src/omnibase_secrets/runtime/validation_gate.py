# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Validation gate applied to the merged secret tree before publishing.

Supported Validators:
    - Sync callable ``(tree) -> tree | None``; raises on invalid input
    - Async callable ``async (tree) -> tree | None``
    - Pydantic model class; the tree is ``model_validate``d and the
      ``model_dump()`` output (schema defaults applied) is merged back

Merge-Back:
    The validator sees a deep copy of the tree. A mapping result is
    deep-merged into the store, so keys the validator did not return are
    kept and defaults cannot erase fetched values. ``None`` means "no
    changes". Any failure is raised as SecretValidationError and is
    terminal for the fetch cycle.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Union
from uuid import UUID

from pydantic import BaseModel

from omnibase_secrets.errors import ModelSecretErrorContext, SecretValidationError
from omnibase_secrets.runtime.secret_store import SecretStore

logger = logging.getLogger(__name__)

SecretValidator = Union[
    Callable[[dict[str, Any]], Union[Mapping[str, Any], None]],
    Callable[[dict[str, Any]], Awaitable[Union[Mapping[str, Any], None]]],
    type[BaseModel],
]


class ValidationGate:
    """Runs a caller-supplied validator over the merged secret tree."""

    def __init__(self, validator: SecretValidator | None = None) -> None:
        self._validator = validator

    @property
    def enabled(self) -> bool:
        return self._validator is not None

    async def apply(
        self, store: SecretStore, correlation_id: UUID | None = None
    ) -> None:
        """Validate the store's tree and merge the validator output back.

        Raises:
            SecretValidationError: If the validator raises or returns a non-mapping
        """
        if self._validator is None:
            return

        ctx = ModelSecretErrorContext(
            operation="validate", correlation_id=correlation_id
        )
        tree = store.get()

        try:
            result = await self._run(tree)
        except SecretValidationError:
            raise
        except Exception as e:
            logger.error(
                "Secret validation failed",
                extra={
                    "error_type": type(e).__name__,
                    "correlation_id": str(correlation_id),
                },
            )
            raise SecretValidationError(
                f"Secrets failed validation: {type(e).__name__}",
                context=ctx,
            ) from e

        if result is None:
            return
        if not isinstance(result, Mapping):
            raise SecretValidationError(
                "Secret validator must return a mapping or None, "
                f"got {type(result).__name__}",
                context=ctx,
            )
        store.merge_tree(result)
        logger.debug(
            "Secrets validated",
            extra={"correlation_id": str(correlation_id)},
        )

    async def _run(self, tree: dict[str, Any]) -> object:
        validator = self._validator
        if isinstance(validator, type) and issubclass(validator, BaseModel):
            return validator.model_validate(tree).model_dump()
        if validator is None:
            return None
        result = validator(tree)
        if inspect.isawaitable(result):
            result = await result
        return result


__all__: list[str] = ["SecretValidator", "ValidationGate"]
