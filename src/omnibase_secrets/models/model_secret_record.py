# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret Record Model.

The in-memory result of one backend read. ``data`` is always a mapping;
scalar payloads are rejected at validation so that every record can be
merged into the secret tree.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ModelSecretRecord(BaseModel):
    """One fetched secret.

    Attributes:
        data: Secret fields (never logged)
        valid_for_seconds: Lease duration; None or <= 0 means the secret does not expire

    Example:
        >>> record = ModelSecretRecord(data={"password": "..."}, valid_for_seconds=900)
        >>> record.expires
        True
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    data: dict[str, Any] = Field(
        default_factory=dict,
        description="Secret fields, merged into the tree at the target address",
    )
    valid_for_seconds: float | None = Field(
        default=None,
        description="Lease duration in seconds (None or <= 0: never renewed)",
    )

    @property
    def expires(self) -> bool:
        """True if this record must be renewed after valid_for_seconds."""
        return self.valid_for_seconds is not None and self.valid_for_seconds > 0

    def __repr__(self) -> str:
        # Field names only; values are secret.
        return (
            f"ModelSecretRecord(keys={sorted(self.data)!r}, "
            f"valid_for_seconds={self.valid_for_seconds!r})"
        )

    __str__ = __repr__


__all__: list[str] = ["ModelSecretRecord"]
