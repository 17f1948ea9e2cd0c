# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""In-memory secret tree with copy-on-read access.

SecretStore owns the aggregated secret tree and is its only mutator. All
writes go through ``merge``/``merge_tree``; all reads go through ``get``,
which returns deep copies so callers can never corrupt internal state.

Merge Semantics:
    - Root address ("."): shallow merge of the record's top-level keys into
      the tree root (``dict.update``)
    - Any other address: deep merge into the subtree at that address, so
      several fetches can contribute different sub-keys without clobbering
      each other

Thread Safety:
    The engine runs on one event loop and needs no locking for its own
    writes, but ``get`` is also the public accessor and may be called from
    other threads while renewals merge. A ``threading.RLock`` serializes
    merges and reads so a reader never observes a partially merged record.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Mapping
from typing import Any

from omnibase_secrets.runtime.util_address_path import (
    deep_merge,
    is_root_address,
    lookup,
    merge_at,
)

logger = logging.getLogger(__name__)


class SecretStore:
    """The aggregated secret tree.

    Example:
        >>> store = SecretStore()
        >>> store.merge(".", {"a": 1})
        >>> store.merge("x", {"a": 1})
        >>> store.get()
        {'a': 1, 'x': {'a': 1}}
        >>> store.get("x.a")
        1
    """

    def __init__(self) -> None:
        self._tree: dict[str, Any] = {}
        self._lock = threading.RLock()

    def merge(self, address: str, data: Mapping[str, Any]) -> None:
        """Merge one record's data at ``address``.

        Args:
            address: Dotted tree address, or "." for the root
            data: Record data (copied; later caller mutations have no effect)

        Raises:
            TypeError: If ``data`` is not a mapping
            ValueError: If ``address`` is malformed
        """
        if not isinstance(data, Mapping):
            raise TypeError(
                f"Secret data must be a mapping, got {type(data).__name__}"
            )
        snapshot = copy.deepcopy(dict(data))
        with self._lock:
            if is_root_address(address):
                self._tree.update(snapshot)
            else:
                merge_at(self._tree, address, snapshot)
        logger.debug(
            "Merged secret into store",
            extra={"address": address, "key_count": len(snapshot)},
        )

    def merge_tree(self, data: Mapping[str, Any]) -> None:
        """Deep-merge a full tree into the root (used for validator output)."""
        if not isinstance(data, Mapping):
            raise TypeError(
                f"Secret tree must be a mapping, got {type(data).__name__}"
            )
        snapshot = copy.deepcopy(dict(data))
        with self._lock:
            deep_merge(self._tree, snapshot)

    def get(self, address: str | None = None, default: Any = None) -> Any:
        """Return a deep copy of the tree or of the subtree at ``address``.

        Returns ``default`` if the address does not exist.
        """
        with self._lock:
            if is_root_address(address):
                return copy.deepcopy(self._tree)
            value = lookup(self._tree, address, default=_ABSENT)
            if value is _ABSENT:
                return default
            return copy.deepcopy(value)

    def clear(self) -> None:
        """Drop every secret."""
        with self._lock:
            self._tree.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._tree)

    def __repr__(self) -> str:
        # Never expose secret values.
        with self._lock:
            return f"SecretStore(keys={sorted(self._tree)!r})"


_ABSENT = object()


__all__: list[str] = ["SecretStore"]
