# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Shared pytest configuration for all unit tests.

Every test collected under tests/unit/** gets the ``unit`` marker, so the
suite can be split without per-file pytestmark declarations:

    pytest -m unit
    pytest -m "not unit"

NOTE: pytestmark in a conftest.py does not propagate to test modules, hence
the collection hook below.
"""

import pytest


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Add the unit marker to tests whose file lives under tests/unit."""
    unit_marker = pytest.mark.unit

    for item in items:
        if "tests/unit" not in item.path.as_posix():
            continue
        if not any(marker.name == "unit" for marker in item.iter_markers()):
            item.add_marker(unit_marker)
