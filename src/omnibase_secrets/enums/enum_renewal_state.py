# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Renewal state enumeration for per-address renewal timers."""

from enum import Enum


class EnumRenewalState(str, Enum):
    """Lifecycle of a single address in the renewal scheduler.

    UNSCHEDULED -> SCHEDULED -> FIRED -> (SCHEDULED | UNSCHEDULED)
    """

    UNSCHEDULED = "UNSCHEDULED"
    SCHEDULED = "SCHEDULED"
    FIRED = "FIRED"
